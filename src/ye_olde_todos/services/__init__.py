"""Attribution, pipeline and statistics services."""
