"""File discovery and TODO marker scanning."""
