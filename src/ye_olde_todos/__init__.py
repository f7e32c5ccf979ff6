"""
Ye Olde Todos - find TODO comments and rank them by age using git blame.

Scans a source tree for TODO markers, attributes each one to the commit that
introduced it, and reports them oldest first with optional age statistics.
"""

__version__ = "0.3.0"
