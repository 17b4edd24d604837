"""
Web routes package for WikiStack.
This package contains web route modules that return HTML template responses.
"""

from . import pages, search, user

__all__ = ["pages", "search", "user"]
