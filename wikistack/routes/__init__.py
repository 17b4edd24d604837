"""
Routes package for WikiStack.
This package contains all the route modules for the application.
"""

from .api import pages as api_pages
from .web import pages, search, user

__all__ = ["pages", "search", "user", "api_pages"]
