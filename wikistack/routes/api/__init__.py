"""
API routes package for WikiStack.
This package contains API route modules that return JSON/data responses.
"""

from . import pages

__all__ = ["pages"]
