"""
Models package for WikiStack.
Contains data models and validation schemas.
"""

from .page import WikiPage, TagSearch
from .user import User

__all__ = ["WikiPage", "TagSearch", "User"]
