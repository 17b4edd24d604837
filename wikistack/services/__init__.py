"""
Services package for WikiStack.
Contains business logic layer for the application.
"""

from .page_service import PageService
from .user_service import UserService

__all__ = ["PageService", "UserService"]
