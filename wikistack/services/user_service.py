"""
User service layer for WikiStack.
Contains business logic for page authors.
"""

from typing import Optional, List
from loguru import logger
from ..database import get_users_collection, db_instance
from ..models.user import User


class UserService:
    """Service class for user-related operations."""

    @staticmethod
    async def find_or_create(name: str, email: str) -> Optional[User]:
        """
        Return the user registered with ``email``, creating it if needed.

        Args:
            name: Display name used when a new user is created
            email: E-mail address identifying the user

        Returns:
            The existing or new user, or None if storage is unavailable

        Raises:
            pydantic.ValidationError: if name or email are invalid
        """
        candidate = User(name=name, email=email)
        try:
            if not db_instance.is_connected:
                logger.warning(f"Database not connected - cannot look up user: {candidate.email}")
                return None

            users_collection = get_users_collection()
            if users_collection is None:
                logger.error("Users collection not available")
                return None

            existing = await users_collection.find_one({"email": candidate.email})
            if existing:
                return User.from_document(existing)

            result = await users_collection.insert_one(candidate.to_document())
            candidate.id = result.inserted_id
            logger.info(f"User created: {candidate.name} <{candidate.email}>")
            return candidate
        except Exception as e:
            logger.error(f"Error finding or creating user {candidate.email}: {str(e)}")
            return None

    @staticmethod
    async def get_user(user_id: str) -> Optional[User]:
        """
        Get a user by id.

        Args:
            user_id: Stored user id

        Returns:
            User or None if not found
        """
        try:
            if not db_instance.is_connected:
                logger.warning(f"Database not connected - cannot get user: {user_id}")
                return None

            users_collection = get_users_collection()
            if users_collection is None:
                logger.error("Users collection not available")
                return None

            doc = await users_collection.find_one({"_id": user_id})
            return User.from_document(doc) if doc else None
        except Exception as e:
            logger.error(f"Error getting user {user_id}: {str(e)}")
            return None

    @staticmethod
    async def list_users(limit: int = 100) -> List[User]:
        """Return users ordered by name."""
        try:
            if not db_instance.is_connected:
                logger.warning("Database not connected - cannot list users")
                return []

            users_collection = get_users_collection()
            if users_collection is None:
                logger.error("Users collection not available")
                return []

            docs = await users_collection.find().sort("name", 1).to_list(limit)
            return [User.from_document(doc) for doc in docs]
        except Exception as e:
            logger.error(f"Error listing users: {str(e)}")
            return []
