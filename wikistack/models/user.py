"""
User data models and validation for WikiStack.
"""

from typing import Optional
from pydantic import BaseModel, Field, validator
from datetime import datetime, timezone

from ..utils.validation import is_valid_email


class User(BaseModel):
    """Model for page authors."""

    id: Optional[str] = None
    name: str
    email: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @validator("name")
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name is required")
        if len(v.strip()) > 100:
            raise ValueError("Name must be less than 100 characters")
        return v.strip()

    @validator("email")
    def validate_email(cls, v):
        if not is_valid_email(v):
            raise ValueError("A valid e-mail address is required")
        return v.strip().lower()

    @property
    def route(self) -> str:
        return f"/users/{self.id}"

    def to_document(self) -> dict:
        doc = self.model_dump(exclude={"id"})
        if self.id:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "User":
        data = {k: v for k, v in doc.items() if k != "_id"}
        return cls(id=str(doc["_id"]) if doc.get("_id") else None, **data)
