"""
Page data models and validation for WikiStack.
"""

from typing import List, Literal, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field, root_validator, validator
from ..utils.markdown_extensions import render_markdown
from ..utils.validation import generate_url_title, parse_tags

PageStatus = Literal["open", "closed"]


class WikiPage(BaseModel):
    """Model for wiki page data."""

    id: Optional[str] = None
    title: str
    url_title: str = ""
    content: str
    tags: List[str] = Field(default_factory=list)
    status: PageStatus = "open"
    author_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @root_validator(pre=True)
    def derive_url_title(cls, values):
        # Runs before field validation so the slug always follows the title
        if isinstance(values, dict):
            title = values.get("title")
            if isinstance(title, str) and title.strip():
                values = dict(values)
                values["url_title"] = generate_url_title(title)
        return values

    @validator("title")
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError("Title is required")
        return v.strip()

    @validator("content")
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError("Content is required")
        return v

    @validator("tags", pre=True)
    def split_tags(cls, v):
        return parse_tags(v)

    @validator("status", pre=True)
    def default_status(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return "open"
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def route(self) -> str:
        return f"/wiki/{self.url_title}"

    @property
    def rendered_content(self) -> str:
        """Sanitized HTML rendered from the markdown content."""
        return render_markdown(self.content)

    def to_document(self) -> dict:
        """Return the storage document for this page, keyed by _id."""
        doc = self.model_dump(exclude={"id"})
        if self.id:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "WikiPage":
        data = {k: v for k, v in doc.items() if k != "_id"}
        return cls(id=str(doc["_id"]) if doc.get("_id") else None, **data)


class TagSearch(BaseModel):
    """Model for tag search queries."""

    tag: str

    @validator("tag")
    def validate_tag(cls, v):
        if not v or not v.strip():
            raise ValueError("Search tag cannot be empty")
        return v.strip()
