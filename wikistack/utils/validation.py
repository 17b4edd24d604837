"""
Validation utilities for WikiStack.
Contains the slug, tag and e-mail helpers shared by the models and routes.
"""

import hashlib
import re
from typing import Iterable, List, Optional, Union

_WHITESPACE_PATTERN = re.compile(r"\s+")
_NON_WORD_PATTERN = re.compile(r"\W")
_URL_TITLE_PATTERN = re.compile(r"^\w+$")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def generate_url_title(title: str) -> str:
    """Derive the URL-safe slug for a page title.

    Whitespace runs become underscores and every other non-word character is
    dropped, so "Cracking the Code!" maps to "Cracking_the_Code". Titles with
    nothing left after that get a stable hash-based slug.
    """
    slug = _NON_WORD_PATTERN.sub("", _WHITESPACE_PATTERN.sub("_", title.strip()))
    if slug:
        return slug
    digest = hashlib.sha1(title.encode("utf-8")).hexdigest()[:8]
    return f"page_{digest}"


def is_valid_url_title(url_title: Optional[str]) -> bool:
    """Return True if the value could have come from generate_url_title."""
    if not url_title:
        return False
    return bool(_URL_TITLE_PATTERN.fullmatch(url_title))


def parse_tags(raw: Union[str, Iterable[str], None]) -> List[str]:
    """Split a comma-separated tag string (or list) into clean, unique tags."""
    if raw is None:
        return []
    if isinstance(raw, str):
        candidates = raw.split(",")
    else:
        candidates = list(raw)

    tags: List[str] = []
    for candidate in candidates:
        tag = str(candidate).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def is_valid_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return bool(_EMAIL_PATTERN.fullmatch(email.strip()))
