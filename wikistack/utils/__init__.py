"""
Utils package for WikiStack.
Contains utility functions and helpers.
"""

from .validation import (
    generate_url_title,
    is_valid_url_title,
    parse_tags,
    is_valid_email,
)

__all__ = [
    'generate_url_title',
    'is_valid_url_title',
    'parse_tags',
    'is_valid_email',
]
