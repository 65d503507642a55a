"""
Database models for the link shortener.

Both models must be imported before Base.metadata.create_all() so the
links -> users foreign key can be resolved.
"""

from .link import Link
from .user import User

__all__ = ["Link", "User"]
