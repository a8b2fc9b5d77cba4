"""Database models for Helix."""

from helix.db.models.option import Option

__all__ = [
    "Option",
]
