"""Pydantic schemas package."""

from mastery_srs.schemas.review import (
    ItemUpdate,
    ReviewInput,
    ReviewResult,
    SessionMemoryStats,
    VocabularyItem,
)

__all__ = [
    "ItemUpdate",
    "ReviewInput",
    "ReviewResult",
    "SessionMemoryStats",
    "VocabularyItem",
]
