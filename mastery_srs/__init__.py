"""Mastery-level spaced repetition scheduling for vocabulary reviews."""

from mastery_srs.core.srs import (
    MASTERY_REACTIVATION_DAYS,
    REVIEW_INTERVALS,
    MasteryLevel,
    get_mastery_level_name,
    is_due,
)
from mastery_srs.schemas import ItemUpdate, ReviewInput, ReviewResult, SessionMemoryStats, VocabularyItem
from mastery_srs.services import InMemorySessionMemoryStore, SpacedRepetitionEngine, build_engine

__version__ = "0.1.0"

__all__ = [
    "MASTERY_REACTIVATION_DAYS",
    "REVIEW_INTERVALS",
    "InMemorySessionMemoryStore",
    "ItemUpdate",
    "MasteryLevel",
    "ReviewInput",
    "ReviewResult",
    "SessionMemoryStats",
    "SpacedRepetitionEngine",
    "VocabularyItem",
    "build_engine",
    "get_mastery_level_name",
    "is_due",
]
