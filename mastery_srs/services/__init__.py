"""Stateful services built on top of the scheduling rules."""

from mastery_srs.services.session_memory import (
    InMemorySessionMemoryStore,
    SessionMemoryEntry,
    SessionMemoryStore,
    SessionMemorySweeper,
)
from mastery_srs.services.spaced_repetition import SpacedRepetitionEngine, build_engine

__all__ = [
    "InMemorySessionMemoryStore",
    "SessionMemoryEntry",
    "SessionMemoryStore",
    "SessionMemorySweeper",
    "SpacedRepetitionEngine",
    "build_engine",
]
