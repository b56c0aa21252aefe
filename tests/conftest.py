"""Pytest fixtures for scheduling tests."""
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from mastery_srs.config import Settings
from mastery_srs.schemas.review import ReviewInput, VocabularyItem
from mastery_srs.services.session_memory import InMemorySessionMemoryStore
from mastery_srs.services.spaced_repetition import SpacedRepetitionEngine


@pytest.fixture()
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def session_store(now: datetime) -> InMemorySessionMemoryStore:
    return InMemorySessionMemoryStore(clock=lambda: now)


@pytest.fixture()
def engine(
    session_store: InMemorySessionMemoryStore, settings: Settings, now: datetime
) -> SpacedRepetitionEngine:
    return SpacedRepetitionEngine(session_store, settings=settings, clock=lambda: now)


@pytest.fixture()
def make_item() -> Callable[..., VocabularyItem]:
    def factory(**overrides: Any) -> VocabularyItem:
        data: dict[str, Any] = {
            "id": "test-vocab-1",
            "mastery_level": 0,
            "last_mastered": None,
            "last_reviewed": None,
            "next_review": None,
            "consecutive_correct": 0,
            "consecutive_incorrect": 0,
            "review_count": 0,
            "ease_factor": 2.5,
        }
        data.update(overrides)
        return VocabularyItem(**data)

    return factory


@pytest.fixture()
def make_review() -> Callable[..., ReviewInput]:
    def factory(item: VocabularyItem, is_correct: bool, user_id: str = "test-user") -> ReviewInput:
        return ReviewInput(
            vocabulary_id=item.id,
            user_id=user_id,
            is_correct=is_correct,
            vocabulary_data=item,
        )

    return factory
