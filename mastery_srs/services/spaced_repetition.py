"""Spaced repetition engine combining mastery, session memory and scheduling.

The engine owns no persistent data. Each call records the answer in session
memory, derives the next mastery level and review date from the item snapshot,
and hands back everything the caller needs to persist.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Hashable, Iterable, Mapping, Optional, Union

from loguru import logger

from mastery_srs.config import Settings, get_settings
from mastery_srs.core.srs.due import filter_due, is_due, is_reactivation_due
from mastery_srs.core.srs.intervals import ensure_timezone, next_review_date
from mastery_srs.core.srs.mastery import MasteryLevel, get_mastery_level_name, next_mastery_level
from mastery_srs.schemas.review import (
    ItemUpdate,
    ReviewInput,
    ReviewResult,
    SessionMemoryStats,
    VocabularyItem,
)
from mastery_srs.services.session_memory import (
    InMemorySessionMemoryStore,
    SessionMemorySweeper,
    SessionMemoryStore,
)

# Fields whose change means the stored learning progress moved.
PROGRESS_FIELDS = (
    "mastery_level",
    "consecutive_correct",
    "consecutive_incorrect",
    "last_mastered",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SpacedRepetitionEngine:
    """Compute review outcomes for vocabulary items."""

    def __init__(
        self,
        session_memory: Optional[SessionMemoryStore] = None,
        *,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._clock = clock or _utcnow
        if session_memory is None:
            session_memory = InMemorySessionMemoryStore(
                ttl=timedelta(hours=self.settings.SRS_SESSION_MEMORY_TTL_HOURS),
                clock=self._clock,
            )
        self.session_memory = session_memory

    def _now(self, now: Optional[datetime]) -> datetime:
        return ensure_timezone(now) or self._clock()

    @staticmethod
    def _as_item(item: Union[VocabularyItem, Mapping[str, Any]]) -> VocabularyItem:
        if isinstance(item, VocabularyItem):
            return item
        return VocabularyItem.model_validate(item)

    def calculate(
        self,
        review: Union[ReviewInput, Mapping[str, Any]],
        *,
        now: Optional[datetime] = None,
    ) -> ReviewResult:
        """Process one answer and return the updated schedule."""

        if not isinstance(review, ReviewInput):
            review = ReviewInput.model_validate(review)
        now = self._now(now)
        item = review.vocabulary_data
        is_correct = review.is_correct

        session_count = self.session_memory.record_answer(
            review.user_id, review.vocabulary_id, is_correct, now=now
        )

        streak = item.consecutive_correct + (1 if is_correct else 0)
        consecutive_correct = streak if is_correct else 0
        consecutive_incorrect = 0 if is_correct else item.consecutive_incorrect + 1

        new_level = next_mastery_level(
            item.mastery_level,
            is_correct,
            streak,
            session_count,
            promotion_streak=self.settings.SRS_PROMOTION_STREAK,
            demotion_streak=self.settings.SRS_DEMOTION_STREAK,
        )

        reactivated = is_reactivation_due(
            item, now=now, reactivation_days=self.settings.SRS_MASTERY_REACTIVATION_DAYS
        )
        scheduled_level = new_level
        if reactivated:
            # Refresher cadence; min() never lifts a freshly demoted level.
            scheduled_level = min(new_level, int(MasteryLevel.MATURE))
            logger.debug(
                "Mastered item reactivated",
                vocabulary_id=str(review.vocabulary_id),
                scheduled_level=scheduled_level,
            )

        next_review = next_review_date(scheduled_level, item.ease_factor, now=now)

        last_mastered = item.last_mastered
        if new_level == MasteryLevel.MASTERED and (
            item.mastery_level != MasteryLevel.MASTERED or (reactivated and is_correct)
        ):
            last_mastered = now

        updates = ItemUpdate(
            mastery_level=new_level,
            consecutive_correct=consecutive_correct,
            consecutive_incorrect=consecutive_incorrect,
            last_mastered=last_mastered,
            last_reviewed=now,
            next_review=next_review,
            review_count=item.review_count + 1,
            ease_factor=item.ease_factor,
        )
        update_needed = any(
            getattr(updates, field) != getattr(item, field) for field in PROGRESS_FIELDS
        )
        mastery_changed = new_level != item.mastery_level

        if mastery_changed:
            logger.debug(
                "Mastery level changed",
                user_id=str(review.user_id),
                vocabulary_id=str(review.vocabulary_id),
                previous=get_mastery_level_name(item.mastery_level),
                current=get_mastery_level_name(new_level),
                session_incorrect=session_count,
            )

        return ReviewResult(
            next_review=next_review,
            new_mastery_level=new_level,
            update_needed=update_needed,
            consecutive_incorrect_count=session_count,
            mastery_changed=mastery_changed,
            scheduled_level=scheduled_level,
            updates=updates,
        )

    def is_due(
        self,
        item: Union[VocabularyItem, Mapping[str, Any]],
        *,
        now: Optional[datetime] = None,
    ) -> bool:
        return is_due(
            self._as_item(item),
            now=self._now(now),
            reactivation_days=self.settings.SRS_MASTERY_REACTIVATION_DAYS,
        )

    def filter_due(
        self,
        items: Iterable[Union[VocabularyItem, Mapping[str, Any]]],
        *,
        now: Optional[datetime] = None,
    ) -> list[VocabularyItem]:
        return filter_due(
            [self._as_item(item) for item in items],
            now=self._now(now),
            reactivation_days=self.settings.SRS_MASTERY_REACTIVATION_DAYS,
        )

    @staticmethod
    def get_mastery_level_name(level: Any) -> str:
        return get_mastery_level_name(level)

    def get_session_memory_stats(self) -> SessionMemoryStats:
        return self.session_memory.stats(now=self._clock())

    def clear_user_session_memory(self, user_id: Hashable) -> int:
        return self.session_memory.clear_for_user(user_id)

    def clear_all_session_memory(self) -> None:
        self.session_memory.clear_all()

    def create_sweeper(self) -> SessionMemorySweeper:
        """Return an unstarted background sweeper for this engine's store."""

        return SessionMemorySweeper(
            self.session_memory,
            interval_seconds=self.settings.SRS_SESSION_SWEEP_INTERVAL_SECONDS,
        )


def build_engine(settings: Optional[Settings] = None) -> SpacedRepetitionEngine:
    """Create an engine with its own fresh in-memory session store."""

    return SpacedRepetitionEngine(settings=settings)
