"""Pydantic schemas exchanged with the review-submission caller."""
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, Optional, Union
from uuid import UUID

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from mastery_srs.core.srs.intervals import DEFAULT_EASE_FACTOR, ensure_timezone, normalize_ease_factor
from mastery_srs.core.srs.mastery import MasteryLevel, clamp_mastery_level

Identifier = Union[UUID, int, str]

_timestamp_adapter = TypeAdapter(datetime)


def _coerce_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        parsed = _timestamp_adapter.validate_python(value)
    except ValidationError:
        logger.warning("Discarding unparseable timestamp", value=repr(value))
        return None
    return ensure_timezone(parsed)


def _coerce_counter(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return max(0, value)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


class VocabularyItem(BaseModel):
    """Read-only snapshot of a stored vocabulary item.

    Malformed numeric and date fields are normalized instead of rejected.
    """

    id: Identifier
    mastery_level: int = Field(default=MasteryLevel.NEW, ge=0, le=5)
    last_mastered: Optional[datetime] = None
    last_reviewed: Optional[datetime] = None
    next_review: Optional[datetime] = None
    consecutive_correct: int = Field(default=0, ge=0)
    consecutive_incorrect: int = Field(default=0, ge=0)
    review_count: int = Field(default=0, ge=0)
    ease_factor: float = Field(default=DEFAULT_EASE_FACTOR, gt=0)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("mastery_level", mode="before")
    @classmethod
    def clamp_level(cls, value: Any) -> int:
        return clamp_mastery_level(value)

    @field_validator("last_mastered", "last_reviewed", "next_review", mode="before")
    @classmethod
    def parse_timestamp(cls, value: Any) -> Optional[datetime]:
        return _coerce_timestamp(value)

    @field_validator(
        "consecutive_correct", "consecutive_incorrect", "review_count", mode="before"
    )
    @classmethod
    def non_negative_counter(cls, value: Any) -> int:
        return _coerce_counter(value)

    @field_validator("ease_factor", mode="before")
    @classmethod
    def positive_ease_factor(cls, value: Any) -> float:
        ease_factor = normalize_ease_factor(value, default=math.nan)
        if math.isnan(ease_factor):
            if value is not None:
                logger.warning(
                    "Replacing invalid ease factor with default",
                    value=repr(value),
                    default=DEFAULT_EASE_FACTOR,
                )
            return DEFAULT_EASE_FACTOR
        return ease_factor


class ReviewInput(BaseModel):
    """A single answer submitted for a user's vocabulary item."""

    vocabulary_id: Identifier
    user_id: Identifier
    is_correct: bool
    vocabulary_data: VocabularyItem


class ItemUpdate(BaseModel):
    """Field values the caller should write back to the stored item."""

    mastery_level: int = Field(ge=0, le=5)
    consecutive_correct: int = Field(ge=0)
    consecutive_incorrect: int = Field(ge=0)
    last_mastered: Optional[datetime] = None
    last_reviewed: datetime
    next_review: datetime
    review_count: int = Field(ge=0)
    ease_factor: float = Field(gt=0)


class ReviewResult(BaseModel):
    """Outcome of a review calculation."""

    next_review: datetime
    new_mastery_level: int = Field(ge=0, le=5)
    update_needed: bool
    consecutive_incorrect_count: int = Field(ge=0)
    mastery_changed: bool
    scheduled_level: int = Field(ge=0, le=5)
    updates: ItemUpdate


class SessionMemoryStats(BaseModel):
    """Diagnostic summary of the session memory store."""

    total_entries: int = 0
    entries_by_user: Dict[str, int] = Field(default_factory=dict)
