"""Review interval calculation based on mastery level."""
from __future__ import annotations

import datetime as dt
import math
from typing import Any

from mastery_srs.core.srs.mastery import MasteryLevel, clamp_mastery_level

DEFAULT_EASE_FACTOR = 2.5

# Base intervals in days
REVIEW_INTERVALS = {
    MasteryLevel.NEW: 1,
    MasteryLevel.LEARNING: 3,
    MasteryLevel.YOUNG: 7,
    MasteryLevel.MATURE: 21,
    MasteryLevel.PROFICIENT: 60,
    MasteryLevel.MASTERED: 180,
}

# ~100 years
MAX_INTERVAL_DAYS = 36500

TZ = dt.timezone.utc


def normalize_ease_factor(value: Any, default: float = DEFAULT_EASE_FACTOR) -> float:
    """Return ``value`` as a positive finite float, or ``default``."""

    try:
        ease_factor = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(ease_factor) or ease_factor <= 0:
        return default
    return ease_factor


def interval_days(
    mastery_level: int,
    ease_factor: float = DEFAULT_EASE_FACTOR,
    *,
    default_ease_factor: float = DEFAULT_EASE_FACTOR,
) -> int:
    """Return the review interval in whole days for ``mastery_level``.

    The ease factor only stretches intervals from ``MATURE`` upwards and is
    rounded half-up to the nearest day.
    """

    level = MasteryLevel(clamp_mastery_level(mastery_level))
    base_interval = REVIEW_INTERVALS[level]
    if level < MasteryLevel.MATURE:
        return base_interval

    ease_factor = normalize_ease_factor(ease_factor, default_ease_factor)
    stretched = base_interval * ease_factor
    if not math.isfinite(stretched) or stretched >= MAX_INTERVAL_DAYS:
        return MAX_INTERVAL_DAYS
    return max(1, math.floor(stretched + 0.5))


def next_review_date(
    mastery_level: int,
    ease_factor: float = DEFAULT_EASE_FACTOR,
    *,
    now: dt.datetime | None = None,
    default_ease_factor: float = DEFAULT_EASE_FACTOR,
) -> dt.datetime:
    """Return the absolute timestamp of the next review."""

    now = ensure_timezone(now) or dt.datetime.now(TZ)
    days = interval_days(mastery_level, ease_factor, default_ease_factor=default_ease_factor)
    return now + dt.timedelta(days=days)


def ensure_timezone(value: dt.datetime | None) -> dt.datetime | None:
    """Attach UTC to naive datetimes."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=TZ)
    return value
