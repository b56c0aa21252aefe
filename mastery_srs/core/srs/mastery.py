"""Mastery level state machine.

Mastery moves one level at a time. Promotion is driven by the persisted
streak of correct answers stored on the item, while demotion is driven by the
short-lived session counter of wrong answers. A single miss never changes the
level.
"""
from __future__ import annotations

import math
from enum import IntEnum
from typing import Any


class MasteryLevel(IntEnum):
    NEW = 0
    LEARNING = 1
    YOUNG = 2
    MATURE = 3
    PROFICIENT = 4
    MASTERED = 5


PROMOTION_STREAK = 3
DEMOTION_STREAK = 2

_LEVEL_NAMES = {
    MasteryLevel.NEW: "New",
    MasteryLevel.LEARNING: "Learning",
    MasteryLevel.YOUNG: "Young",
    MasteryLevel.MATURE: "Mature",
    MasteryLevel.PROFICIENT: "Proficient",
    MasteryLevel.MASTERED: "Mastered",
}


def clamp_mastery_level(value: Any) -> int:
    """Coerce ``value`` to an integer level within ``[NEW, MASTERED]``.

    Values that cannot be read as a finite number fall back to ``NEW``.
    """

    if isinstance(value, int):
        return max(int(MasteryLevel.NEW), min(int(MasteryLevel.MASTERED), int(value)))
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return int(MasteryLevel.NEW)
    if not math.isfinite(number):
        return int(MasteryLevel.NEW)
    return max(int(MasteryLevel.NEW), min(int(MasteryLevel.MASTERED), int(number)))


def next_mastery_level(
    current: int,
    is_correct: bool,
    consecutive_correct: int,
    session_consecutive_incorrect: int,
    *,
    promotion_streak: int = PROMOTION_STREAK,
    demotion_streak: int = DEMOTION_STREAK,
) -> int:
    """Return the mastery level after a single answer.

    Args:
        current: Level stored on the item before this answer.
        is_correct: Whether the learner answered correctly.
        consecutive_correct: Persisted correct streak including this answer.
        session_consecutive_incorrect: Session wrong-answer streak including
            this answer.
        promotion_streak: Streak length that unlocks a promotion.
        demotion_streak: Session misses in a row that trigger a demotion.
    """

    level = clamp_mastery_level(current)

    if is_correct:
        if consecutive_correct >= promotion_streak and level < MasteryLevel.MASTERED:
            level += 1
    elif session_consecutive_incorrect >= demotion_streak and level > MasteryLevel.NEW:
        level -= 1

    return clamp_mastery_level(level)


def get_mastery_level_name(level: Any) -> str:
    """Return the display name of ``level`` or ``"Unknown"``."""

    if isinstance(level, bool) or not isinstance(level, (int, float)):
        return "Unknown"
    if isinstance(level, float) and not level.is_integer():
        return "Unknown"
    try:
        return _LEVEL_NAMES[MasteryLevel(int(level))]
    except ValueError:
        return "Unknown"
