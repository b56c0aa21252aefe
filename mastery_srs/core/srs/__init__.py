"""Pure scheduling rules: mastery transitions, intervals and due checks."""

from mastery_srs.core.srs.mastery import (
    DEMOTION_STREAK,
    PROMOTION_STREAK,
    MasteryLevel,
    clamp_mastery_level,
    get_mastery_level_name,
    next_mastery_level,
)
from mastery_srs.core.srs.intervals import (
    DEFAULT_EASE_FACTOR,
    MAX_INTERVAL_DAYS,
    REVIEW_INTERVALS,
    interval_days,
    next_review_date,
    normalize_ease_factor,
)
from mastery_srs.core.srs.due import (
    MASTERY_REACTIVATION_DAYS,
    filter_due,
    is_due,
    is_reactivation_due,
)

__all__ = [
    "DEFAULT_EASE_FACTOR",
    "DEMOTION_STREAK",
    "MASTERY_REACTIVATION_DAYS",
    "MAX_INTERVAL_DAYS",
    "PROMOTION_STREAK",
    "REVIEW_INTERVALS",
    "MasteryLevel",
    "clamp_mastery_level",
    "filter_due",
    "get_mastery_level_name",
    "interval_days",
    "is_due",
    "is_reactivation_due",
    "next_mastery_level",
    "next_review_date",
    "normalize_ease_factor",
]
