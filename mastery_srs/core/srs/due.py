"""Due-date evaluation, including reactivation of long-mastered items."""
from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING, Iterable

from mastery_srs.core.srs.intervals import TZ, ensure_timezone
from mastery_srs.core.srs.mastery import MasteryLevel

if TYPE_CHECKING:
    from mastery_srs.schemas.review import VocabularyItem

MASTERY_REACTIVATION_DAYS = 90


def is_reactivation_due(
    item: VocabularyItem,
    *,
    now: dt.datetime | None = None,
    reactivation_days: int = MASTERY_REACTIVATION_DAYS,
) -> bool:
    """Return True when a mastered item was last mastered too long ago."""

    if item.mastery_level != MasteryLevel.MASTERED or item.last_mastered is None:
        return False

    now = ensure_timezone(now) or dt.datetime.now(TZ)
    return now - ensure_timezone(item.last_mastered) > dt.timedelta(days=reactivation_days)


def is_due(
    item: VocabularyItem,
    *,
    now: dt.datetime | None = None,
    reactivation_days: int = MASTERY_REACTIVATION_DAYS,
) -> bool:
    """Return True when ``item`` should be offered for review."""

    if item.mastery_level == MasteryLevel.NEW:
        return True
    if item.next_review is None:
        return True

    now = ensure_timezone(now) or dt.datetime.now(TZ)
    if now >= ensure_timezone(item.next_review):
        return True

    return is_reactivation_due(item, now=now, reactivation_days=reactivation_days)


def filter_due(
    items: Iterable[VocabularyItem],
    *,
    now: dt.datetime | None = None,
    reactivation_days: int = MASTERY_REACTIVATION_DAYS,
) -> list[VocabularyItem]:
    """Return the due items in their original order."""

    now = ensure_timezone(now) or dt.datetime.now(TZ)
    return [
        item
        for item in items
        if is_due(item, now=now, reactivation_days=reactivation_days)
    ]
