"""Short-lived memory of consecutive wrong answers per user and item.

Entries live in process memory only. They are keyed by ``(user_id, item_id)``
and expire once idle for longer than the configured TTL. Expired entries are
treated as absent on read and removed either lazily or by
:class:`SessionMemorySweeper`.
"""
from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Hashable, Optional, Protocol

from loguru import logger

from mastery_srs.core.srs.intervals import ensure_timezone
from mastery_srs.schemas.review import SessionMemoryStats
from mastery_srs.utils.exceptions import ConfigurationError, SessionMemoryError

DEFAULT_TTL = timedelta(hours=24)

SessionKey = tuple[Hashable, Hashable]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class SessionMemoryEntry:
    consecutive_incorrect_in_session: int
    last_updated: datetime


class SessionMemoryStore(Protocol):
    """Interface shared by session memory implementations."""

    def record_answer(
        self,
        user_id: Hashable,
        item_id: Hashable,
        is_correct: bool,
        *,
        now: Optional[datetime] = None,
    ) -> int:  # pragma: no cover - interface definition
        """Update the pair's wrong-answer streak and return the new value."""

    def get_count(
        self, user_id: Hashable, item_id: Hashable, *, now: Optional[datetime] = None
    ) -> int:  # pragma: no cover - interface definition
        """Return the current streak for the pair without modifying it."""

    def clear_for_user(self, user_id: Hashable) -> int:  # pragma: no cover - interface definition
        """Drop every entry belonging to ``user_id``."""

    def clear_all(self) -> None:  # pragma: no cover - interface definition
        """Drop every entry."""

    def stats(self, *, now: Optional[datetime] = None) -> SessionMemoryStats:  # pragma: no cover - interface definition
        """Return entry counts for diagnostics."""

    def sweep_expired(self, *, now: Optional[datetime] = None) -> int:  # pragma: no cover - interface definition
        """Remove idle entries and return how many were dropped."""


class InMemorySessionMemoryStore:
    """Thread-safe dictionary-backed session memory.

    A single lock guards the map, so increments, resets, clears and sweeps of
    the same key never interleave.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if ttl <= timedelta(0):
            raise ConfigurationError(
                "Session memory TTL must be positive", {"ttl_seconds": ttl.total_seconds()}
            )
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[SessionKey, SessionMemoryEntry] = {}

    def _now(self, now: Optional[datetime]) -> datetime:
        return ensure_timezone(now) or self._clock()

    def _is_expired(self, entry: SessionMemoryEntry, now: datetime) -> bool:
        return now - entry.last_updated > self.ttl

    def record_answer(
        self,
        user_id: Hashable,
        item_id: Hashable,
        is_correct: bool,
        *,
        now: Optional[datetime] = None,
    ) -> int:
        now = self._now(now)
        key = (user_id, item_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or self._is_expired(entry, now):
                entry = SessionMemoryEntry(consecutive_incorrect_in_session=0, last_updated=now)
                self._entries[key] = entry

            if is_correct:
                entry.consecutive_incorrect_in_session = 0
            else:
                entry.consecutive_incorrect_in_session += 1
            entry.last_updated = now
            return entry.consecutive_incorrect_in_session

    def get_count(
        self, user_id: Hashable, item_id: Hashable, *, now: Optional[datetime] = None
    ) -> int:
        now = self._now(now)
        with self._lock:
            entry = self._entries.get((user_id, item_id))
            if entry is None or self._is_expired(entry, now):
                return 0
            return entry.consecutive_incorrect_in_session

    def clear_for_user(self, user_id: Hashable) -> int:
        with self._lock:
            keys = [key for key in self._entries if key[0] == user_id]
            for key in keys:
                del self._entries[key]
        if keys:
            logger.info("Cleared session memory for user", user_id=str(user_id), removed=len(keys))
        return len(keys)

    def clear_all(self) -> None:
        """Reset the whole store, mainly for test environments."""

        with self._lock:
            self._entries.clear()

    def stats(self, *, now: Optional[datetime] = None) -> SessionMemoryStats:
        now = self._now(now)
        with self._lock:
            self._sweep_locked(now)
            by_user = Counter(str(user_id) for user_id, _ in self._entries)
            return SessionMemoryStats(
                total_entries=len(self._entries),
                entries_by_user=dict(by_user),
            )

    def sweep_expired(self, *, now: Optional[datetime] = None) -> int:
        now = self._now(now)
        with self._lock:
            removed = self._sweep_locked(now)
        if removed:
            logger.info("Swept expired session memory entries", removed=removed)
        return removed

    def _sweep_locked(self, now: datetime) -> int:
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SessionMemorySweeper:
    """Background thread that periodically sweeps a session memory store."""

    def __init__(self, store: SessionMemoryStore, *, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ConfigurationError(
                "Sweep interval must be positive", {"interval_seconds": interval_seconds}
            )
        self.store = store
        self.interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            raise SessionMemoryError("Session memory sweeper is already running")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="session-memory-sweeper", daemon=True
        )
        self._thread.start()
        logger.debug("Session memory sweeper started", interval_seconds=self.interval_seconds)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.debug("Session memory sweeper stopped")

    def run_once(self) -> int:
        return self.store.sweep_expired()

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.run_once()
            except Exception as exc:  # pragma: no cover - defensive logging
                logger.error("Session memory sweep failed", error=str(exc))

    def __enter__(self) -> "SessionMemorySweeper":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
