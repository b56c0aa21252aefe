"""Tests for the in-memory session store and its sweeper."""
from __future__ import annotations

import threading
import time
from datetime import timedelta

import pytest

from mastery_srs.services.session_memory import InMemorySessionMemoryStore, SessionMemorySweeper
from mastery_srs.utils.exceptions import ConfigurationError, SessionMemoryError


def test_record_answer_counts_consecutive_misses(session_store):
    assert session_store.record_answer("u1", "x", False) == 1
    assert session_store.record_answer("u1", "x", False) == 2
    assert session_store.record_answer("u1", "x", False) == 3


def test_correct_answer_resets_counter(session_store):
    session_store.record_answer("u1", "x", False)
    session_store.record_answer("u1", "x", False)

    assert session_store.record_answer("u1", "x", True) == 0
    assert session_store.get_count("u1", "x") == 0


def test_first_correct_answer_creates_entry(session_store):
    assert session_store.record_answer("u1", "x", True) == 0
    assert session_store.stats().total_entries == 1


def test_counters_are_isolated_per_user_and_item(session_store):
    session_store.record_answer("A", "X", False)
    session_store.record_answer("A", "X", False)

    assert session_store.get_count("A", "Y") == 0
    assert session_store.get_count("B", "X") == 0
    assert session_store.record_answer("A", "Y", False) == 1
    assert session_store.record_answer("B", "X", False) == 1


def test_separator_characters_do_not_collide(session_store):
    session_store.record_answer("a:b", "c", False)

    assert session_store.get_count("a", "b:c") == 0


def test_stats_groups_entries_by_user(session_store):
    session_store.record_answer("user-1", "vocab-1", False)
    session_store.record_answer("user-1", "vocab-2", False)
    session_store.record_answer("user-2", "vocab-1", False)

    stats = session_store.stats()

    assert stats.total_entries == 3
    assert stats.entries_by_user == {"user-1": 2, "user-2": 1}


def test_empty_stats(session_store):
    stats = session_store.stats()

    assert stats.total_entries == 0
    assert stats.entries_by_user == {}


def test_clear_for_user_only_touches_that_user(session_store):
    session_store.record_answer("user-1", "vocab-1", False)
    session_store.record_answer("user-2", "vocab-1", False)

    assert session_store.clear_for_user("user-1") == 1

    stats = session_store.stats()
    assert stats.total_entries == 1
    assert "user-1" not in stats.entries_by_user
    assert stats.entries_by_user["user-2"] == 1


def test_clear_all(session_store):
    session_store.record_answer("user-1", "vocab-1", False)
    session_store.record_answer("user-2", "vocab-2", False)

    session_store.clear_all()

    assert len(session_store) == 0


def test_idle_entries_are_treated_as_absent(session_store, now):
    session_store.record_answer("u1", "x", False, now=now)
    later = now + timedelta(hours=25)

    assert session_store.get_count("u1", "x", now=later) == 0
    assert session_store.record_answer("u1", "x", False, now=later) == 1


def test_entries_within_ttl_survive(session_store, now):
    session_store.record_answer("u1", "x", False, now=now)

    assert session_store.record_answer("u1", "x", False, now=now + timedelta(hours=23)) == 2


def test_sweep_removes_only_idle_entries(session_store, now):
    session_store.record_answer("u1", "old", False, now=now - timedelta(hours=30))
    session_store.record_answer("u1", "fresh", False, now=now - timedelta(hours=1))

    assert session_store.sweep_expired(now=now) == 1
    assert session_store.stats(now=now).total_entries == 1
    assert session_store.get_count("u1", "fresh", now=now) == 1


def test_stats_hide_expired_entries(session_store, now):
    session_store.record_answer("u1", "x", False, now=now - timedelta(days=2))

    assert session_store.stats(now=now).total_entries == 0


def test_custom_ttl(now):
    store = InMemorySessionMemoryStore(ttl=timedelta(minutes=5), clock=lambda: now)
    store.record_answer("u1", "x", False, now=now - timedelta(minutes=6))

    assert store.get_count("u1", "x") == 0


def test_non_positive_ttl_is_rejected():
    with pytest.raises(ConfigurationError):
        InMemorySessionMemoryStore(ttl=timedelta(0))


def test_concurrent_misses_are_not_lost():
    store = InMemorySessionMemoryStore()
    threads_count = 8
    per_thread = 250
    barrier = threading.Barrier(threads_count)

    def worker() -> None:
        barrier.wait()
        for _ in range(per_thread):
            store.record_answer("u1", "x", False)

    threads = [threading.Thread(target=worker) for _ in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.get_count("u1", "x") == threads_count * per_thread


def test_concurrent_updates_on_different_keys():
    store = InMemorySessionMemoryStore()

    def worker(user_id: str) -> None:
        for index in range(100):
            store.record_answer(user_id, f"item-{index % 10}", False)

    threads = [threading.Thread(target=worker, args=(f"user-{n}",)) for n in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    stats = store.stats()
    assert stats.total_entries == 50
    assert all(count == 10 for count in stats.entries_by_user.values())
    assert store.get_count("user-3", "item-4") == 10


def test_sweeper_run_once(session_store, now):
    session_store.record_answer("u1", "x", False, now=now - timedelta(days=3))
    sweeper = SessionMemorySweeper(session_store, interval_seconds=60)

    assert sweeper.run_once() == 1
    assert len(session_store) == 0


def test_sweeper_background_thread_sweeps(now):
    clock_value = {"now": now}
    store = InMemorySessionMemoryStore(clock=lambda: clock_value["now"])
    store.record_answer("u1", "x", False)
    clock_value["now"] = now + timedelta(days=2)

    with SessionMemorySweeper(store, interval_seconds=0.01) as sweeper:
        assert sweeper.is_running
        deadline = time.monotonic() + 2
        while len(store) and time.monotonic() < deadline:
            time.sleep(0.01)

    assert len(store) == 0
    assert not sweeper.is_running


def test_sweeper_cannot_start_twice(session_store):
    sweeper = SessionMemorySweeper(session_store, interval_seconds=60)
    sweeper.start()
    try:
        with pytest.raises(SessionMemoryError):
            sweeper.start()
    finally:
        sweeper.stop()


def test_sweeper_rejects_non_positive_interval(session_store):
    with pytest.raises(ConfigurationError):
        SessionMemorySweeper(session_store, interval_seconds=0)


def test_naive_now_is_treated_as_utc(now):
    store = InMemorySessionMemoryStore()
    naive = now.replace(tzinfo=None)

    store.record_answer("u1", "x", False)
    assert store.record_answer("u1", "x", False, now=naive + timedelta(minutes=1)) == 2
    assert store.get_count("u1", "x", now=naive + timedelta(minutes=2)) == 2
    assert store.stats(now=naive + timedelta(minutes=3)).total_entries == 1
    assert store.sweep_expired(now=naive + timedelta(days=3)) == 1
