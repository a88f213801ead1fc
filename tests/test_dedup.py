from hqbridge.core.dedup import DedupCache, MonotonicClock, fingerprint
from tests.fakes import FakeClock


def test_fingerprint_is_deterministic_and_fixed_length() -> None:
    first = fingerprint("alice", "hello")
    assert first == fingerprint("alice", "hello")
    assert len(first) == 16
    int(first, 16)


def test_fingerprint_is_order_sensitive() -> None:
    assert fingerprint("alice", "bob") != fingerprint("bob", "alice")
    assert fingerprint("alice", "hello") != fingerprint("alice", "hello ")


def test_repeat_within_window_is_duplicate(clock: FakeClock) -> None:
    cache = DedupCache(window_seconds=60, clock=clock)
    assert cache.check_and_record("alice", "hello") is False
    clock.advance(30)
    assert cache.check_and_record("alice", "hello") is True


def test_repeat_after_window_is_accepted_again(clock: FakeClock) -> None:
    cache = DedupCache(window_seconds=60, clock=clock)
    assert cache.check_and_record("alice", "hello") is False
    assert cache.check_and_record("alice", "hello") is True
    clock.advance(60.5)
    assert cache.check_and_record("alice", "hello") is False


def test_entry_age_equal_to_window_still_counts(clock: FakeClock) -> None:
    cache = DedupCache(window_seconds=60, clock=clock)
    cache.check_and_record("alice", "hello")
    clock.advance(60)
    assert cache.check_and_record("alice", "hello") is True


def test_window_is_measured_from_first_acceptance(clock: FakeClock) -> None:
    cache = DedupCache(window_seconds=60, clock=clock)
    assert cache.check_and_record("bob", "ping") is False
    for _ in range(5):
        clock.advance(10)
        assert cache.check_and_record("bob", "ping") is True
    # Lookups above did not refresh the entry: 61s after first acceptance it is gone.
    clock.advance(11)
    assert cache.check_and_record("bob", "ping") is False


def test_sweep_leaves_only_newest_entry(clock: FakeClock) -> None:
    cache = DedupCache(window_seconds=60, clock=clock)
    for i in range(25):
        cache.check_and_record(f"user{i}", "msg")
        clock.advance(0.1)
    assert len(cache) == 25

    clock.advance(61)
    assert cache.check_and_record("newest", "msg") is False

    assert len(cache) == 1
    assert fingerprint("newest", "msg") in cache


def test_different_senders_do_not_collide(clock: FakeClock) -> None:
    cache = DedupCache(window_seconds=60, clock=clock)
    assert cache.check_and_record("alice", "ping") is False
    assert cache.check_and_record("bob", "ping") is False
    assert cache.check_and_record("alice", "pong") is False


def test_zero_window_only_suppresses_same_instant(clock: FakeClock) -> None:
    cache = DedupCache(window_seconds=0, clock=clock)
    assert cache.check_and_record("alice", "hi") is False
    assert cache.check_and_record("alice", "hi") is True
    clock.advance(0.001)
    assert cache.check_and_record("alice", "hi") is False


def test_clear_forgets_everything(clock: FakeClock) -> None:
    cache = DedupCache(window_seconds=60, clock=clock)
    cache.check_and_record("alice", "hi")
    cache.clear()
    assert len(cache) == 0
    assert cache.check_and_record("alice", "hi") is False


def test_default_clock_is_monotonic() -> None:
    cache = DedupCache()
    assert cache.window_seconds == 60.0
    assert cache.check_and_record("alice", "hi") is False
    assert cache.check_and_record("alice", "hi") is True
    assert MonotonicClock().now() <= MonotonicClock().now()
