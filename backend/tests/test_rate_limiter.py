from __future__ import annotations

import threading
from types import SimpleNamespace

from assessment_ai.rate_limiter import WINDOW_MS, SlidingWindowRateLimiter, identity_from_request

from conftest import FakeClock


def test_first_request_is_allowed():
    limiter = SlidingWindowRateLimiter(60, clock=FakeClock())
    result = limiter.check("10.0.0.1")
    assert result.allowed
    assert result.remaining == 59


def test_rejects_after_limit_then_recovers_after_window():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(60, clock=clock)
    for i in range(60):
        result = limiter.check("10.0.0.1")
        assert result.allowed
        assert result.remaining == 59 - i
        clock.advance(1000)

    blocked = limiter.check("10.0.0.1")
    assert not blocked.allowed
    assert blocked.remaining == 0

    clock.advance(WINDOW_MS)
    again = limiter.check("10.0.0.1")
    assert again.allowed
    assert again.remaining == 59


def test_window_slides_instead_of_resetting():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(3, clock=clock)
    limiter.check("a")
    clock.advance(30 * 60 * 1000)
    limiter.check("a")
    limiter.check("a")
    assert not limiter.check("a").allowed
    # Only the first request has aged out
    clock.advance(30 * 60 * 1000 + 1)
    assert limiter.check("a").remaining == 0
    assert not limiter.check("a").allowed


def test_rejection_does_not_extend_the_window():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(1, clock=clock)
    assert limiter.check("a").allowed
    clock.advance(WINDOW_MS - 1)
    assert not limiter.check("a").allowed
    clock.advance(1)
    assert limiter.check("a").allowed


def test_identities_are_independent():
    limiter = SlidingWindowRateLimiter(1, clock=FakeClock())
    assert limiter.check("a").allowed
    assert not limiter.check("a").allowed
    assert limiter.check("b").allowed
    assert limiter.tracked_identities() == 2


def test_missing_identity_shares_unknown_bucket():
    limiter = SlidingWindowRateLimiter(2, clock=FakeClock())
    assert limiter.check(None).remaining == 1
    assert limiter.check("").remaining == 0
    assert not limiter.check("unknown").allowed


def test_concurrent_checks_never_exceed_limit():
    limiter = SlidingWindowRateLimiter(50)
    results = []
    lock = threading.Lock()

    def worker():
        for _ in range(10):
            r = limiter.check("shared")
            with lock:
                results.append(r.allowed)

    threads = [threading.Thread(target=worker) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sum(results) == 50


def test_reset_clears_state():
    limiter = SlidingWindowRateLimiter(1, clock=FakeClock())
    limiter.check("a")
    limiter.reset()
    assert limiter.tracked_identities() == 0
    assert limiter.check("a").allowed


def _request(headers=None, host="127.0.0.1"):
    client = SimpleNamespace(host=host) if host else None
    return SimpleNamespace(headers=headers or {}, client=client)


def test_identity_prefers_first_forwarded_hop():
    req = _request({"x-forwarded-for": "203.0.113.7, 10.0.0.1"})
    assert identity_from_request(req) == "203.0.113.7"


def test_identity_falls_back_to_peer_then_unknown():
    assert identity_from_request(_request()) == "127.0.0.1"
    assert identity_from_request(_request(host=None)) == "unknown"


def test_reset_keeps_identity_locks():
    limiter = SlidingWindowRateLimiter(1, clock=FakeClock())
    limiter.check("a")
    lock = limiter._lock_for("a")
    limiter.reset()
    assert limiter._lock_for("a") is lock
    assert limiter.check("a").allowed
