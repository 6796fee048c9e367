"""
Rate Limiting Tests
===================

Fixed window counters in isolation, then the two policies wired into the
app: 5 signups and 100 requests per IP per window.
"""

from comingsoon.core.database import db
from comingsoon.core.logging_service import AppLog
from comingsoon.core.rate_limit import FixedWindowRateLimiter


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


# ---------------------------------------------------------------------------
# 1. FixedWindowRateLimiter
# ---------------------------------------------------------------------------

def test_allows_up_to_limit_then_denies():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(3, 60, clock=clock)

    results = [limiter.hit("1.2.3.4") for _ in range(4)]

    assert [r.allowed for r in results] == [True, True, True, False]
    assert [r.remaining for r in results] == [2, 1, 0, 0]
    assert results[-1].limit == 3


def test_window_resets_after_it_elapses():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(1, 60, clock=clock)

    assert limiter.hit("ip").allowed
    assert not limiter.hit("ip").allowed

    clock.advance(59)
    assert not limiter.hit("ip").allowed

    clock.advance(1)
    result = limiter.hit("ip")
    assert result.allowed
    assert result.remaining == 0


def test_keys_are_independent():
    limiter = FixedWindowRateLimiter(1, 60, clock=FakeClock())

    assert limiter.hit("a").allowed
    assert not limiter.hit("a").allowed
    assert limiter.hit("b").allowed


def test_seconds_until_reset():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(1, 900, clock=clock)

    result = limiter.hit("ip")
    clock.advance(100.5)

    assert limiter.seconds_until_reset(result) == 800


def test_expired_windows_are_pruned():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(5, 60, clock=clock)
    for i in range(10):
        limiter.hit(f"10.0.0.{i}")
    assert len(limiter) == 10

    clock.advance(61)
    limiter.hit("10.0.1.1")

    assert len(limiter) == 1


def test_reset_clears_state():
    limiter = FixedWindowRateLimiter(1, 60, clock=FakeClock())
    limiter.hit("a")
    limiter.hit("b")

    limiter.reset("a")
    assert limiter.hit("a").allowed
    assert not limiter.hit("b").allowed

    limiter.reset()
    assert len(limiter) == 0


# ---------------------------------------------------------------------------
# 2. Signup policy on POST /api/subscribe
# ---------------------------------------------------------------------------

def test_signup_limit_per_ip(client, get_subscribers):
    """The sixth signup attempt from one IP inside the window is a 429."""
    for i in range(5):
        response = client.post("/api/subscribe", json={"email": f"user{i}@example.com"})
        assert response.status_code == 201
        assert response.headers["RateLimit-Limit"] == "5"
        assert response.headers["RateLimit-Remaining"] == str(4 - i)

    blocked = client.post("/api/subscribe", json={"email": "user5@example.com"})

    assert blocked.status_code == 429
    body = blocked.get_json()
    assert body["success"] is False
    assert body["message"] == "Too many email signup attempts, please try again later."
    assert 0 < body["retry_after"] <= 900
    assert int(blocked.headers["Retry-After"]) == body["retry_after"]
    assert len(get_subscribers()) == 5


def test_denied_request_is_recorded_in_app_logs(app, client):
    for _ in range(6):
        client.post("/api/subscribe", json={"email": "nope"})

    with app.app_context():
        entries = db.session.query(AppLog).filter(AppLog.source == "rate_limit").all()
        assert len(entries) == 1
        assert entries[0].level == "WARNING"
        assert "signup" in entries[0].message
        assert "127.0.0.1" in entries[0].details


def test_signup_limit_counts_rejected_attempts(client):
    """Invalid submissions still use up the allowance."""
    for _ in range(5):
        assert client.post("/api/subscribe", json={"email": "nope"}).status_code == 400

    assert client.post("/api/subscribe", json={"email": "ok@example.com"}).status_code == 429


def test_signup_limit_is_per_client_ip(client):
    for i in range(5):
        client.post("/api/subscribe", json={"email": f"u{i}@example.com"},
                    environ_base={"REMOTE_ADDR": "10.0.0.1"})

    other = client.post("/api/subscribe", json={"email": "other@example.com"},
                        environ_base={"REMOTE_ADDR": "10.0.0.2"})
    assert other.status_code == 201


def test_forwarded_for_identifies_client(client, get_subscribers):
    """Behind one trusted proxy the X-Forwarded-For address is the client."""
    for i in range(5):
        client.post("/api/subscribe", json={"email": f"p{i}@example.com"},
                    headers={"X-Forwarded-For": "203.0.113.9"})

    assert get_subscribers("p0@example.com")[0]["ip_address"] == "203.0.113.9"

    blocked = client.post("/api/subscribe", json={"email": "p5@example.com"},
                          headers={"X-Forwarded-For": "203.0.113.9"})
    allowed = client.post("/api/subscribe", json={"email": "p6@example.com"},
                          headers={"X-Forwarded-For": "198.51.100.7"})

    assert blocked.status_code == 429
    assert allowed.status_code == 201


def test_signup_limit_does_not_touch_other_endpoints(client):
    for i in range(6):
        client.post("/api/subscribe", json={"email": f"s{i}@example.com"})

    assert client.get("/api/stats").status_code == 200


# ---------------------------------------------------------------------------
# 3. General policy on all traffic
# ---------------------------------------------------------------------------

def test_general_limit_applies_to_all_routes(app_factory):
    app = app_factory(RATELIMIT_GENERAL=3)
    client = app.test_client()

    assert client.get("/api/health").status_code == 200
    assert client.get("/").status_code == 200
    assert client.get("/api/stats").status_code == 200

    blocked = client.get("/script.js")
    assert blocked.status_code == 429
    assert blocked.get_json()["message"] == "Too many requests, please try again later."
    assert "Retry-After" in blocked.headers


def test_rate_limiting_can_be_disabled(app_factory):
    app = app_factory(RATELIMIT_ENABLED=False, RATELIMIT_SIGNUP=1)
    client = app.test_client()

    for i in range(3):
        response = client.post("/api/subscribe", json={"email": f"free{i}@example.com"})
        assert response.status_code == 201


def test_limits_are_per_app(app_factory):
    """Each app instance keeps its own counters."""
    first = app_factory(RATELIMIT_GENERAL=1)
    assert first.test_client().get("/api/health").status_code == 200
    assert first.test_client().get("/api/health").status_code == 429

    second = app_factory(RATELIMIT_GENERAL=1)
    assert second.test_client().get("/api/health").status_code == 200
