from fastapi.testclient import TestClient

from ascend.main import create_app
from ascend.middleware import RateLimitMiddleware


def test_rate_limit_rejects_after_threshold(settings):
    settings.rate_limit_enabled = True
    settings.rate_limit_max_requests = 2
    with TestClient(create_app(settings)) as client:
        assert client.get("/api/goals").status_code == 200
        assert client.get("/api/goals").status_code == 200
        r = client.get("/api/goals")
        assert r.status_code == 429
        assert r.json() == {"error": "Too many requests"}
        assert int(r.headers["retry-after"]) >= 1
        # liveness probe is never limited
        assert client.get("/api/goals/health").status_code == 200


def test_window_resets():
    limiter = RateLimitMiddleware(app=None, window_ms=1000, max_requests=1)
    assert limiter.hit("1.2.3.4", now=0.0) == 0
    assert limiter.hit("1.2.3.4", now=0.5) == 1
    assert limiter.hit("5.6.7.8", now=0.5) == 0
    assert limiter.hit("1.2.3.4", now=1.0) == 0


def test_expired_windows_are_dropped():
    limiter = RateLimitMiddleware(app=None, window_ms=1000, max_requests=5)
    for i in range(10_000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}", now=0.0)
    assert len(limiter._windows) == 10_000

    limiter.hit("192.168.0.1", now=10.0)
    assert list(limiter._windows) == ["192.168.0.1"]


def test_sweep_keeps_live_windows():
    limiter = RateLimitMiddleware(app=None, window_ms=1000, max_requests=1)
    limiter.hit("old", now=0.0)
    limiter.hit("recent", now=1.5)
    limiter.hit("new", now=2.2)
    assert set(limiter._windows) == {"recent", "new"}
    # still limited inside its live window
    assert limiter.hit("recent", now=2.3) == 1
