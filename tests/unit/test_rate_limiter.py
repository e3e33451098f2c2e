"""
Unit tests for the KeyCRM fixed window rate limiter.

Tests cover:
- First call opens a window
- Consulting the limiter does not count a request
- 61st request in one window is denied
- Window reset after 60 seconds
- Redis-backed window checked atomically in one script call, fail-open
- Singleton backend selection

Version: 1.0.0
"""
import pytest
import redis
from unittest.mock import MagicMock, patch

from stock_sync.utils import rate_limiter as rl
from stock_sync.utils.rate_limiter import RateLimiter, RedisRateLimiter


pytestmark = pytest.mark.unit


def _fill(limiter: RateLimiter, n: int) -> None:
    for _ in range(n):
        assert limiter.can_make_request() is True
        limiter.record_request()


class TestRateLimiter:

    def test_first_call_opens_window(self, clock):
        limiter = RateLimiter(clock=clock)

        assert limiter.can_make_request() is True
        assert limiter.window_start == clock.now
        assert limiter.request_count == 0

    def test_consulting_does_not_count(self, clock):
        limiter = RateLimiter(clock=clock)

        for _ in range(100):
            assert limiter.can_make_request() is True
        assert limiter.request_count == 0

    def test_sixty_requests_allowed(self, clock):
        limiter = RateLimiter(clock=clock)
        _fill(limiter, 60)
        assert limiter.request_count == 60

    def test_sixty_first_request_denied(self, clock):
        limiter = RateLimiter(clock=clock)
        _fill(limiter, 60)

        clock.advance(59)
        assert limiter.can_make_request() is False

    def test_window_resets_after_sixty_seconds(self, clock):
        limiter = RateLimiter(clock=clock)
        _fill(limiter, 60)

        clock.advance(60)
        assert limiter.can_make_request() is True
        assert limiter.request_count == 0
        assert limiter.window_start == clock.now

    def test_denial_does_not_move_window(self, clock):
        limiter = RateLimiter(clock=clock)
        _fill(limiter, 60)
        start = limiter.window_start

        clock.advance(30)
        limiter.can_make_request()
        assert limiter.window_start == start

    def test_custom_limit(self, clock):
        limiter = RateLimiter(limit=2, window_seconds=10, clock=clock)
        _fill(limiter, 2)
        assert limiter.can_make_request() is False

    def test_status_snapshot(self, clock):
        limiter = RateLimiter(clock=clock)
        _fill(limiter, 3)

        status = limiter.get_status()
        assert status["backend"] == "memory"
        assert status["request_count"] == 3
        assert status["limit"] == 60
        assert status["window_seconds"] == 60


class TestRedisRateLimiter:

    @pytest.fixture
    def redis_client(self):
        client = MagicMock()
        client.hgetall.return_value = {}
        return client

    @pytest.fixture
    def check_script(self, redis_client):
        return redis_client.register_script.return_value

    def test_registers_window_script(self, redis_client):
        RedisRateLimiter(redis_client)
        redis_client.register_script.assert_called_once_with(rl.CHECK_WINDOW_SCRIPT)

    def test_check_runs_as_one_script_call(self, redis_client, check_script, clock):
        check_script.return_value = [1, str(clock.now), 0]
        limiter = RedisRateLimiter(redis_client, clock=clock)

        assert limiter.can_make_request() is True
        check_script.assert_called_once_with(
            keys=["keycrm:rate_window"], args=[clock.now, 60, 60, 120]
        )
        assert limiter.window_start == clock.now
        assert limiter.request_count == 0
        redis_client.hset.assert_not_called()

    def test_denies_when_shared_window_full(self, redis_client, check_script, clock):
        check_script.return_value = [0, str(clock.now - 10), 60]
        limiter = RedisRateLimiter(redis_client, clock=clock)

        assert limiter.can_make_request() is False
        assert limiter.request_count == 60

    def test_allows_inside_window_with_budget(self, redis_client, check_script, clock):
        check_script.return_value = [1, str(clock.now - 10), 12]
        limiter = RedisRateLimiter(redis_client, clock=clock)

        assert limiter.can_make_request() is True
        assert limiter.window_start == clock.now - 10

    def test_record_request_increments_hash(self, redis_client, clock):
        redis_client.hincrby.return_value = 5
        limiter = RedisRateLimiter(redis_client, clock=clock)

        limiter.record_request()
        redis_client.hincrby.assert_called_once_with("keycrm:rate_window", "request_count", 1)
        assert limiter.request_count == 5

    def test_fails_open_on_redis_error(self, redis_client, check_script, clock):
        check_script.side_effect = redis.ConnectionError("down")
        limiter = RedisRateLimiter(redis_client, clock=clock)

        assert limiter.can_make_request() is True

    def test_status_reports_error_on_redis_failure(self, redis_client, clock):
        redis_client.hgetall.side_effect = redis.ConnectionError("down")
        limiter = RedisRateLimiter(redis_client, clock=clock)

        assert "error" in limiter.get_status()


class TestSingleton:

    def setup_method(self):
        rl.reset_rate_limiter()

    def teardown_method(self):
        rl.reset_rate_limiter()

    def test_memory_backend_by_default(self, monkeypatch):
        monkeypatch.setattr(rl.settings, "rate_limit_backend", "memory")
        limiter = rl.get_keycrm_rate_limiter()

        assert type(limiter) is RateLimiter
        assert rl.get_keycrm_rate_limiter() is limiter

    def test_redis_backend(self, monkeypatch):
        monkeypatch.setattr(rl.settings, "rate_limit_backend", "redis")
        with patch("stock_sync.utils.rate_limiter.redis.Redis.from_url") as mock_from_url:
            limiter = rl.get_keycrm_rate_limiter()

        assert isinstance(limiter, RedisRateLimiter)
        mock_from_url.assert_called_once()
