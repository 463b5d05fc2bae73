import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from redis import Redis
from redis.exceptions import RedisError
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .middleware import client_ip

logger = logging.getLogger(__name__)

RATE_LIMIT_NAMESPACE = "ratelimit"


class CounterBackend(Protocol):
    def hit(self, key: str, ttl: int) -> int:
        ...


class RedisCounterBackend:
    def __init__(self, client: Redis):
        self.client = client

    def hit(self, key: str, ttl: int) -> int:
        pipe = self.client.pipeline()
        pipe.incr(key)
        pipe.expire(key, ttl)
        count, _ = pipe.execute()
        return int(count)


@dataclass
class _InMemoryCounter:
    count: int
    expires_at: float


class InMemoryCounterBackend:
    def __init__(self) -> None:
        self._data: dict[str, _InMemoryCounter] = {}
        self._lock = threading.Lock()

    def hit(self, key: str, ttl: int) -> int:
        now = time.time()
        with self._lock:
            entry = self._data.get(key)
            if entry is None or entry.expires_at < now:
                # Drop stale windows so the table only holds live counters.
                self._data = {k: v for k, v in self._data.items() if v.expires_at >= now}
                entry = _InMemoryCounter(count=0, expires_at=now + ttl)
                self._data[key] = entry
            entry.count += 1
            return entry.count


class RateLimiter:
    """Fixed-window request counter keyed by client."""

    def __init__(self, limit: int, window_seconds: int, redis_url: Optional[str] = None) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self.redis_url = redis_url
        self.backend: CounterBackend | None = None

    def init_backend(self) -> None:
        if self.backend is not None:
            return

        if self.redis_url:
            try:
                client = Redis.from_url(self.redis_url)
                client.ping()
                self.backend = RedisCounterBackend(client)
                logger.info("Using Redis rate limit backend.")
                return
            except (RedisError, OSError) as exc:  # pragma: no cover - best effort
                logger.warning("Redis unavailable (%s). Falling back to in-memory rate limiting.", exc)
        self.backend = InMemoryCounterBackend()
        logger.info("Using in-memory rate limit backend.")

    def get_backend(self) -> CounterBackend:
        if self.backend is None:
            self.init_backend()
        assert self.backend is not None
        return self.backend

    def check(self, client_key: str, now: Optional[float] = None) -> tuple[bool, int]:
        """Count one request and return (allowed, seconds until the window resets)."""

        now = time.time() if now is None else now
        window = int(now // self.window_seconds)
        retry_after = max(1, int((window + 1) * self.window_seconds - now))
        key = f"{RATE_LIMIT_NAMESPACE}:{client_key}:{window}"
        count = self.get_backend().hit(key, self.window_seconds)
        return count <= self.limit, retry_after


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, limiter: RateLimiter, prefix: str, trust_proxy: bool = False):
        super().__init__(app)
        self.limiter = limiter
        self.prefix = prefix.rstrip("/")
        self.trust_proxy = trust_proxy

    def _applies_to(self, path: str) -> bool:
        return path == self.prefix or path.startswith(self.prefix + "/")

    async def dispatch(self, request, call_next):
        if not self._applies_to(request.url.path):
            return await call_next(request)

        # Counter backends block (Redis round trip), so keep them off the event loop.
        key = client_ip(request, self.trust_proxy) or "anonymous"
        allowed, retry_after = await run_in_threadpool(self.limiter.check, key)
        if not allowed:
            logger.warning("Rate limit exceeded for %s on %s", client_ip(request, self.trust_proxy), request.url.path)
            return JSONResponse(
                status_code=429,
                content={"ok": False, "error": "Too Many Requests"},
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
