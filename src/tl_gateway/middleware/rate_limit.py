"""Rate limiting middleware for the unauthenticated auth endpoints.

Fixed-window counting in Redis, per client IP:
  - Key pattern: "ratelimit:{ip}:auth:{window}"
  - SET 0 EX 60 NX creates the window key, then INCR counts the hit
  - Over the limit → 429 with Retry-After until the window closes

The client IP honours the first X-Forwarded-For hop (reverse proxy aware).
Only signup/signin are limited; everything else passes straight through.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from config.settings import settings
from src.tl_common.errors import RateLimitError
from src.tl_common.redis_client import get_redis
from src.tl_common.response import error_response

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60
_LIMITED_PATHS = frozenset({"/api/v1/users/signup", "/api/v1/users/signin"})


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not settings.RATE_LIMIT_ENABLED or request.url.path not in _LIMITED_PATHS:
            return await call_next(request)

        now = int(time.time())
        window = now // _WINDOW_SECONDS
        ip = _client_ip(request)
        key = f"ratelimit:{ip}:auth:{window}"

        redis = await get_redis()
        # Window key and its TTL are created together; INCR never sees a key without one
        await redis.set(key, 0, ex=_WINDOW_SECONDS, nx=True)
        count = await redis.incr(key)

        if count > settings.RATE_LIMIT_AUTH_PER_MINUTE:
            logger.warning("Rate limit exceeded: ip=%s path=%s", ip, request.url.path)
            err = RateLimitError()
            retry_after = _WINDOW_SECONDS - (now % _WINDOW_SECONDS)
            return JSONResponse(
                status_code=err.http_status,
                content=error_response(err.code, err.message, err.kind, request).model_dump(),
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
