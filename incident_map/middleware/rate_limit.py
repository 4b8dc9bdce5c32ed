"""IP-based request throttling in front of the API.

This is coarse abuse protection only. The per-sender message cooldown and
the one-vote-per-identity rule are domain rules enforced by the services and
the database, not here.

Requests fall into three buckets, each with its own moving window per client:

* ``read``   GET/HEAD (map polling, chat polling)      RATE_LIMIT_READ
* ``create`` POST /reports                             RATE_LIMIT_CREATE
* ``write``  any other POST/PATCH/DELETE               RATE_LIMIT_WRITE
"""

from __future__ import annotations

import math
import os
import time
from collections.abc import Callable
from typing import NamedTuple, TypedDict

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from limits import parse as parse_limit
from limits.storage import MemoryStorage
from limits.strategies import MovingWindowRateLimiter
from slowapi import Limiter


class RateLimitInfo(TypedDict, total=False):
    method: str
    ip: str
    bucket: str
    limit: str


class Bucket(NamedTuple):
    name: str
    env_var: str
    default: str

    @property
    def limit(self) -> str:
        return os.getenv(self.env_var, self.default)


READ = Bucket("read", "RATE_LIMIT_READ", "120/minute")
CREATE = Bucket("create", "RATE_LIMIT_CREATE", "10/minute")
WRITE = Bucket("write", "RATE_LIMIT_WRITE", "30/minute")

limiter = Limiter(key_func=lambda request: client_ip(request))

# Per-process storage; several workers each keep their own window.
_rate = MovingWindowRateLimiter(MemoryStorage())


def client_ip(request: Request) -> str:
    # First hop of X-Forwarded-For wins over the socket peer
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "local"


def _enabled() -> bool:
    if os.getenv("RATE_LIMIT_ENABLED", "").lower() in {"1", "true"}:
        return True
    return not os.getenv("TESTING")


def bucket_for(method: str, path: str) -> Bucket | None:
    """Pick the bucket for a request; OPTIONS (CORS preflight) is never throttled."""
    method = method.upper()
    if method in {"GET", "HEAD"}:
        return READ
    if method == "POST" and path.rstrip("/") == "/reports":
        return CREATE
    if method in {"POST", "PATCH", "DELETE"}:
        return WRITE
    return None


async def rate_limit_middleware(request: Request, call_next: Callable) -> Response:
    bucket = bucket_for(request.method, request.url.path) if _enabled() else None
    if bucket is None:
        return await call_next(request)

    limit_str = bucket.limit
    item = parse_limit(limit_str)
    ip = client_ip(request)
    key = f"ip:{ip}|b:{bucket.name}"

    if not _rate.hit(item, key):
        stats = _rate.get_window_stats(item, key)
        retry_after = max(1, math.ceil(stats.reset_time - time.time()))
        info: RateLimitInfo = {
            "method": request.method.upper(),
            "ip": ip,
            "bucket": bucket.name,
            "limit": limit_str,
        }
        request.state.rate_limit_info = info
        return JSONResponse(
            status_code=429,
            content={
                "error": {
                    "code": "rate_limited",
                    "message": "Too Many Requests",
                    "detail": info,
                }
            },
            headers={"Retry-After": str(retry_after)},
        )

    response = await call_next(request)
    stats = _rate.get_window_stats(item, key)
    response.headers.setdefault("X-RateLimit-Limit", limit_str)
    response.headers.setdefault("X-RateLimit-Remaining", str(stats.remaining))
    return response
