from __future__ import annotations

from collections.abc import Callable

from fastapi import Request, Response

# The map client asks the browser for the user's position; nothing else.
_DEFAULT_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(self), camera=(), microphone=()",
    "X-Frame-Options": "DENY",
}


async def security_headers_middleware(request: Request, call_next: Callable) -> Response:
    response = await call_next(request)
    for name, value in _DEFAULT_HEADERS.items():
        response.headers.setdefault(name, value)
    return response
