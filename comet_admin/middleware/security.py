"""
Security middleware: per-IP rate limiting and response hardening headers
"""
from typing import Optional
import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from comet_admin.config import settings


logger = logging.getLogger(__name__)


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-XSS-Protection": "0",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window request limit per client IP"""

    EXEMPT_PATHS = ("/health",)

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        trusted_proxies: Optional[int] = None
    ):
        super().__init__(app)
        self.trusted_proxies = trusted_proxies
        self.max_requests = max_requests if max_requests is not None else settings.rate_limit_max
        self.window_seconds = window_seconds if window_seconds is not None else settings.rate_limit_window
        # ip -> (window start, request count)
        self._windows: dict[str, tuple[float, int]] = {}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        client_ip = get_client_ip(request, self.trusted_proxies)
        now = time.monotonic()
        self._evict_expired(now)

        started, count = self._windows.get(client_ip, (now, 0))
        count += 1
        self._windows[client_ip] = (started, count)

        if count > self.max_requests:
            retry_after = max(1, int(started + self.window_seconds - now))
            logger.warning("Rate limit exceeded for %s (%d requests)", client_ip, count)
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "message": "Too many requests from this IP, please try again later."
                },
                headers={"Retry-After": str(retry_after)}
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.max_requests - count))
        return response

    def _evict_expired(self, now: float) -> None:
        expired = [
            ip for ip, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for ip in expired:
            del self._windows[ip]


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add hardening headers to every response"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response


def get_client_ip(request: Request, trusted_proxies: Optional[int] = None) -> str:
    """
    Client IP for rate limiting and activity logs.

    X-Forwarded-For is only read when the app runs behind ``trusted_proxies``
    reverse proxies. Each of them appends the address it saw, so the client is
    that many entries from the right; anything further left is client supplied.
    """
    peer = request.client.host if request.client else "unknown"
    hops = settings.trusted_proxy_count if trusted_proxies is None else trusted_proxies
    if hops <= 0:
        return peer

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        entries = [entry.strip() for entry in forwarded.split(",") if entry.strip()]
        if entries:
            return entries[-hops] if len(entries) >= hops else entries[0]

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return peer
