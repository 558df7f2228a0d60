from comet_admin.middleware.security import (
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
    get_client_ip,
)

__all__ = [
    "RateLimitMiddleware",
    "SecurityHeadersMiddleware",
    "get_client_ip",
]
