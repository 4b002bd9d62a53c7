"""HTTP middleware: timeout, request ID, security headers.

Applied in main app; order matters (last added = outermost).
"""

from tenantops.middleware.request_id import RequestIDMiddleware
from tenantops.middleware.security_headers import SecurityHeadersMiddleware
from tenantops.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
