"""Security headers middleware.

Learn: Every response leaves with the same fixed set of hardening
headers. Responses under the private prefix (/api/) also default to
`Cache-Control: no-store`: they carry session tokens and workspace
records, so no shared cache may keep them. A handler that sets its own
Cache-Control wins. HSTS only means something over TLS, so it is only
sent on https requests.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

STATIC_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}
HSTS = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp hardening headers on every response, errors and preflights included."""

    def __init__(self, app, private_prefix: str = "/api/"):
        super().__init__(app)
        self.private_prefix = private_prefix

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        response.headers.update(STATIC_HEADERS)
        if request.url.path.startswith(self.private_prefix):
            response.headers.setdefault("Cache-Control", "no-store")
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = HSTS
        return response
