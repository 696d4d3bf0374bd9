"""Origin gatekeeper — allow-listed CORS with credentials.

Learn: Since the identity cookie is sent cross-origin, the allow-origin
header must echo one exact origin (a wildcard is not allowed together
with credentials). The decision is kept separate from the middleware:

- OriginGatekeeper.decide() is a pure function of (Origin, method) and
  the immutable allow-set built at startup.
- OriginGateMiddleware applies that decision to the HTTP exchange.

Decisions:
- no Origin header            → IGNORE (same-origin / non-browser client)
- unknown origin, OPTIONS     → DENY (403, handler never runs)
- unknown origin, other verbs → IGNORE (no CORS headers; browser blocks
                                 the read, server-to-server calls still work)
- allowed origin              → ALLOW (CORS headers; OPTIONS ends in 204)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional
from urllib.parse import urlsplit

import structlog
from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from sentinent.errors import ConfigurationError

logger = structlog.get_logger()

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
VARY_ON = ("Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers")


class CorsAction(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    IGNORE = "ignore"


@dataclass(frozen=True)
class CorsDecision:
    action: CorsAction
    origin: Optional[str] = None


def normalize_origin(origin: str) -> str:
    """Return the canonical lower-cased "scheme://host[:port]" form.

    Raises ValueError for anything that is not a bare origin: missing
    scheme or host, a path other than "/", a query, a fragment, or
    embedded credentials.
    """
    trimmed = origin.strip()
    if not trimmed:
        raise ValueError("empty origin")

    try:
        parts = urlsplit(trimmed)
        parts.port  # raises ValueError on a non-numeric port
    except ValueError as e:
        raise ValueError(f"invalid origin {trimmed!r}") from e

    if not parts.scheme or not parts.hostname:
        raise ValueError(f"invalid origin {trimmed!r}")
    if parts.path not in ("", "/"):
        raise ValueError(f"origin must not contain a path: {trimmed!r}")
    if parts.query or parts.fragment or "@" in parts.netloc:
        raise ValueError(f"origin must only include scheme and host: {trimmed!r}")

    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


class OriginGatekeeper:
    """Immutable allow-set of origins, built once from configuration.

    To change the set, build a new gatekeeper; there is no way to mutate
    an existing one.
    """

    def __init__(self, origins: Iterable[str]):
        normalized = set()
        for origin in origins:
            if not origin.strip():
                continue
            try:
                normalized.add(normalize_origin(origin))
            except ValueError as e:
                raise ConfigurationError(f"Invalid CORS origin: {e}") from e

        if not normalized:
            raise ConfigurationError("At least one valid CORS origin is required")
        self._allowed = frozenset(normalized)

    @property
    def allowed_origins(self) -> frozenset[str]:
        return self._allowed

    def match(self, origin: str) -> Optional[str]:
        """Normalized origin if it is allow-listed, else None."""
        try:
            normalized = normalize_origin(origin)
        except ValueError:
            return None
        return normalized if normalized in self._allowed else None

    def decide(self, origin: Optional[str], method: str) -> CorsDecision:
        if origin is None or not origin.strip():
            return CorsDecision(CorsAction.IGNORE)

        allowed = self.match(origin)
        if allowed is not None:
            return CorsDecision(CorsAction.ALLOW, allowed)
        if method.upper() == "OPTIONS":
            return CorsDecision(CorsAction.DENY)
        return CorsDecision(CorsAction.IGNORE)


def add_vary(headers: MutableHeaders, value: str) -> None:
    """Append a Vary token unless it is already present (case-insensitive)."""
    for existing in headers.getlist("vary"):
        for part in existing.split(","):
            if part.strip().lower() == value.lower():
                return
    headers.append("Vary", value)


def apply_cors_headers(headers: MutableHeaders, origin: str) -> None:
    for value in VARY_ON:
        add_vary(headers, value)
    headers["Access-Control-Allow-Origin"] = origin
    headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
    headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
    headers["Access-Control-Allow-Credentials"] = "true"


class OriginGateMiddleware(BaseHTTPMiddleware):
    """Apply the gatekeeper's decision to every request."""

    def __init__(self, app, gatekeeper: OriginGatekeeper):
        super().__init__(app)
        self.gatekeeper = gatekeeper

    async def dispatch(self, request: Request, call_next) -> Response:
        origin = request.headers.get("origin")
        decision = self.gatekeeper.decide(origin, request.method)

        if decision.action is CorsAction.DENY:
            logger.info("cors.preflight_denied", origin=origin, path=request.url.path)
            return JSONResponse(status_code=403, content={"detail": "CORS origin denied"})

        if decision.action is CorsAction.ALLOW and request.method == "OPTIONS":
            response = Response(status_code=204)
            apply_cors_headers(response.headers, decision.origin)
            return response

        response = await call_next(request)
        if decision.action is CorsAction.ALLOW:
            apply_cors_headers(response.headers, decision.origin)
        return response
