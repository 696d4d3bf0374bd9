"""Error taxonomy shared by services, dependencies, and middleware.

Learn: Services raise these instead of HTTPException so the business
logic stays framework-agnostic (and testable without HTTP). One global
handler in api/error_handlers.py turns any ServiceError into a JSON
response with its status code. The detail is always a short, fixed
message — never an exception string, never a stack trace.
"""


class ServiceError(Exception):
    """Base class for user-visible failures."""

    status_code: int = 500
    detail: str = "Internal error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(ServiceError):
    """Malformed or missing input (user-correctable)."""

    status_code = 400
    detail = "Invalid request"


class MalformedTokenError(ServiceError):
    """Token signature checks out but its claims are structurally wrong.

    Learn: Kept distinct from InvalidTokenError on purpose — a correctly
    signed token with garbage claims is a client bug (400), while a bad
    signature or expiry is an authentication failure (401).
    """

    status_code = 400
    detail = "Malformed token claims"


class UnauthorizedError(ServiceError):
    """Missing, invalid, or expired credential."""

    status_code = 401
    detail = "Unauthorized"


class InvalidTokenError(UnauthorizedError):
    """Malformed token, wrong signature, or wrong algorithm."""

    detail = "Invalid token"


class ExpiredTokenError(UnauthorizedError):
    detail = "Token has expired"


class ForbiddenError(ServiceError):
    """Valid credential, insufficient privilege."""

    status_code = 403
    detail = "Forbidden"


class NotFoundError(ServiceError):
    status_code = 404
    detail = "Not found"


class ConflictError(ServiceError):
    """Uniqueness violation."""

    status_code = 409
    detail = "Conflict"


class InternalError(ServiceError):
    """Storage or signing infrastructure failure."""

    status_code = 500
    detail = "Internal error"


class ConfigurationError(Exception):
    """Fatal startup misconfiguration (missing secret, bad origin list)."""
