"""Error taxonomy surfaced to API callers.

Every error carries a machine-readable ``code``, the HTTP ``status_code``
it maps to, and a short ``resolution`` hint for the user.  None of them
are retried or recovered locally.
"""


class AdvisorError(Exception):
    """Base class for errors rendered as a non-2xx API response."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500
    resolution = "Please try again later"

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "code": self.code,
            "resolution": self.resolution,
        }


class ValidationFailure(AdvisorError):
    """Missing input, unsupported symbol, or unusable upload."""

    code = "VALIDATION_ERROR"
    status_code = 400
    resolution = "Please check your input and try again"


class SessionNotFound(AdvisorError):
    code = "SESSION_NOT_FOUND"
    status_code = 404
    resolution = "Please start a new session"

    def __init__(self, message: str = "Session not found or expired") -> None:
        super().__init__(message)


class UpstreamDataFailure(AdvisorError):
    """Candle or price source unreachable, or returned incomplete data."""

    code = "UPSTREAM_DATA_ERROR"
    status_code = 502
    resolution = "Market data is temporarily unavailable, please try again later"


class GatewayFailure(AdvisorError):
    """Language-model call failed."""

    code = "LLM_GATEWAY_ERROR"
    status_code = 502
    resolution = "Please check API configuration or try again later"


class GatewayRateLimited(GatewayFailure):
    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429
    resolution = "Please try again later"


class GatewayAuthFailure(GatewayFailure):
    code = "LLM_AUTH_ERROR"


class GatewayBadRequest(GatewayFailure):
    code = "LLM_BAD_REQUEST"


class GatewayTimeout(GatewayFailure):
    code = "LLM_TIMEOUT"
    status_code = 504
