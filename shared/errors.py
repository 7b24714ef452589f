"""
Shared error handling for the guidance gateway.
"""

from enum import Enum
from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Stable machine-readable codes returned in error envelopes."""

    UPSTREAM_RATE_LIMITED = "UPSTREAM_RATE_LIMITED"
    NOT_FOUND_OR_REDIRECTED = "NOT_FOUND_OR_REDIRECTED"
    STALE_CACHE_SERVED = "STALE_CACHE_SERVED"
    CONTENT_OUT_OF_SCOPE = "CONTENT_OUT_OF_SCOPE"
    UPSTREAM_PARAMETER_ERROR = "UPSTREAM_PARAMETER_ERROR"


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: Optional[str] = None
    error: str


class GatewayException(Exception):
    """Base exception for the gateway."""

    status_code = 500

    def __init__(
        self,
        code: Optional[ErrorCode],
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code.value if self.code else None,
            error=self.message,
        )


class InvalidRequestError(GatewayException):
    """Inbound request is missing required fields or is malformed."""

    status_code = 400

    def __init__(self, message: str = "Invalid request", details: Optional[Dict[str, Any]] = None):
        super().__init__(None, message, details)


class UpstreamError(GatewayException):
    """Upstream content API failed in a way the gateway cannot recover from."""

    status_code = 503

    def __init__(self, message: str = "Upstream request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(ErrorCode.UPSTREAM_RATE_LIMITED, message, details)


class TransportFailure(UpstreamError):
    """Connection failures, 5xx or 429 responses that outlasted every retry."""

    def __init__(
        self,
        message: str = "Upstream unavailable",
        attempts: int = 0,
        last_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.attempts = attempts
        self.last_status = last_status
        merged = {"attempts": attempts, "last_status": last_status}
        merged.update(details or {})
        super().__init__(message, merged)


class ParameterError(GatewayException):
    """Filter values were rejected, either locally or by the upstream API."""

    status_code = 400

    def __init__(self, message: str = "Invalid parameters for search", details: Optional[Dict[str, Any]] = None):
        super().__init__(ErrorCode.UPSTREAM_PARAMETER_ERROR, message, details)


class NotFoundOrRedirected(GatewayException):
    """Requested content does not exist upstream (strict mode only)."""

    status_code = 404

    def __init__(self, message: str = "Requested path not found or redirected", details: Optional[Dict[str, Any]] = None):
        super().__init__(ErrorCode.NOT_FOUND_OR_REDIRECTED, message, details)
