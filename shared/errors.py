"""
Shared error handling for the Pokémon Cache Proxy.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from shared.logging import get_request_id


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class CacheProxyException(Exception):
    """Base exception for the cache proxy."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=get_request_id(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class ServiceError(CacheProxyException):
    """Client-visible service failure with a fixed, safe message."""

    def __init__(self, message: str = "Service error", status_code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        super().__init__("SERVICE_ERROR", message, details)


class StoreUnavailableError(CacheProxyException):
    """The cache store could not be reached."""

    def __init__(self, message: str = "Cache store unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_UNAVAILABLE", message, details)


class ExternalServiceError(CacheProxyException):
    """External service errors."""

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None, code: str = "EXTERNAL_SERVICE_ERROR"):
        self.service = service
        super().__init__(code, f"{service}: {message}", details)


class UpstreamUnavailableError(ExternalServiceError):
    """Upstream could not be reached or did not answer in time."""

    def __init__(self, service: str, message: str = "Upstream unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(service, message, details, code="UPSTREAM_UNAVAILABLE")


class UpstreamBadResponseError(ExternalServiceError):
    """Upstream answered with a non-2xx status or an unusable body."""

    def __init__(self, service: str, message: str = "Bad upstream response", details: Optional[Dict[str, Any]] = None):
        super().__init__(service, message, details, code="UPSTREAM_BAD_RESPONSE")
