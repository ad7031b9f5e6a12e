# src/providers/dimensiondata/exceptions.py
from typing import Optional

from src.infrastructure.exceptions import InfrastructureError

class CloudClientError(InfrastructureError):
    """Base exception for CloudControl client errors."""
    def __init__(self, message: str, status_code: Optional[int] = None,
                 response_code: Optional[str] = None):
        super().__init__(message, details={"status_code": status_code, "response_code": response_code})
        self.status_code = status_code
        self.response_code = response_code

class NotFoundError(CloudClientError):
    """Raised when the requested resource does not exist."""
    pass

class ForbiddenError(CloudClientError):
    """Raised when the credentials are not allowed to perform the operation."""
    pass

class UnauthorizedError(CloudClientError):
    """Raised when the credentials are rejected."""
    pass

class BadRequestError(CloudClientError):
    """Raised when the request is malformed or has invalid parameters."""
    pass

class ServiceUnavailableError(CloudClientError):
    """Raised when the service is unavailable or rate limiting the caller."""
    pass

class RequestError(CloudClientError):
    """Raised for any other failed request."""
    pass

# Failures of a whole-request step that the caller may retry.
TRANSIENT_ERRORS = (ServiceUnavailableError, RequestError)
