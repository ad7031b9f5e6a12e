# src/domain/core/exceptions.py
from typing import Any, Optional, List, Dict

class DomainException(Exception):
    """Base exception for all domain-specific errors."""
    pass

class ValidationError(DomainException):
    """Raised when domain validation fails."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details

class ConfigurationError(DomainException):
    """Raised when there's an issue with configuration."""
    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []

class TemplateValidationError(ValidationError):
    """Raised when a resource template cannot be built from its configuration."""
    def __init__(self, template_name: str, errors: Dict[str, str]):
        super().__init__(f"Template validation failed for {template_name}", errors)
        self.template_name = template_name
        self.errors = errors
