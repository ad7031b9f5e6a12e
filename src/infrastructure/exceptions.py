from typing import Optional, Any, List, Sequence

from src.domain.core.conditions import Condition, ConditionAccumulator, PluginExceptionDetails

class InfrastructureError(Exception):
    """Base exception for infrastructure-related errors."""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details

class ProviderError(InfrastructureError):
    """Base exception for errors reported to the orchestration caller."""
    pass

class TransientProviderError(ProviderError):
    """Raised for provider failures that may succeed if the whole operation is retried."""
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, details=str(cause) if cause else None)
        self.cause = cause

class UnrecoverableProviderError(ProviderError):
    """Raised for terminal failures; carries field-keyed conditions."""
    def __init__(self, message: str, details: Optional[PluginExceptionDetails] = None):
        super().__init__(message, details or PluginExceptionDetails({}))

    @classmethod
    def from_accumulator(cls, message: str, accumulator: ConditionAccumulator) -> "UnrecoverableProviderError":
        return cls(message, PluginExceptionDetails.from_accumulator(accumulator))

    @property
    def conditions(self) -> List[Condition]:
        return [c for conditions in self.details.conditions_by_key.values() for c in conditions]

    def __str__(self) -> str:
        messages = self.details.messages()
        if not messages:
            return self.args[0]
        return f"{self.args[0]} " + "; ".join(messages)

class ConfigurationValidationError(UnrecoverableProviderError):
    """Raised when pre-flight configuration checks fail."""
    pass

class OperationCancelledError(ProviderError):
    """Raised when a wait is abandoned because cancellation was requested.

    Resources already issued are listed in ``handles``; they are not cancelled.
    """
    def __init__(self, message: str = "Operation cancelled", handles: Sequence[Any] = ()):
        super().__init__(message)
        self.handles = list(handles)
