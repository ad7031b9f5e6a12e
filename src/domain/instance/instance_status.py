# src/domain/instance/instance_status.py
from __future__ import annotations
from enum import Enum
from typing import Any, Optional

class InstanceStatus(str, Enum):
    """Canonical lifecycle status reported to the orchestration caller."""
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"
    DELETING = "DELETING"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"
    DELETED = "DELETED"

    @classmethod
    def from_provider_state(cls, provider_state: Any, started: Optional[bool] = None) -> InstanceStatus:
        """
        Convert a CloudControl resource state into a canonical status.

        CloudControl states are NORMAL, PENDING_ADD, PENDING_CHANGE,
        PENDING_DELETE, FAILED_ADD, FAILED_CHANGE, FAILED_DELETE and
        REQUIRES_SUPPORT. A missing state means the resource no longer exists.

        Args:
            provider_state: State string reported by the provider, or None when absent
            started: Whether the server is powered on (only meaningful for NORMAL)

        Returns:
            InstanceStatus; UNKNOWN for anything unrecognized
        """
        if provider_state is None:
            return cls.DELETED
        if not isinstance(provider_state, str):
            return cls.UNKNOWN

        if provider_state == "NORMAL":
            return cls.RUNNING if started else cls.STOPPED
        return _STATE_MAP.get(provider_state, cls.UNKNOWN)

    @property
    def is_terminal(self) -> bool:
        return self in (InstanceStatus.FAILED, InstanceStatus.DELETED)


_STATE_MAP = {
    "PENDING_ADD": InstanceStatus.PENDING,
    "PENDING_CHANGE": InstanceStatus.PENDING,
    "PENDING_DELETE": InstanceStatus.DELETING,
    "FAILED_ADD": InstanceStatus.FAILED,
    "FAILED_CHANGE": InstanceStatus.FAILED,
    "FAILED_DELETE": InstanceStatus.FAILED,
}


def translate_status(provider_state: Any, started: Optional[bool] = None) -> InstanceStatus:
    """Map a provider state string and started flag to an InstanceStatus."""
    return InstanceStatus.from_provider_state(provider_state, started)
