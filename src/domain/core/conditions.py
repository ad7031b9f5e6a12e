"""Field-keyed condition accumulation for batch operations.

Batch operations (allocation, teardown, template validation) do not use
exceptions to move between independent sub-steps. Each fallible step appends
a condition to a shared accumulator, keyed by the configuration field or
instance id it concerns (``None`` for generic failures), and the caller
inspects the accumulator once at the end.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class ConditionType(str, Enum):
    """Severity of an accumulated condition."""
    ERROR = "ERROR"
    WARNING = "WARNING"


@dataclass(frozen=True)
class Condition:
    """A single error or warning, optionally keyed by field name."""
    type: ConditionType
    message: str
    key: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.type == ConditionType.ERROR

    def __str__(self) -> str:
        if self.key is None:
            return f"({self.type.value}) {self.message}"
        return f"({self.type.value}) {self.key}: {self.message}"


class ConditionAccumulator:
    """Thread-safe collector of conditions keyed by field."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._conditions: List[Condition] = []

    def add_error(self, key: Optional[str], message: str) -> None:
        self.add(Condition(ConditionType.ERROR, message, key))

    def add_warning(self, key: Optional[str], message: str) -> None:
        self.add(Condition(ConditionType.WARNING, message, key))

    def add(self, condition: Condition) -> None:
        with self._lock:
            self._conditions.append(condition)

    def extend(self, conditions: List[Condition]) -> None:
        with self._lock:
            self._conditions.extend(conditions)

    def has_error(self) -> bool:
        with self._lock:
            return any(c.is_error for c in self._conditions)

    def has_conditions(self) -> bool:
        with self._lock:
            return bool(self._conditions)

    @property
    def conditions(self) -> List[Condition]:
        with self._lock:
            return list(self._conditions)

    def get_conditions_by_key(self) -> Dict[Optional[str], List[Condition]]:
        """Group conditions by key, preserving insertion order."""
        grouped: Dict[Optional[str], List[Condition]] = {}
        for condition in self.conditions:
            grouped.setdefault(condition.key, []).append(condition)
        return grouped


@dataclass(frozen=True)
class PluginExceptionDetails:
    """Conditions attached to a provider failure, grouped by key."""
    conditions_by_key: Dict[Optional[str], List[Condition]]

    @classmethod
    def from_accumulator(cls, accumulator: ConditionAccumulator) -> PluginExceptionDetails:
        return cls(accumulator.get_conditions_by_key())

    def messages(self) -> List[str]:
        return [str(c) for conditions in self.conditions_by_key.values() for c in conditions]
