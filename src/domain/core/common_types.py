# src/domain/core/common_types.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional

@dataclass(frozen=True)
class IPAddress:
    """Represents an IPv4 address with validation."""
    value: str

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        parts = self.value.split('.')
        if len(parts) != 4:
            raise ValueError(f"Invalid IP address format: {self.value}")
        for part in parts:
            if not part.isdigit() or not 0 <= int(part) <= 255:
                raise ValueError(f"Invalid IP address value: {self.value}")

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional[IPAddress]:
        """Return an IPAddress, or None when the value is missing or malformed."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value

@dataclass(frozen=True)
class Tags:
    """Immutable collection of template tags."""
    items: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def to_dict(self) -> Dict[str, str]:
        return self.items.copy()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, str]]) -> Tags:
        return cls(items=dict(data or {}))

    def __str__(self) -> str:
        return ";".join(f"{k}={v}" for k, v in self.items.items())
