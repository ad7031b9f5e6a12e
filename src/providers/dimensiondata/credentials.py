"""Explicit CloudControl credentials."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from src.domain.core.exceptions import ConfigurationError

DEFAULT_REGION = "dd-na"

# Region id -> API geography host prefix
REGION_GEOGRAPHIES = {
    "dd-na": "na",
    "dd-eu": "eu",
    "dd-au": "au",
    "dd-af": "mea",
    "dd-ap": "ap",
    "dd-latam": "latam",
    "dd-canada": "canada",
}


@dataclass(frozen=True)
class DimensionDataCredentials:
    """Username/password pair scoped to a CloudControl region.

    Passed explicitly to the client; nothing is stored in process-wide state.
    """
    username: str
    password: str = field(repr=False)
    region: str = DEFAULT_REGION

    def __post_init__(self):
        if not self.username:
            raise ConfigurationError("Username must be provided", ["username"])
        if not self.password:
            raise ConfigurationError("Password must be provided", ["password"])
        if not self.region:
            object.__setattr__(self, "region", DEFAULT_REGION)
        if self.region not in REGION_GEOGRAPHIES:
            raise ConfigurationError(
                f"Unknown region '{self.region}'. Must be one of: {', '.join(REGION_GEOGRAPHIES)}",
                ["region"])

    @property
    def api_base_url(self) -> str:
        return f"https://api-{REGION_GEOGRAPHIES[self.region]}.dimensiondata.com"

    @classmethod
    def from_configuration(cls, configuration: Dict[str, Any],
                           default_region: Optional[str] = None) -> "DimensionDataCredentials":
        """Build credentials from a ``username``/``password``/``region`` mapping."""
        return cls(
            username=configuration.get("username", ""),
            password=configuration.get("password", ""),
            region=configuration.get("region") or default_region or DEFAULT_REGION,
        )
