"""Provider, polling and server default configuration schemas."""
from pydantic import BaseModel, Field, field_validator, model_validator

from src.providers.dimensiondata.credentials import DEFAULT_REGION, REGION_GEOGRAPHIES


class ProviderConfig(BaseModel):
    """CloudControl connection and allocation settings."""

    region: str = Field(DEFAULT_REGION, description="CloudControl region id")
    username: str = Field("", description="CloudControl username")
    password: str = Field("", description="CloudControl password", repr=False)
    api_base_url: str = Field("", description="Overrides the region endpoint when set")
    request_timeout: float = Field(30.0, description="HTTP request timeout in seconds")
    network_domain_description: str = Field(
        "Cloudera Director 2.1.1 dedicated network.",
        description="Description given to network domains created by allocate",
    )
    max_parallel_servers: int = Field(4, description="Servers created concurrently (1 = sequential)")

    @field_validator("region")
    @classmethod
    def validate_region(cls, v: str) -> str:
        if v not in REGION_GEOGRAPHIES:
            raise ValueError(f"Region must be one of {list(REGION_GEOGRAPHIES)}")
        return v

    @field_validator("max_parallel_servers")
    @classmethod
    def validate_max_parallel_servers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_parallel_servers must be at least 1")
        return v


class PollingConfig(BaseModel):
    """Readiness and delete confirmation polling, in seconds."""

    initial_interval: float = Field(1.0, description="First polling interval")
    max_interval: float = Field(8.0, description="Cap on the polling interval")
    timeout: float = Field(180.0, description="Readiness timeout")
    delete_timeout: float = Field(300.0, description="Delete confirmation ceiling")
    delete_initial_delay: float = Field(30.0, description="Delay before the first delete confirmation poll")

    @model_validator(mode="after")
    def validate_intervals(self) -> "PollingConfig":
        if self.initial_interval <= 0:
            raise ValueError("initial_interval must be positive")
        if self.max_interval < self.initial_interval:
            raise ValueError("max_interval cannot be smaller than initial_interval")
        if self.timeout < 0 or self.delete_timeout < 0 or self.delete_initial_delay < 0:
            raise ValueError("Timeouts and delays must not be negative")
        return self


class ServerDefaultsConfig(BaseModel):
    """Compute size used when a template does not set one."""

    cpu_count: int = Field(4, ge=1, description="Default CPU count")
    memory_gb: int = Field(32, ge=1, description="Default memory in GB")
