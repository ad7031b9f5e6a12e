"""Value objects describing cloud-side resources and the specs used to create them."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.domain.instance.instance_status import InstanceStatus


class ResourceType(str, Enum):
    """Kinds of resource managed by the provider, in creation order."""
    NETWORK_DOMAIN = "NetworkDomain"
    VLAN = "Vlan"
    SERVER = "Server"


ACCEPTED_RESPONSE_CODES = frozenset({"OK", "IN_PROGRESS", "200", "202"})


@dataclass(frozen=True)
class ProvisionedResourceHandle:
    """Identifies a resource returned by a create or delete call.

    The handle never caches state; current state is always re-queried.
    """
    resource_type: ResourceType
    resource_id: str
    response_code: str = "IN_PROGRESS"

    @property
    def accepted(self) -> bool:
        return self.response_code.upper() in ACCEPTED_RESPONSE_CODES

    def __str__(self) -> str:
        return f"{self.resource_type.value}:{self.resource_id}"


@dataclass(frozen=True)
class ResourceSnapshot:
    """State observed for a resource during a single poll."""
    state: Optional[str]
    started: Optional[bool] = None

    @property
    def status(self) -> InstanceStatus:
        return InstanceStatus.from_provider_state(self.state, self.started)


class ServerDetails(BaseModel):
    """Server as reported by the cloud client."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    state: str
    started: bool = False
    image_id: Optional[str] = None
    create_time: Optional[datetime] = None
    private_ipv4: Optional[str] = None
    cpu_count: Optional[int] = None
    memory_gb: Optional[int] = None

    @property
    def status(self) -> InstanceStatus:
        return InstanceStatus.from_provider_state(self.state, self.started)


@dataclass(frozen=True)
class NetworkDomainSpec:
    datacenter_id: str
    name: str
    type: str
    description: str = ""


@dataclass(frozen=True)
class VlanSpec:
    network_domain_id: str
    name: str
    private_ipv4_base_address: str
    description: str = ""


@dataclass(frozen=True)
class ServerSpec:
    """Everything needed to deploy one server."""
    name: str
    image_id: str
    network_domain_id: str
    vlan_id: str
    cpu_count: int
    memory_gb: int
    start: bool = True
    administrator_password: Optional[str] = None
    description: str = ""
