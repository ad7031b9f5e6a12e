"""Instance bounded context - provisioned resources and their status."""

from .instance_aggregate import DISPLAY_PROPERTIES, ComputeInstance
from .instance_status import InstanceStatus, translate_status
from .value_objects import (
    NetworkDomainSpec,
    ProvisionedResourceHandle,
    ResourceSnapshot,
    ResourceType,
    ServerDetails,
    ServerSpec,
    VlanSpec,
)

__all__ = [
    "ComputeInstance",
    "DISPLAY_PROPERTIES",
    "InstanceStatus",
    "translate_status",
    "NetworkDomainSpec",
    "ProvisionedResourceHandle",
    "ResourceSnapshot",
    "ResourceType",
    "ServerDetails",
    "ServerSpec",
    "VlanSpec",
]
