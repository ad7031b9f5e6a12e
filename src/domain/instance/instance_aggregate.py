from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, TYPE_CHECKING

from src.domain.core.common_types import IPAddress
from src.domain.instance.instance_status import InstanceStatus
from src.domain.instance.value_objects import ServerDetails

if TYPE_CHECKING:
    from src.domain.template.template_aggregate import ResourceTemplate


def _launch_time(server: ServerDetails) -> Optional[str]:
    return server.create_time.isoformat() if server.create_time else None


# Display key -> extractor. Keys match the ones the orchestrator UI expects.
DISPLAY_PROPERTIES: Dict[str, Callable[[ServerDetails], Optional[str]]] = {
    "imageId": lambda server: server.image_id,
    "instanceId": lambda server: server.id,
    "instanceType": lambda server: server.name,
    "launchTime": _launch_time,
    "privateIpAddress": lambda server: server.private_ipv4,
}


@dataclass
class ComputeInstance:
    """A provisioned server found for a logical instance id."""
    template: "ResourceTemplate"
    instance_id: str
    server: ServerDetails
    private_ip: Optional[IPAddress] = field(init=False)

    def __post_init__(self):
        self.private_ip = IPAddress.parse(self.server.private_ipv4)

    @property
    def status(self) -> InstanceStatus:
        return self.server.status

    @property
    def name(self) -> str:
        return self.server.name

    def get_properties(self) -> Dict[str, Optional[str]]:
        """Return display properties extracted from the server details."""
        return {key: extract(self.server) for key, extract in DISPLAY_PROPERTIES.items()}

    def update_server(self, server: ServerDetails) -> None:
        """Replace the server details, refreshing the private IP."""
        self.server = server
        self.private_ip = IPAddress.parse(server.private_ipv4)
