"""Domain port for the cloud resource client."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from src.domain.instance.value_objects import (
    NetworkDomainSpec,
    ProvisionedResourceHandle,
    ResourceType,
    ServerDetails,
    ServerSpec,
    VlanSpec,
)


class CloudResourceClientPort(ABC):
    """Create/get/list/delete calls for network domains, VLANs and servers.

    Implementations raise subclasses of CloudClientError
    (src.providers.dimensiondata.exceptions) on failure; NotFoundError marks
    an absent resource.
    """

    @abstractmethod
    def create_network_domain(self, spec: NetworkDomainSpec) -> ProvisionedResourceHandle:
        """Issue a network domain deployment."""

    @abstractmethod
    def create_vlan(self, spec: VlanSpec) -> ProvisionedResourceHandle:
        """Issue a VLAN deployment inside a network domain."""

    @abstractmethod
    def create_server(self, spec: ServerSpec) -> ProvisionedResourceHandle:
        """Issue a server deployment."""

    @abstractmethod
    def get_resource_state(self, resource_type: ResourceType, resource_id: str) -> str:
        """Return the provider state string of a resource."""

    @abstractmethod
    def get_server(self, server_id: str) -> ServerDetails:
        """Return details of a single server."""

    @abstractmethod
    def list_servers(self, name: str) -> List[ServerDetails]:
        """Return servers whose name matches exactly."""

    @abstractmethod
    def delete_server(self, server_id: str) -> ProvisionedResourceHandle:
        """Issue a server deletion."""

    @abstractmethod
    def delete_vlan(self, vlan_id: str) -> ProvisionedResourceHandle:
        """Issue a VLAN deletion."""

    @abstractmethod
    def delete_network_domain(self, network_domain_id: str) -> ProvisionedResourceHandle:
        """Issue a network domain deletion."""

    @abstractmethod
    def list_datacenters(self, page_size: int = 1) -> List[Dict[str, Any]]:
        """List datacenters visible to the credentials."""

    @abstractmethod
    def get_datacenter(self, datacenter_id: str) -> Dict[str, Any]:
        """Return a datacenter by id."""

    @abstractmethod
    def get_os_image(self, image_id: str) -> Dict[str, Any]:
        """Return an OS image by id."""
