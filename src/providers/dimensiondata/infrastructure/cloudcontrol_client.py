"""CloudControl API 2.4 client."""
import logging
import threading
from typing import Any, Dict, List, Optional

import httpx

from src.domain.base.ports.cloud_client_port import CloudResourceClientPort
from src.domain.instance.value_objects import (
    NetworkDomainSpec,
    ProvisionedResourceHandle,
    ResourceType,
    ServerDetails,
    ServerSpec,
    VlanSpec,
)
from src.providers.dimensiondata.credentials import DimensionDataCredentials
from src.providers.dimensiondata.exceptions import (
    BadRequestError,
    CloudClientError,
    ForbiddenError,
    NotFoundError,
    RequestError,
    ServiceUnavailableError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

API_VERSION = "2.4"
NOT_FOUND_RESPONSE_CODES = frozenset({"RESOURCE_NOT_FOUND"})

# Resource type -> (path segment, id key in deploy responses)
_RESOURCE_PATHS = {
    ResourceType.NETWORK_DOMAIN: ("network/networkDomain", "networkDomainId"),
    ResourceType.VLAN: ("network/vlan", "vlanId"),
    ResourceType.SERVER: ("server/server", "serverId"),
}


def _server_details(data: Dict[str, Any]) -> ServerDetails:
    """Flatten a CloudControl server document into ServerDetails."""
    primary_nic = data.get("networkInfo", {}).get("primaryNic", {})
    return ServerDetails.model_validate({
        "id": data["id"],
        "name": data.get("name", ""),
        "state": data.get("state", ""),
        "started": data.get("started", False),
        "image_id": data.get("sourceImageId"),
        "create_time": data.get("createTime"),
        "private_ipv4": primary_nic.get("privateIpv4"),
        "cpu_count": data.get("cpu", {}).get("count"),
        "memory_gb": data.get("memoryGb"),
    })


class CloudControlClient(CloudResourceClientPort):
    """Synchronous CloudControl client using HTTP basic auth.

    All organization-scoped calls go to ``/caas/2.4/<orgId>/...``; the
    organization id is looked up once from ``/caas/2.4/user/myUser``.
    """

    def __init__(self, credentials: DimensionDataCredentials,
                 timeout: float = 30.0,
                 base_url: Optional[str] = None,
                 http_client: Optional[httpx.Client] = None):
        """
        Initialize the client.

        Args:
            credentials: Username, password and region
            timeout: Per-request timeout in seconds
            base_url: Overrides the region endpoint
            http_client: Pre-built httpx client, mainly for tests
        """
        self.credentials = credentials
        self.base_url = (base_url or credentials.api_base_url).rstrip("/")
        self._http = http_client or httpx.Client(
            auth=(credentials.username, credentials.password),
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        self._org_id: Optional[str] = None
        self._org_lock = threading.Lock()

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "CloudControlClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def organization_id(self) -> str:
        if self._org_id is None:
            with self._org_lock:
                if self._org_id is None:
                    user = self._request("GET", f"{self.base_url}/caas/{API_VERSION}/user/myUser")
                    self._org_id = user["organization"]["id"]
                    logger.debug(f"Resolved organization id {self._org_id}")
        return self._org_id

    # Deploy operations

    def create_network_domain(self, spec: NetworkDomainSpec) -> ProvisionedResourceHandle:
        body = {
            "datacenterId": spec.datacenter_id,
            "name": spec.name,
            "description": spec.description,
            "type": spec.type,
        }
        response = self._post("network/deployNetworkDomain", body)
        return self._handle_from_response(ResourceType.NETWORK_DOMAIN, response)

    def create_vlan(self, spec: VlanSpec) -> ProvisionedResourceHandle:
        body = {
            "networkDomainId": spec.network_domain_id,
            "name": spec.name,
            "description": spec.description,
            "privateIpv4BaseAddress": spec.private_ipv4_base_address,
        }
        response = self._post("network/deployVlan", body)
        return self._handle_from_response(ResourceType.VLAN, response)

    def create_server(self, spec: ServerSpec) -> ProvisionedResourceHandle:
        body: Dict[str, Any] = {
            "name": spec.name,
            "description": spec.description,
            "imageId": spec.image_id,
            "start": spec.start,
            "cpu": {"count": spec.cpu_count},
            "memoryGb": spec.memory_gb,
            "networkInfo": {
                "networkDomainId": spec.network_domain_id,
                "primaryNic": {"vlanId": spec.vlan_id},
            },
        }
        if spec.administrator_password:
            body["administratorPassword"] = spec.administrator_password
        response = self._post("server/deployServer", body)
        return self._handle_from_response(ResourceType.SERVER, response)

    # Queries

    def get_resource_state(self, resource_type: ResourceType, resource_id: str) -> str:
        path, _ = _RESOURCE_PATHS[resource_type]
        return self._get(f"{path}/{resource_id}").get("state", "")

    def get_server(self, server_id: str) -> ServerDetails:
        return _server_details(self._get(f"server/server/{server_id}"))

    def list_servers(self, name: str) -> List[ServerDetails]:
        response = self._get("server/server", params={"name": name})
        return [_server_details(item) for item in response.get("server", [])]

    def list_datacenters(self, page_size: int = 1) -> List[Dict[str, Any]]:
        response = self._get("infrastructure/datacenter", params={"pageSize": page_size})
        return response.get("datacenter", [])

    def get_datacenter(self, datacenter_id: str) -> Dict[str, Any]:
        datacenters = self._get("infrastructure/datacenter", params={"id": datacenter_id}).get("datacenter", [])
        if not datacenters:
            raise NotFoundError(f"Datacenter '{datacenter_id}' not found", 404, "RESOURCE_NOT_FOUND")
        return datacenters[0]

    def get_os_image(self, image_id: str) -> Dict[str, Any]:
        return self._get(f"image/osImage/{image_id}")

    # Delete operations

    def delete_server(self, server_id: str) -> ProvisionedResourceHandle:
        response = self._post("server/deleteServer", {"id": server_id})
        return ProvisionedResourceHandle(ResourceType.SERVER, server_id, response.get("responseCode", "IN_PROGRESS"))

    def delete_vlan(self, vlan_id: str) -> ProvisionedResourceHandle:
        response = self._post("network/deleteVlan", {"id": vlan_id})
        return ProvisionedResourceHandle(ResourceType.VLAN, vlan_id, response.get("responseCode", "IN_PROGRESS"))

    def delete_network_domain(self, network_domain_id: str) -> ProvisionedResourceHandle:
        response = self._post("network/deleteNetworkDomain", {"id": network_domain_id})
        return ProvisionedResourceHandle(ResourceType.NETWORK_DOMAIN, network_domain_id,
                                         response.get("responseCode", "IN_PROGRESS"))

    # HTTP plumbing

    def _org_url(self, path: str) -> str:
        return f"{self.base_url}/caas/{API_VERSION}/{self.organization_id}/{path}"

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._request("GET", self._org_url(path), params=params)

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", self._org_url(path), json=body)

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        logger.debug(f"{method} {url}")
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise RequestError(f"{method} {url} failed: {str(e)}") from e

        if response.is_success:
            return response.json() if response.content else {}
        raise self._convert_error(response)

    @staticmethod
    def _convert_error(response: httpx.Response) -> CloudClientError:
        """Map an error response onto the client error taxonomy."""
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        response_code = payload.get("responseCode") if isinstance(payload, dict) else None
        message = (payload.get("message") if isinstance(payload, dict) else None) or response.text \
            or response.reason_phrase
        status = response.status_code

        if status == 404 or response_code in NOT_FOUND_RESPONSE_CODES:
            return NotFoundError(message, status, response_code)
        if status == 401:
            return UnauthorizedError(message, status, response_code)
        if status == 403:
            return ForbiddenError(message, status, response_code)
        if status == 400:
            return BadRequestError(message, status, response_code)
        if status in (429, 503):
            return ServiceUnavailableError(message, status, response_code)
        return RequestError(message, status, response_code)

    @staticmethod
    def _handle_from_response(resource_type: ResourceType, response: Dict[str, Any]) -> ProvisionedResourceHandle:
        _, id_key = _RESOURCE_PATHS[resource_type]
        info = {item.get("name"): item.get("value") for item in response.get("info", [])}
        resource_id = info.get(id_key)
        if not resource_id:
            raise RequestError(
                f"Deploy {resource_type.value} response did not include {id_key}",
                response_code=response.get("responseCode"))
        logger.info(f"Issued {resource_type.value} deployment {resource_id}: {response.get('responseCode')}")
        return ProvisionedResourceHandle(resource_type, resource_id, response.get("responseCode", "IN_PROGRESS"))
