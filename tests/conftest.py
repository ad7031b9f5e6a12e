import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from src.domain.base.ports.cloud_client_port import CloudResourceClientPort
from src.domain.instance.value_objects import (
    NetworkDomainSpec,
    ProvisionedResourceHandle,
    ResourceType,
    ServerDetails,
    ServerSpec,
    VlanSpec,
)
from src.domain.template.template_aggregate import DEFAULT_IMAGE_ID, ResourceTemplate
from src.infrastructure.resilience import ReadinessPoller
from src.providers.dimensiondata.exceptions import NotFoundError


class FakeClock:
    """Monotonic clock advanced only by sleep()."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []
        self._lock = threading.Lock()

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        with self._lock:
            self.sleeps.append(seconds)
            self.now += seconds


class FakeCloudClient(CloudResourceClientPort):
    """In-memory CloudControl double that records every call.

    Created network domains and VLANs report the next value of their state
    sequence on each query (default: NORMAL). Created servers report
    ``server_state`` unless overridden by name in ``server_states``.
    """

    def __init__(self):
        self.calls: List[Tuple[Any, ...]] = []
        self.network_domains: Dict[str, List[str]] = {}
        self.vlans: Dict[str, List[str]] = {}
        self.servers: Dict[str, ServerDetails] = {}
        self.datacenters = {"NA9"}
        self.images = {DEFAULT_IMAGE_ID}

        self.network_domain_states = ["NORMAL"]
        self.vlan_states = ["NORMAL"]
        self.server_state: Tuple[str, bool] = ("NORMAL", True)
        self.server_states: Dict[str, Tuple[str, bool]] = {}

        # method name -> exception raised by that method
        self.failures: Dict[str, Exception] = {}
        # server name -> exception raised by create_server / list_servers
        self.create_server_failures: Dict[str, Exception] = {}
        self.list_server_failures: Dict[str, Exception] = {}
        # method name -> callable invoked after the call is recorded
        self.hooks: Dict[str, Callable[..., None]] = {}

        self._counter = 0
        self._lock = threading.Lock()

    # helpers

    def _record(self, method: str, *args) -> None:
        with self._lock:
            self.calls.append((method,) + args)
        if method in self.hooks:
            self.hooks[method](*args)
        if method in self.failures:
            raise self.failures[method]

    def _next_id(self, prefix: str) -> str:
        with self._lock:
            self._counter += 1
            return f"{prefix}-{self._counter}"

    def calls_to(self, method: str) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == method]

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def add_server(self, name: str, state: str = "NORMAL", started: bool = True,
                   private_ipv4: Optional[str] = "10.0.3.10") -> ServerDetails:
        server = ServerDetails(
            id=self._next_id("srv"),
            name=name,
            state=state,
            started=started,
            image_id=DEFAULT_IMAGE_ID,
            create_time=datetime(2024, 1, 2, 3, 4, 5),
            private_ipv4=private_ipv4,
            cpu_count=4,
            memory_gb=32,
        )
        self.servers[server.id] = server
        return server

    # create

    def create_network_domain(self, spec: NetworkDomainSpec) -> ProvisionedResourceHandle:
        self._record("create_network_domain", spec)
        domain_id = self._next_id("nd")
        self.network_domains[domain_id] = list(self.network_domain_states)
        return ProvisionedResourceHandle(ResourceType.NETWORK_DOMAIN, domain_id)

    def create_vlan(self, spec: VlanSpec) -> ProvisionedResourceHandle:
        self._record("create_vlan", spec)
        vlan_id = self._next_id("vlan")
        self.vlans[vlan_id] = list(self.vlan_states)
        return ProvisionedResourceHandle(ResourceType.VLAN, vlan_id)

    def create_server(self, spec: ServerSpec) -> ProvisionedResourceHandle:
        self._record("create_server", spec)
        if spec.name in self.create_server_failures:
            raise self.create_server_failures[spec.name]
        state, started = self.server_states.get(spec.name, self.server_state)
        server = self.add_server(spec.name, state, started)
        return ProvisionedResourceHandle(ResourceType.SERVER, server.id)

    # query

    def get_resource_state(self, resource_type: ResourceType, resource_id: str) -> str:
        self._record("get_resource_state", resource_type, resource_id)
        store = self.network_domains if resource_type == ResourceType.NETWORK_DOMAIN else self.vlans
        if resource_id not in store:
            raise NotFoundError(f"{resource_type.value} {resource_id} not found", 404, "RESOURCE_NOT_FOUND")
        states = store[resource_id]
        return states.pop(0) if len(states) > 1 else states[0]

    def get_server(self, server_id: str) -> ServerDetails:
        self._record("get_server", server_id)
        if server_id not in self.servers:
            raise NotFoundError(f"Server {server_id} not found", 404, "RESOURCE_NOT_FOUND")
        return self.servers[server_id]

    def list_servers(self, name: str) -> List[ServerDetails]:
        self._record("list_servers", name)
        if name in self.list_server_failures:
            raise self.list_server_failures[name]
        return [server for server in self.servers.values() if server.name == name]

    def list_datacenters(self, page_size: int = 1) -> List[Dict[str, Any]]:
        self._record("list_datacenters", page_size)
        return [{"id": dc} for dc in sorted(self.datacenters)][:page_size]

    def get_datacenter(self, datacenter_id: str) -> Dict[str, Any]:
        self._record("get_datacenter", datacenter_id)
        if datacenter_id not in self.datacenters:
            raise NotFoundError(f"Datacenter '{datacenter_id}' not found", 404, "RESOURCE_NOT_FOUND")
        return {"id": datacenter_id}

    def get_os_image(self, image_id: str) -> Dict[str, Any]:
        self._record("get_os_image", image_id)
        if image_id not in self.images:
            raise NotFoundError(f"Image '{image_id}' not found", 404, "RESOURCE_NOT_FOUND")
        return {"id": image_id}

    # delete

    def delete_server(self, server_id: str) -> ProvisionedResourceHandle:
        self._record("delete_server", server_id)
        if self.servers.pop(server_id, None) is None:
            raise NotFoundError(f"Server {server_id} not found", 404, "RESOURCE_NOT_FOUND")
        return ProvisionedResourceHandle(ResourceType.SERVER, server_id)

    def delete_vlan(self, vlan_id: str) -> ProvisionedResourceHandle:
        self._record("delete_vlan", vlan_id)
        if self.vlans.pop(vlan_id, None) is None:
            raise NotFoundError(f"Vlan {vlan_id} not found", 404, "RESOURCE_NOT_FOUND")
        return ProvisionedResourceHandle(ResourceType.VLAN, vlan_id)

    def delete_network_domain(self, network_domain_id: str) -> ProvisionedResourceHandle:
        self._record("delete_network_domain", network_domain_id)
        if self.network_domains.pop(network_domain_id, None) is None:
            raise NotFoundError(f"Network domain {network_domain_id} not found", 404, "RESOURCE_NOT_FOUND")
        return ProvisionedResourceHandle(ResourceType.NETWORK_DOMAIN, network_domain_id)


@pytest.fixture
def fake_client():
    return FakeCloudClient()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def cancel_event():
    return threading.Event()


@pytest.fixture
def poller(fake_client, fake_clock):
    return ReadinessPoller(fake_client, clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture
def template_config() -> Dict[str, Any]:
    return {
        "datacenter": "NA9",
        "networkName": "hadoop",
        "type": "ADVANCED",
        "baseIpv4": "10.0.3.0",
        "instanceNamePrefix": "hdp",
        "sshUsername": "root",
        "sshPassword": "secret",
    }


@pytest.fixture
def template(template_config) -> ResourceTemplate:
    return ResourceTemplate.from_dict("hadoop-template", template_config)


@pytest.fixture
def invalid_prefix_template(template_config) -> ResourceTemplate:
    return ResourceTemplate.from_dict("bad", {**template_config, "instanceNamePrefix": "Bad_Prefix"})
