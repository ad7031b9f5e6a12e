"""Provisioning of a network domain, its VLAN and a batch of servers."""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from src.domain.base.ports.cloud_client_port import CloudResourceClientPort
from src.domain.core.conditions import Condition, ConditionAccumulator
from src.domain.instance.value_objects import (
    NetworkDomainSpec,
    ProvisionedResourceHandle,
    ResourceType,
    ServerSpec,
    VlanSpec,
)
from src.domain.template.template_aggregate import (
    DEFAULT_CPU_COUNT,
    DEFAULT_MEMORY_GB,
    ProvisioningRequest,
    ResourceTemplate,
    TemplateKeys,
)
from src.domain.template.validation import check_prefix
from src.infrastructure.exceptions import (
    ConfigurationValidationError,
    OperationCancelledError,
    UnrecoverableProviderError,
)
from src.infrastructure.resilience import ReadinessPoller, server_is_running, state_is_normal
from src.providers.dimensiondata.exceptions import TRANSIENT_ERRORS, CloudClientError
from src.providers.dimensiondata.infrastructure.handlers.base_handler import DimensionDataHandler
from src.providers.dimensiondata.infrastructure.handlers.teardown_handler import TeardownHandler

logger = logging.getLogger(__name__)

ALLOCATE_FAILED_MSG = "Problem allocating instances."
DEFAULT_NETWORK_DOMAIN_DESCRIPTION = "Cloudera Director 2.1.1 dedicated network."
DEFAULT_MAX_PARALLEL_SERVERS = 4


@dataclass(frozen=True)
class AllocationResult:
    """Outcome of an allocation that met its minimum count."""
    requested_ids: Tuple[str, ...]
    provisioned: Dict[str, ProvisionedResourceHandle]
    failed_ids: Tuple[str, ...] = ()
    conditions: Tuple[Condition, ...] = field(default_factory=tuple)

    @property
    def provisioned_ids(self) -> List[str]:
        return list(self.provisioned)

    @property
    def is_complete(self) -> bool:
        return not self.failed_ids


class ProvisioningHandler(DimensionDataHandler):
    """
    Creates the network domain, then the VLAN, then the servers.

    Each stage waits for the previous one to become ready. When fewer than
    ``min_count`` servers come up, or a stage after network domain creation
    fails, every resource created by the call is torn down.
    """

    def __init__(self, client: CloudResourceClientPort, poller: ReadinessPoller,
                 teardown_handler: TeardownHandler,
                 network_domain_description: str = DEFAULT_NETWORK_DOMAIN_DESCRIPTION,
                 default_cpu_count: int = DEFAULT_CPU_COUNT,
                 default_memory_gb: int = DEFAULT_MEMORY_GB,
                 max_parallel_servers: int = DEFAULT_MAX_PARALLEL_SERVERS,
                 cancel_event: Optional[threading.Event] = None) -> None:
        """
        Initialize the provisioning handler.

        Args:
            client: Cloud resource client
            poller: Readiness poller
            teardown_handler: Used for rollback
            network_domain_description: Description given to new network domains
            default_cpu_count: CPU count when the template does not set one
            default_memory_gb: Memory when the template does not set one
            max_parallel_servers: Servers created concurrently; 1 creates them one at a time
            cancel_event: Once set, no further servers are created
        """
        super().__init__(client, poller)
        if max_parallel_servers < 1:
            raise ValueError("max_parallel_servers must be at least 1")
        self.teardown_handler = teardown_handler
        self.network_domain_description = network_domain_description
        self.default_cpu_count = default_cpu_count
        self.default_memory_gb = default_memory_gb
        self.max_parallel_servers = max_parallel_servers
        self._cancel_event = cancel_event

    def allocate(self, template: ResourceTemplate, instance_ids: Sequence[str],
                 min_count: int) -> AllocationResult:
        """
        Provision one network domain, one VLAN and a server per instance id.

        Args:
            template: Resource template
            instance_ids: Logical instance ids in the order servers should be created
            min_count: Minimum number of servers that must reach RUNNING

        Returns:
            AllocationResult listing provisioned and failed ids

        Raises:
            ConfigurationValidationError: If the instance name prefix is invalid; nothing is created
            TransientProviderError: If the network domain or VLAN could not be created because the
                service was unavailable; anything created was rolled back
            UnrecoverableProviderError: If the allocation failed; created resources were rolled back
            OperationCancelledError: If cancelled; carries every handle issued so far
        """
        prefix_conditions = check_prefix(template.instance_name_prefix)
        if prefix_conditions:
            accumulator = ConditionAccumulator()
            accumulator.extend(prefix_conditions)
            raise ConfigurationValidationError.from_accumulator(ALLOCATE_FAILED_MSG, accumulator)

        request = ProvisioningRequest.create(template, instance_ids, min_count)
        accumulator = ConditionAccumulator()
        handles: List[ProvisionedResourceHandle] = []
        handles_lock = threading.Lock()
        logger.info(f"Allocating {request.requested_count} instances (min {min_count}) for {template}")

        try:
            network_domain = self._create_network_domain(template, accumulator)
            handles.append(network_domain)
            try:
                outcomes = self._provision_in_network_domain(request, network_domain, accumulator,
                                                             handles, handles_lock)
            except (OperationCancelledError, UnrecoverableProviderError):
                raise
            except TRANSIENT_ERRORS as e:
                logger.error(f"Failed to create VLAN '{template.vlan_name}': {str(e)}")
                accumulator.add_error(TemplateKeys.VLAN_IPV4, str(e))
                if not self.teardown_handler.teardown_handles(list(handles), accumulator):
                    raise UnrecoverableProviderError.from_accumulator(ALLOCATE_FAILED_MSG, accumulator)
                raise self._convert_client_error(e, f"Unable to create VLAN '{template.vlan_name}'") from e
            except Exception as e:
                logger.exception(f"Unexpected error while allocating instances for {template}")
                accumulator.add_error(None, f"Unexpected error: {str(e)}")
                self._abort(handles, accumulator)

            provisioned = {instance_id: handle for instance_id, handle in outcomes if handle is not None}
            failed_ids = tuple(instance_id for instance_id, handle in outcomes if handle is None)

            if len(provisioned) < min_count:
                logger.error(f"Only {len(provisioned)} of {request.requested_count} instances provisioned, "
                             f"{min_count} required")
                self._abort(handles, accumulator)
        except OperationCancelledError as e:
            with handles_lock:
                issued = list(handles)
            logger.warning(f"Allocation cancelled with {len(issued)} resources issued")
            raise OperationCancelledError(str(e), issued) from e

        if failed_ids:
            accumulator.add_warning(None, f"{len(failed_ids)} of {request.requested_count} instances "
                                          f"could not be provisioned: {', '.join(failed_ids)}")
        logger.info(f"Provisioned {len(provisioned)} of {request.requested_count} instances")
        return AllocationResult(
            requested_ids=request.instance_ids,
            provisioned=provisioned,
            failed_ids=failed_ids,
            conditions=tuple(accumulator.conditions),
        )

    def _provision_in_network_domain(self, request: ProvisioningRequest,
                                     network_domain: ProvisionedResourceHandle,
                                     accumulator: ConditionAccumulator,
                                     handles: List[ProvisionedResourceHandle],
                                     handles_lock: threading.Lock
                                     ) -> List[Tuple[str, Optional[ProvisionedResourceHandle]]]:
        """Wait for the network domain, create the VLAN, then the servers."""
        template = request.template
        if not self.poller.await_ready(ResourceType.NETWORK_DOMAIN, network_domain.resource_id,
                                       state_is_normal, accumulator=accumulator,
                                       key=TemplateKeys.NETWORK_NAME):
            self._abort(handles, accumulator)

        vlan = self._create_vlan(template, network_domain.resource_id, accumulator)
        if vlan is None:
            self._abort(handles, accumulator)
        handles.append(vlan)
        if not self.poller.await_ready(ResourceType.VLAN, vlan.resource_id, state_is_normal,
                                       accumulator=accumulator, key=TemplateKeys.NETWORK_NAME):
            self._abort(handles, accumulator)

        if not template.has_ssh_credentials:
            logger.info("SSH username and password not both set, servers will use the image default credentials")

        return self._create_servers(request, network_domain.resource_id, vlan.resource_id,
                                    accumulator, handles, handles_lock)

    def _create_network_domain(self, template: ResourceTemplate,
                               accumulator: ConditionAccumulator) -> ProvisionedResourceHandle:
        spec = NetworkDomainSpec(
            datacenter_id=template.datacenter,
            name=template.network_name,
            type=template.network_domain_type,
            description=self.network_domain_description,
        )
        try:
            handle = self.client.create_network_domain(spec)
        except TRANSIENT_ERRORS as e:
            raise self._convert_client_error(e, f"Unable to create network domain '{spec.name}'") from e
        except CloudClientError as e:
            logger.error(f"Failed to create network domain '{spec.name}': {str(e)}")
            accumulator.add_error(TemplateKeys.NETWORK_NAME, str(e))
            raise UnrecoverableProviderError.from_accumulator(ALLOCATE_FAILED_MSG, accumulator)

        if not handle.accepted:
            accumulator.add_error(TemplateKeys.NETWORK_NAME,
                                  f"Network domain deployment was not accepted: {handle.response_code}")
            raise UnrecoverableProviderError.from_accumulator(ALLOCATE_FAILED_MSG, accumulator)
        return handle

    def _create_vlan(self, template: ResourceTemplate, network_domain_id: str,
                     accumulator: ConditionAccumulator) -> Optional[ProvisionedResourceHandle]:
        """Create the VLAN. Transient client errors propagate; other failures return None."""
        spec = VlanSpec(
            network_domain_id=network_domain_id,
            name=template.vlan_name,
            private_ipv4_base_address=template.vlan_ipv4,
            description=template.vlan_name,
        )
        try:
            handle = self.client.create_vlan(spec)
        except TRANSIENT_ERRORS:
            raise
        except CloudClientError as e:
            logger.error(f"Failed to create VLAN '{spec.name}': {str(e)}")
            accumulator.add_error(TemplateKeys.VLAN_IPV4, str(e))
            return None

        if not handle.accepted:
            accumulator.add_error(TemplateKeys.VLAN_IPV4, f"VLAN deployment was not accepted: {handle.response_code}")
            return None
        return handle

    def _server_spec(self, template: ResourceTemplate, instance_id: str,
                     network_domain_id: str, vlan_id: str) -> ServerSpec:
        name = template.decorate_instance_name(instance_id)
        return ServerSpec(
            name=name,
            image_id=template.image_id,
            network_domain_id=network_domain_id,
            vlan_id=vlan_id,
            cpu_count=template.cpu_count or self.default_cpu_count,
            memory_gb=template.memory_gb or self.default_memory_gb,
            start=True,
            administrator_password=template.ssh_password if template.has_ssh_credentials else None,
            description=name,
        )

    def _create_servers(self, request: ProvisioningRequest, network_domain_id: str, vlan_id: str,
                        accumulator: ConditionAccumulator, handles: List[ProvisionedResourceHandle],
                        handles_lock: threading.Lock) -> List[Tuple[str, Optional[ProvisionedResourceHandle]]]:
        """Create every server and wait for it; results are in request order."""
        if not request.instance_ids:
            return []

        workers = min(self.max_parallel_servers, request.requested_count)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="provision") as executor:
            futures = [
                executor.submit(self._provision_server,
                                instance_id,
                                self._server_spec(request.template, instance_id, network_domain_id, vlan_id),
                                accumulator, handles, handles_lock)
                for instance_id in request.instance_ids
            ]

            outcomes = []
            cancelled: Optional[OperationCancelledError] = None
            for instance_id, future in zip(request.instance_ids, futures):
                try:
                    outcomes.append((instance_id, future.result()))
                except OperationCancelledError as e:
                    cancelled = cancelled or e

        if cancelled is not None:
            raise cancelled
        return outcomes

    def _provision_server(self, instance_id: str, spec: ServerSpec, accumulator: ConditionAccumulator,
                          handles: List[ProvisionedResourceHandle],
                          handles_lock: threading.Lock) -> Optional[ProvisionedResourceHandle]:
        """Create one server and wait for it to run. Failures are keyed by instance id."""
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise OperationCancelledError(f"Not creating server '{spec.name}'")

        try:
            handle = self.client.create_server(spec)
        except CloudClientError as e:
            logger.error(f"Failed to create server '{spec.name}': {str(e)}")
            accumulator.add_error(instance_id, str(e))
            return None
        except Exception as e:
            logger.exception(f"Unexpected error creating server '{spec.name}'")
            accumulator.add_error(instance_id, f"Unexpected error creating server '{spec.name}': {str(e)}")
            return None

        with handles_lock:
            handles.append(handle)

        if not handle.accepted:
            accumulator.add_error(instance_id, f"Server deployment was not accepted: {handle.response_code}")
            return None

        try:
            running = self.poller.await_ready(ResourceType.SERVER, handle.resource_id, server_is_running,
                                              accumulator=accumulator, key=instance_id)
        except OperationCancelledError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error waiting for server '{spec.name}'")
            accumulator.add_error(instance_id, f"Unexpected error waiting for server '{spec.name}': {str(e)}")
            return None

        if not running:
            logger.error(f"Server '{spec.name}' did not reach RUNNING")
            return None

        logger.info(f"Server '{spec.name}' ({handle.resource_id}) is running")
        return handle

    def _abort(self, handles: List[ProvisionedResourceHandle], accumulator: ConditionAccumulator) -> None:
        """Roll back every issued handle and fail the allocation."""
        self.teardown_handler.teardown_handles(list(handles), accumulator)
        raise UnrecoverableProviderError.from_accumulator(ALLOCATE_FAILED_MSG, accumulator)
