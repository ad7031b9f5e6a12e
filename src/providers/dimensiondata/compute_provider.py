"""Dimension Data compute provider facade."""
import logging
import threading
from typing import Any, Dict, List, Mapping, Optional, Sequence

from src.config.schemas import AppConfig
from src.domain.base.ports.cloud_client_port import CloudResourceClientPort
from src.domain.core.conditions import ConditionAccumulator
from src.domain.instance.instance_aggregate import ComputeInstance
from src.domain.instance.instance_status import InstanceStatus
from src.domain.template.template_aggregate import ResourceTemplate
from src.infrastructure.exceptions import ConfigurationValidationError, TransientProviderError
from src.infrastructure.resilience import ReadinessPoller
from src.providers.dimensiondata.configuration_validator import TemplateConfigurationValidator
from src.providers.dimensiondata.credentials import DimensionDataCredentials
from src.providers.dimensiondata.exceptions import CloudClientError
from src.providers.dimensiondata.infrastructure.cloudcontrol_client import CloudControlClient
from src.providers.dimensiondata.infrastructure.handlers import (
    AllocationResult,
    InventoryHandler,
    ProvisioningHandler,
    TeardownHandler,
)

logger = logging.getLogger(__name__)

TEMPLATE_INVALID_MSG = "Template configuration is invalid."


class DimensionDataComputeProvider:
    """
    Entry point for the orchestration caller.

    Wires one client, one poller and the lifecycle handlers together, and
    checks on construction that the credentials can reach the API.
    """

    def __init__(self, client: CloudResourceClientPort, config: Optional[AppConfig] = None,
                 cancel_event: Optional[threading.Event] = None,
                 verify_connectivity: bool = True,
                 poller: Optional[ReadinessPoller] = None):
        """
        Initialize the provider.

        Args:
            client: Cloud resource client
            config: Application configuration; defaults when omitted
            cancel_event: Set to abandon waits and stop creating servers
            verify_connectivity: List one datacenter to check the credentials
            poller: Pre-built poller, mainly for tests

        Raises:
            TransientProviderError: If the connectivity check fails
        """
        self.config = config or AppConfig()
        self.client = client
        self.cancel_event = cancel_event

        polling = self.config.polling
        self.poller = poller or ReadinessPoller(
            client,
            timeout=polling.timeout,
            initial_interval=polling.initial_interval,
            max_interval=polling.max_interval,
            delete_timeout=polling.delete_timeout,
            delete_initial_delay=polling.delete_initial_delay,
            cancel_event=cancel_event,
        )
        self.validator = TemplateConfigurationValidator(client)
        self.inventory_handler = InventoryHandler(client, self.poller)
        self.teardown_handler = TeardownHandler(client, self.poller)
        self.provisioning_handler = ProvisioningHandler(
            client,
            self.poller,
            self.teardown_handler,
            network_domain_description=self.config.provider.network_domain_description,
            default_cpu_count=self.config.server_defaults.cpu_count,
            default_memory_gb=self.config.server_defaults.memory_gb,
            max_parallel_servers=self.config.provider.max_parallel_servers,
            cancel_event=cancel_event,
        )

        if verify_connectivity:
            self.verify_connectivity()

    @classmethod
    def from_config(cls, config: AppConfig, cancel_event: Optional[threading.Event] = None,
                    verify_connectivity: bool = True) -> "DimensionDataComputeProvider":
        """Build a provider with a CloudControlClient from the provider configuration."""
        credentials = DimensionDataCredentials(
            username=config.provider.username,
            password=config.provider.password,
            region=config.provider.region,
        )
        client = CloudControlClient(
            credentials,
            timeout=config.provider.request_timeout,
            base_url=config.provider.api_base_url or None,
        )
        return cls(client, config, cancel_event=cancel_event, verify_connectivity=verify_connectivity)

    def verify_connectivity(self) -> None:
        try:
            self.client.list_datacenters(page_size=1)
        except CloudClientError as e:
            logger.error(f"Unable to list datacenters: {str(e)}")
            raise TransientProviderError(f"Unable to list datacenters: {str(e)}", e) from e
        logger.info("Connectivity to CloudControl verified")

    def create_resource_template(self, name: str, configuration: Mapping[str, Any],
                                 tags: Optional[Dict[str, str]] = None) -> ResourceTemplate:
        return ResourceTemplate.from_dict(name, configuration, tags)

    def validate_template(self, name: str, configuration: Mapping[str, Any]) -> ConditionAccumulator:
        """
        Validate template configuration.

        Raises:
            ConfigurationValidationError: If any check reported an error
        """
        accumulator = self.validator.validate(name, configuration)
        if accumulator.has_error():
            raise ConfigurationValidationError.from_accumulator(TEMPLATE_INVALID_MSG, accumulator)
        return accumulator

    def allocate(self, template: ResourceTemplate, instance_ids: Sequence[str],
                 min_count: int) -> AllocationResult:
        return self.provisioning_handler.allocate(template, instance_ids, min_count)

    def find(self, template: ResourceTemplate, instance_ids: Sequence[str]) -> List[ComputeInstance]:
        return self.inventory_handler.find(template, instance_ids)

    def get_instance_state(self, template: ResourceTemplate,
                           instance_ids: Sequence[str]) -> Dict[str, InstanceStatus]:
        return self.inventory_handler.get_instance_state(template, instance_ids)

    def delete(self, template: ResourceTemplate, instance_ids: Sequence[str]) -> None:
        self.teardown_handler.delete(template, instance_ids)
