"""Base handler with common functionality."""
import logging
from abc import ABC
from typing import Optional

from src.domain.base.ports.cloud_client_port import CloudResourceClientPort
from src.domain.instance.value_objects import ServerDetails
from src.domain.template.template_aggregate import ResourceTemplate
from src.infrastructure.exceptions import TransientProviderError
from src.infrastructure.resilience import ReadinessPoller
from src.providers.dimensiondata.exceptions import CloudClientError

logger = logging.getLogger(__name__)


class DimensionDataHandler(ABC):
    """Base class for the allocate/find/delete handlers."""

    def __init__(self, client: CloudResourceClientPort, poller: ReadinessPoller) -> None:
        """
        Initialize handler with common dependencies.

        Args:
            client: Cloud resource client
            poller: Readiness poller sharing the same client
        """
        self.client = client
        self.poller = poller

    def _resolve_server(self, template: ResourceTemplate, instance_id: str) -> Optional[ServerDetails]:
        """
        Find the server backing a logical instance id by its decorated name.

        Returns:
            The first matching server, or None when no server has that name

        Raises:
            CloudClientError: On any client failure, including not-found
        """
        name = template.decorate_instance_name(instance_id)
        servers = self.client.list_servers(name)
        if not servers:
            return None
        if len(servers) > 1:
            logger.warning(f"Found {len(servers)} servers named '{name}', using {servers[0].id}")
        return servers[0]

    @staticmethod
    def _convert_client_error(error: CloudClientError, operation: str) -> TransientProviderError:
        """Wrap a client error that fails a whole call."""
        logger.error(f"{operation}: {str(error)}")
        return TransientProviderError(f"{operation}: {str(error)}", error)
