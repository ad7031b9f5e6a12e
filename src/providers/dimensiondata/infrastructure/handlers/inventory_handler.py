"""Lookup of provisioned instances by logical id."""
import logging
from typing import Dict, List, Sequence

from src.domain.instance.instance_aggregate import ComputeInstance
from src.domain.instance.instance_status import InstanceStatus
from src.domain.template.template_aggregate import ResourceTemplate
from src.domain.template.validation import is_prefix_valid
from src.providers.dimensiondata.exceptions import CloudClientError, NotFoundError
from src.providers.dimensiondata.infrastructure.handlers.base_handler import DimensionDataHandler

logger = logging.getLogger(__name__)


class InventoryHandler(DimensionDataHandler):
    """Resolves logical instance ids to servers and their status.

    Neither operation queries the cloud when the template's instance name
    prefix is invalid, since no server could have been created with it.
    """

    def find(self, template: ResourceTemplate, instance_ids: Sequence[str]) -> List[ComputeInstance]:
        """
        Return the instances that currently exist, in request order.

        Absent instances are skipped.

        Raises:
            TransientProviderError: On any client error other than not-found
        """
        if not is_prefix_valid(template.instance_name_prefix):
            return []

        instances = []
        for instance_id in instance_ids:
            try:
                server = self._resolve_server(template, instance_id)
            except NotFoundError:
                server = None
            except CloudClientError as e:
                raise self._convert_client_error(e, f"Unable to look up instance '{instance_id}'")

            if server is None:
                logger.info(f"Instance '{template.decorate_instance_name(instance_id)}' not found")
                continue
            instances.append(ComputeInstance(template, instance_id, server))

        logger.debug(f"Found {len(instances)} of {len(instance_ids)} instances")
        return instances

    def get_instance_state(self, template: ResourceTemplate,
                           instance_ids: Sequence[str]) -> Dict[str, InstanceStatus]:
        """Return one status per requested id. Per-id failures map to UNKNOWN."""
        if not is_prefix_valid(template.instance_name_prefix):
            return {instance_id: InstanceStatus.UNKNOWN for instance_id in instance_ids}

        states: Dict[str, InstanceStatus] = {}
        for instance_id in instance_ids:
            try:
                server = self._resolve_server(template, instance_id)
            except NotFoundError:
                server = None
            except CloudClientError as e:
                logger.warning(f"Unable to get state of instance '{instance_id}': {str(e)}")
                states[instance_id] = InstanceStatus.UNKNOWN
                continue

            if server is None:
                states[instance_id] = InstanceStatus.DELETED
            else:
                states[instance_id] = server.status
        return states
