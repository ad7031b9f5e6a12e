"""Server deletion and allocation rollback."""
import logging
from typing import List, Sequence, Tuple

from src.domain.core.conditions import ConditionAccumulator
from src.domain.instance.value_objects import ProvisionedResourceHandle, ResourceType
from src.domain.template.template_aggregate import ResourceTemplate
from src.domain.template.validation import is_prefix_valid
from src.infrastructure.exceptions import OperationCancelledError, UnrecoverableProviderError
from src.providers.dimensiondata.exceptions import CloudClientError, NotFoundError
from src.providers.dimensiondata.infrastructure.handlers.base_handler import DimensionDataHandler

logger = logging.getLogger(__name__)

DELETE_FAILED_MSG = "Problem deleting instances."
TEARDOWN_INCOMPLETE_MSG = "{} of the {} tear down operations completed successfully."


class TeardownHandler(DimensionDataHandler):
    """Deletes servers by logical id and rolls back partially built allocations."""

    def delete(self, template: ResourceTemplate, instance_ids: Sequence[str]) -> None:
        """
        Delete the servers for the given logical ids.

        Servers that do not exist are treated as already deleted. Deletions
        are issued in request order and confirmed in reverse order.

        Raises:
            UnrecoverableProviderError: If any deletion failed or was not confirmed
        """
        if not is_prefix_valid(template.instance_name_prefix):
            return

        accumulator = ConditionAccumulator()
        issued: List[Tuple[str, ProvisionedResourceHandle]] = []

        for instance_id in instance_ids:
            name = template.decorate_instance_name(instance_id)
            try:
                server = self._resolve_server(template, instance_id)
                if server is None:
                    logger.info(f"Attempted to delete server '{name}', which does not exist")
                    continue
                handle = self.client.delete_server(server.id)
            except NotFoundError:
                logger.info(f"Attempted to delete server '{name}', which does not exist")
                continue
            except CloudClientError as e:
                logger.error(f"Failed to delete server '{name}': {str(e)}")
                accumulator.add_error(instance_id, str(e))
                continue

            if handle.accepted:
                issued.append((instance_id, handle))
            else:
                accumulator.add_error(instance_id,
                                      f"Deletion of server '{name}' was not accepted: {handle.response_code}")

        try:
            for instance_id, handle in reversed(issued):
                self.poller.await_deleted(ResourceType.SERVER, handle.resource_id,
                                          accumulator=accumulator, key=instance_id)
        except OperationCancelledError as e:
            raise OperationCancelledError(str(e), [handle for _, handle in issued]) from e

        if accumulator.has_error():
            raise UnrecoverableProviderError.from_accumulator(DELETE_FAILED_MSG, accumulator)

    def teardown_handles(self, handles: Sequence[ProvisionedResourceHandle],
                         accumulator: ConditionAccumulator) -> bool:
        """
        Tear down resources created by a failed allocation.

        Servers go first (newest first) and are awaited until gone, then the
        VLAN is deleted and awaited, then the network domain is deleted.

        Returns:
            True if every tear down operation completed
        """
        servers = [h for h in handles if h.resource_type == ResourceType.SERVER]
        vlans = [h for h in handles if h.resource_type == ResourceType.VLAN]
        network_domains = [h for h in handles if h.resource_type == ResourceType.NETWORK_DOMAIN]
        total = len(handles)
        logger.info(f"Rolling back {total} resources")

        completed = self._delete_and_await(servers, self.client.delete_server, accumulator)
        completed += self._delete_and_await(vlans, self.client.delete_vlan, accumulator)
        for handle in reversed(network_domains):
            if self._issue_delete(handle, self.client.delete_network_domain, accumulator) is not None:
                completed += 1

        if completed < total:
            message = TEARDOWN_INCOMPLETE_MSG.format(completed, total)
            logger.error(message)
            accumulator.add_error(None, message)
            return False
        return True

    def _delete_and_await(self, handles: Sequence[ProvisionedResourceHandle], delete_fn,
                          accumulator: ConditionAccumulator) -> int:
        completed = 0
        pending = []
        for handle in reversed(handles):
            result = self._issue_delete(handle, delete_fn, accumulator)
            if result is True:
                completed += 1
            elif result is not None:
                pending.append(result)

        for delete_handle in pending:
            if self.poller.await_deleted(delete_handle.resource_type, delete_handle.resource_id,
                                         accumulator=accumulator, key=str(delete_handle)):
                completed += 1
        return completed

    @staticmethod
    def _issue_delete(handle: ProvisionedResourceHandle, delete_fn, accumulator: ConditionAccumulator):
        """
        Issue one deletion.

        Returns:
            The deletion handle, True when the resource was already gone, or
            None when the deletion failed (a condition is recorded)
        """
        try:
            delete_handle = delete_fn(handle.resource_id)
        except NotFoundError:
            logger.info(f"{handle} already deleted")
            return True
        except CloudClientError as e:
            logger.error(f"Failed to delete {handle}: {str(e)}")
            accumulator.add_error(str(handle), str(e))
            return None

        if not delete_handle.accepted:
            accumulator.add_error(str(handle), f"Deletion of {handle} was not accepted: {delete_handle.response_code}")
            return None
        logger.info(f"Deletion of {handle} issued")
        return delete_handle
