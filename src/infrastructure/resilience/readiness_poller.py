"""Readiness polling for asynchronous CloudControl operations."""
import logging
import threading
import time
from typing import Callable, Optional

from src.domain.base.ports.cloud_client_port import CloudResourceClientPort
from src.domain.core.conditions import ConditionAccumulator
from src.domain.instance.instance_status import InstanceStatus
from src.domain.instance.value_objects import ResourceSnapshot, ResourceType
from src.infrastructure.exceptions import OperationCancelledError
from src.infrastructure.resilience.backoff import FibonacciBackoff
from src.providers.dimensiondata.exceptions import CloudClientError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 180
DEFAULT_DELETE_TIMEOUT_SECONDS = 300
DEFAULT_DELETE_INITIAL_DELAY_SECONDS = 30

TIMEOUT_MSG = ("Exceeded timeout of '{}' seconds while polling for pending operations "
               "to complete.")
DELETE_TIMEOUT_MSG = "Exceeded timeout of '{}' seconds while waiting for {} '{}' to be deleted."

ReadinessPredicate = Callable[[ResourceSnapshot], bool]


def state_is_normal(snapshot: ResourceSnapshot) -> bool:
    """Network domains and VLANs are ready once they report NORMAL."""
    return snapshot.state == "NORMAL"


def server_is_running(snapshot: ResourceSnapshot) -> bool:
    return snapshot.status == InstanceStatus.RUNNING


class ReadinessPoller:
    """
    Waits for a resource to reach a target state, sleeping between polls on
    a Fibonacci backoff schedule.

    Client errors end the wait immediately; they are recorded on the
    accumulator and reported as a failed wait rather than raised. A timeout
    is reported the same way. Only cancellation raises.
    """

    def __init__(self, client: CloudResourceClientPort,
                 timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 initial_interval: float = 1.0,
                 max_interval: float = 8.0,
                 delete_timeout: float = DEFAULT_DELETE_TIMEOUT_SECONDS,
                 delete_initial_delay: float = DEFAULT_DELETE_INITIAL_DELAY_SECONDS,
                 cancel_event: Optional[threading.Event] = None,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Optional[Callable[[float], None]] = None):
        """
        Initialize the poller.

        Args:
            client: Cloud client used to query resource state
            timeout: Default readiness timeout in seconds
            initial_interval: First polling interval in seconds
            max_interval: Cap on the polling interval in seconds
            delete_timeout: Ceiling for delete confirmation in seconds
            delete_initial_delay: Delay before the first delete confirmation poll
            cancel_event: Event that, once set, abandons any wait in progress
            clock: Monotonic clock, injectable for tests
            sleep: Sleep function, injectable for tests. When omitted and a
                cancel_event is given, sleeping waits on the event so that
                cancellation interrupts it immediately.
        """
        self._client = client
        self.timeout = timeout
        self.delete_timeout = delete_timeout
        self.delete_initial_delay = delete_initial_delay
        self._backoff = FibonacciBackoff(initial_interval, max_interval)
        self._cancel_event = cancel_event
        self._clock = clock
        self._sleep = sleep

    def await_ready(self, resource_type: ResourceType, resource_id: str,
                    target_predicate: ReadinessPredicate,
                    timeout: Optional[float] = None,
                    accumulator: Optional[ConditionAccumulator] = None,
                    key: Optional[str] = None) -> bool:
        """
        Poll until ``target_predicate`` holds for the resource.

        Args:
            resource_type: Kind of resource being polled
            resource_id: Provider id of the resource
            target_predicate: Evaluated against each ResourceSnapshot
            timeout: Seconds to wait; defaults to the poller timeout
            accumulator: Receives a condition when the wait fails
            key: Condition key used for failures

        Returns:
            True as soon as the predicate holds, False on client error or timeout

        Raises:
            OperationCancelledError: If cancellation is requested during a sleep
        """
        timeout = self.timeout if timeout is None else timeout
        accumulator = accumulator if accumulator is not None else ConditionAccumulator()
        start = self._clock()
        elapsed = 0.0

        for interval in self._backoff:
            if elapsed >= timeout:
                break
            self._pause(interval)

            logger.info(f"Checking {resource_type.value} status for {resource_id}")
            try:
                snapshot = self._probe(resource_type, resource_id)
            except CloudClientError as e:
                logger.error(f"Failed to query {resource_type.value} {resource_id}: {str(e)}")
                accumulator.add_error(key, str(e))
                return False

            if target_predicate(snapshot):
                logger.debug(f"{resource_type.value} {resource_id} reached state {snapshot.state}")
                return True
            elapsed = self._clock() - start

        logger.warning(f"Timed out after {elapsed:.0f}s waiting for {resource_type.value} {resource_id}")
        accumulator.add_error(key, TIMEOUT_MSG.format(_format_seconds(timeout)))
        return False

    def await_deleted(self, resource_type: ResourceType, resource_id: str,
                      timeout: Optional[float] = None,
                      initial_delay: Optional[float] = None,
                      accumulator: Optional[ConditionAccumulator] = None,
                      key: Optional[str] = None) -> bool:
        """
        Wait for a resource to disappear.

        Deletions are slower than creations, so the first poll only happens
        after ``initial_delay`` seconds; later polls follow the backoff
        schedule until ``timeout``.

        Returns:
            True once the resource reports not-found, False on client error or timeout
        """
        timeout = self.delete_timeout if timeout is None else timeout
        initial_delay = self.delete_initial_delay if initial_delay is None else initial_delay
        accumulator = accumulator if accumulator is not None else ConditionAccumulator()
        start = self._clock()

        self._pause(initial_delay)
        for interval in self._backoff:
            try:
                snapshot = self._probe(resource_type, resource_id)
            except NotFoundError:
                logger.info(f"{resource_type.value} {resource_id} deleted")
                return True
            except CloudClientError as e:
                logger.error(f"Failed to confirm deletion of {resource_type.value} {resource_id}: {str(e)}")
                accumulator.add_error(key, str(e))
                return False

            logger.debug(f"{resource_type.value} {resource_id} still present in state {snapshot.state}")
            if self._clock() - start >= timeout:
                break
            self._pause(interval)

        accumulator.add_error(key, DELETE_TIMEOUT_MSG.format(
            _format_seconds(timeout), resource_type.value, resource_id))
        return False

    def _probe(self, resource_type: ResourceType, resource_id: str) -> ResourceSnapshot:
        if resource_type == ResourceType.SERVER:
            server = self._client.get_server(resource_id)
            return ResourceSnapshot(server.state, server.started)
        return ResourceSnapshot(self._client.get_resource_state(resource_type, resource_id))

    def _pause(self, seconds: float) -> None:
        if self._cancel_event is not None and self._sleep is None:
            cancelled = self._cancel_event.wait(seconds)
        else:
            (self._sleep or time.sleep)(seconds)
            cancelled = self._cancel_event is not None and self._cancel_event.is_set()

        if cancelled:
            logger.info("Cancellation requested, abandoning wait")
            raise OperationCancelledError("Wait cancelled")


def _format_seconds(seconds: float) -> str:
    return str(int(seconds)) if float(seconds).is_integer() else str(seconds)
