"""Infrastructure resilience package - polling schedules and readiness waits."""

from .backoff import FibonacciBackoff
from .readiness_poller import ReadinessPoller, server_is_running, state_is_normal

__all__: list[str] = [
    "FibonacciBackoff",
    "ReadinessPoller",
    "server_is_running",
    "state_is_normal",
]
