"""Domain ports for infrastructure concerns."""

from .cloud_client_port import CloudResourceClientPort

__all__ = [
    "CloudResourceClientPort",
]
