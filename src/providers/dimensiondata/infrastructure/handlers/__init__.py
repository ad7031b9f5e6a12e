"""Lifecycle handlers for the Dimension Data provider."""
from src.providers.dimensiondata.infrastructure.handlers.base_handler import DimensionDataHandler
from src.providers.dimensiondata.infrastructure.handlers.inventory_handler import InventoryHandler
from src.providers.dimensiondata.infrastructure.handlers.provisioning_handler import (
    AllocationResult,
    ProvisioningHandler,
)
from src.providers.dimensiondata.infrastructure.handlers.teardown_handler import TeardownHandler

__all__ = [
    "AllocationResult",
    "DimensionDataHandler",
    "InventoryHandler",
    "ProvisioningHandler",
    "TeardownHandler",
]
