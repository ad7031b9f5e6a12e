"""Dimension Data Compute Provider - Root Package.

This package provisions and tears down network domains, VLANs and servers on
the Dimension Data CloudControl platform and reports their lifecycle status
to an orchestration caller.

Key Components:
    - domain: Templates, instance status, conditions and the client port
    - infrastructure: Provider exceptions and readiness polling
    - providers: The CloudControl client, lifecycle handlers and facade
    - config: Configuration schemas and loading
"""

from ._version import __version__

PACKAGE_NAME = "dimensiondata-compute-provider"
__package_name__ = PACKAGE_NAME

"""
Usage:
    >>> from src.config import ConfigurationManager
    >>> from src.providers.dimensiondata.compute_provider import DimensionDataComputeProvider
    >>> config = ConfigurationManager().app_config
    >>> provider = DimensionDataComputeProvider.from_config(config)
    >>> template = provider.create_resource_template("hadoop", {"datacenter": "NA9", "networkName": "hadoop"})
    >>> provider.allocate(template, ["a1", "a2"], min_count=2)

Note:
    CloudControl credentials are read from the provider configuration
    (DD_USERNAME / DD_PASSWORD).
"""
