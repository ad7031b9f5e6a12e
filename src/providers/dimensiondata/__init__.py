"""Dimension Data (CloudControl) compute provider.

Import the facade from ``src.providers.dimensiondata.compute_provider``.
"""
