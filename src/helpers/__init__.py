"""Application helpers."""
