"""Infrastructure layer - exceptions and resilience shared by providers."""
