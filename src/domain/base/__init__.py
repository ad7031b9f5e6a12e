"""Base domain layer - ports shared by all bounded contexts."""
