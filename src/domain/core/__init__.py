"""Core domain types shared across bounded contexts."""
