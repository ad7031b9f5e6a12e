"""CloudControl client and lifecycle handlers."""
