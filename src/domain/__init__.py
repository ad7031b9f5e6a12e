"""Domain layer - templates, instances, status translation and condition accumulation."""
