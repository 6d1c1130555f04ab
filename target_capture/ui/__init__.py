"""PyQt6 user interface for capturing shot groups."""
