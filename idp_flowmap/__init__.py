"""Animated map of internal displacement flows between states."""

__version__ = "0.1.0"
