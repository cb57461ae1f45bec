"""HTA: a personal task tracker with cycle-safe task dependencies."""

__version__ = "0.3.0"
