"""Tutor session report engine."""

__version__ = "0.3.0"
