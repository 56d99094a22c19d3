"""Logging scaffolds for orchestration events."""

from .logger import EventLogger, configure_logging

__all__ = ["EventLogger", "configure_logging"]
