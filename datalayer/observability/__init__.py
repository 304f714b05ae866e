"""
Observability module.

Provides logging configuration for the data layer.
"""

from datalayer.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
