"""
Core utilities for taskgate.

This package provides logging configuration shared by the engine and the
server.
"""

from taskgate.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
