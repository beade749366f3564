"""
Core utilities for toolmesh.

This package provides shared functionality such as logging configuration.
"""

from toolmesh.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
