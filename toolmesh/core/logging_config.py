"""
Logging Configuration Module.

This module provides centralized logging configuration for the toolmesh project.
It sets up logging with different levels for different modules and environments.

Features:
- Configurable log levels per module
- Console and optional file logging
- Simple, detailed and JSON-like line formats

Logging is configured explicitly by calling ``setup_logging`` (the server does
so at startup); importing this module has no side effects on the root logger.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError


def _get_logging_config() -> Dict[str, object]:
    """Get logging configuration from settings model.

    This function is used to defer settings import until needed,
    avoiding circular imports during module initialization.
    """
    try:
        from toolmesh.server.core.config import settings

        log_level = settings.log_level
    except (ImportError, ValidationError):
        # Fallback to environment variables if settings not available
        log_level = os.getenv("TOOLMESH_LOG_LEVEL", "INFO")

    return {
        "log_level": log_level.upper(),
        "log_format": os.getenv("TOOLMESH_LOG_FORMAT", "detailed"),
        "log_file_dir": os.getenv("TOOLMESH_LOG_FILE_DIR", "logs"),
        "enable_file_logging": os.getenv("TOOLMESH_ENABLE_FILE_LOGGING", "false").lower() in ("true", "1", "yes"),
    }


# Define log formats
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

LOG_FILE_NAME = "toolmesh.log"


# Module-specific log levels
MODULE_LOG_LEVELS = {
    # Core modules
    "toolmesh.agent_core": "DEBUG",
    "toolmesh.agent_core.capabilities": "INFO",
    "toolmesh.agent_core.planning": "DEBUG",
    "toolmesh.agent_core.runtime": "DEBUG",
    "toolmesh.agent_core.toolchain": "DEBUG",
    "toolmesh.agent_core.service": "DEBUG",
    "toolmesh.agent_core.model_provider": "DEBUG",
    # Server modules
    "toolmesh.server": "INFO",
    "toolmesh.server.api": "DEBUG",
    "toolmesh.server.core": "INFO",
    # Third-party libraries (reduce noise)
    "httpx": "WARNING",
    "openai": "WARNING",
    "mcp": "INFO",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def _format_string(fmt: str) -> str:
    if fmt == "json":
        return JSON_FORMAT
    if fmt == "simple":
        return SIMPLE_FORMAT
    return DETAILED_FORMAT


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: Optional[bool] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Override default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Override default format (simple, detailed, json)
        enable_file: Override whether to write ``toolmesh.log`` into the log directory
    """
    config = _get_logging_config()
    level = str(log_level or config["log_level"]).upper()
    fmt = str(log_format or config["log_format"])
    file_logging = bool(config["enable_file_logging"]) if enable_file is None else enable_file

    formatter = logging.Formatter(_format_string(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, filter at handler level

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_logging:
        log_dir = Path(str(config["log_file_dir"]))
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Configure module-specific log levels
    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
