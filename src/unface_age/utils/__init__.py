"""Utility modules for the Unface age detection service."""

from .config_loader import (
    ConfigurationError,
    DEFAULT_CONFIG,
    load_config,
    load_config_from_file,
    load_config_from_env,
    merge_configs,
    validate_config,
)
from .logging_config import setup_logging, log_execution_time

__all__ = [
    'ConfigurationError',
    'DEFAULT_CONFIG',
    'load_config',
    'load_config_from_file',
    'load_config_from_env',
    'merge_configs',
    'validate_config',
    'setup_logging',
    'log_execution_time',
]
