"""Configuration system for btrbk-deploy.

This module provides TOML-based configuration loading, validation,
and schema definitions for btrbk deployments.
"""

from .loader import ConfigError, find_config_file, load_config, parse_config
from .schema import (
    InstanceConfig,
    ServiceConfig,
    SshAccess,
    ToolPaths,
)

__all__ = [
    "InstanceConfig",
    "ServiceConfig",
    "SshAccess",
    "ToolPaths",
    "load_config",
    "parse_config",
    "find_config_file",
    "ConfigError",
]
