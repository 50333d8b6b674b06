"""Shared CLI utilities and argument parsers."""

import argparse
import logging

from ..config import ConfigError, ServiceConfig, find_config_file, load_config

logger = logging.getLogger(__name__)


def add_verbosity_args(parser: argparse.ArgumentParser) -> None:
    """Add verbosity-related arguments to a parser."""
    group = parser.add_argument_group("Output options")
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )


def get_log_level(args: argparse.Namespace) -> str:
    """Determine log level from parsed arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR)
    """
    if getattr(args, "debug", False):
        return "DEBUG"
    elif getattr(args, "quiet", False):
        return "WARNING"
    elif getattr(args, "verbose", False):
        return "DEBUG"
    else:
        return "INFO"


def load_service_config(args: argparse.Namespace) -> ServiceConfig:
    """Find and load the configuration named on the command line.

    Warnings are logged, errors raised.

    Raises:
        ConfigError: No config found, or the config is invalid
    """
    config_path = find_config_file(getattr(args, "config", None))
    if config_path is None:
        raise ConfigError(
            "No configuration file found. Create one with: btrbk-deploy config init"
        )

    logger.debug("Using configuration %s", config_path)
    config, warnings = load_config(config_path)
    for warning in warnings:
        logger.warning("%s", warning)
    return config
