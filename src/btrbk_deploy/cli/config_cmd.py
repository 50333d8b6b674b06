"""Config command: Configuration management."""

import argparse
import logging

from ..__logger__ import create_logger
from ..btrbk import BtrbkConfigError, BtrbkSyntaxError, ensure_valid
from ..config import ConfigError
from ..config.loader import generate_example_config
from ..deploy import build_plan
from .common import get_log_level, load_service_config

logger = logging.getLogger(__name__)


def execute_config(args: argparse.Namespace) -> int:
    """Execute the config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(log_level)

    action = getattr(args, "config_action", None)

    if action == "validate":
        return _validate_config(args)
    elif action == "init":
        return _init_config(args)
    else:
        print("Usage: btrbk-deploy config <validate|init>")
        return 1


def _validate_config(args: argparse.Namespace) -> int:
    """Build, render and validate every instance through btrbk."""
    try:
        config = load_service_config(args)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    btrbk = getattr(args, "btrbk", None) or config.paths.btrbk
    skip = getattr(args, "no_btrbk", False)

    try:
        build_plan(
            config,
            validate=not skip,
            validator=lambda name, text: ensure_valid(name, text, btrbk=btrbk),
        )
    except BtrbkSyntaxError as e:
        logger.error("%s", e)
        print(f"# Rendered configuration of instance '{e.instance}':")
        print(e.text, end="")
        return 1
    except BtrbkConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    print("Configuration is valid.")
    print(f"  Instances: {len(config.instances)}")
    total_volumes = sum(
        len(i.settings.get("volumes", {})) for i in config.instances.values()
    )
    print(f"  Volumes: {total_volumes}")
    print(f"  SSH keys: {len(config.ssh_access)}")
    if skip:
        print("  (btrbk round trip skipped)")

    return 0


def _init_config(args: argparse.Namespace) -> int:
    """Generate example configuration."""
    content = generate_example_config()

    output = getattr(args, "output", None)
    if output:
        try:
            with open(output, "w") as f:
                f.write(content)
            print(f"Example configuration written to: {output}")
        except OSError as e:
            print(f"Error writing file: {e}")
            return 1
    else:
        print(content)

    return 0
