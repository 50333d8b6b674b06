"""Render command: Print the btrbk.conf text of instances."""

import argparse
import logging

from ..__logger__ import create_logger
from ..btrbk import BtrbkConfigError
from ..config import ConfigError
from ..deploy import render_instance
from .common import get_log_level, load_service_config

logger = logging.getLogger(__name__)


def execute_render(args: argparse.Namespace) -> int:
    """Execute the render command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(log_level)

    try:
        config = load_service_config(args)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    names = getattr(args, "instances", None) or list(config.instances)
    unknown = [name for name in names if name not in config.instances]
    if unknown:
        logger.error("Unknown instance(s): %s", ", ".join(unknown))
        return 1

    for name in names:
        try:
            text = render_instance(config.instances[name])
        except BtrbkConfigError as e:
            logger.error("Instance '%s': %s", name, e)
            return 1

        # Label each file when more than one is printed
        if len(names) > 1:
            print(f"# {name}")
        print(text, end="")

    return 0
