"""Deploy and plan commands: Write or list deployment artifacts."""

import argparse
import logging

from ..__logger__ import create_logger
from ..btrbk import BtrbkConfigError, BtrbkSyntaxError, ensure_valid
from ..config import ConfigError
from ..deploy import DeploymentPlan, build_plan, write_plan
from .common import get_log_level, load_service_config

logger = logging.getLogger(__name__)


def _plan_from_args(args: argparse.Namespace) -> DeploymentPlan | None:
    """Load the config and build the plan, logging any failure."""
    try:
        config = load_service_config(args)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return None

    btrbk = getattr(args, "btrbk", None) or config.paths.btrbk
    try:
        return build_plan(
            config,
            validate=not getattr(args, "skip_validation", False),
            validator=lambda name, text: ensure_valid(name, text, btrbk=btrbk),
        )
    except BtrbkSyntaxError as e:
        logger.error("%s, nothing was deployed", e)
        print(f"# Rendered configuration of instance '{e.instance}':")
        print(e.text, end="")
        return None
    except BtrbkConfigError as e:
        logger.error("Configuration error: %s", e)
        return None


def execute_plan(args: argparse.Namespace) -> int:
    """Execute the plan command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(log_level)

    plan = _plan_from_args(args)
    if plan is None:
        return 1

    for artifact in plan.artifacts:
        print(f"{artifact.mode:04o} {artifact.path}")
    return 0


def execute_deploy(args: argparse.Namespace) -> int:
    """Execute the deploy command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(log_level)

    plan = _plan_from_args(args)
    if plan is None:
        return 1

    if getattr(args, "dry_run", False):
        for artifact in plan.artifacts:
            logger.info("Would write %s", artifact.path)
        return 0

    try:
        written = write_plan(plan, args.root)
    except OSError as e:
        logger.error("Deployment failed: %s", e)
        return 1

    logger.info("Deployed %d file(s) below %s", len(written), args.root)
    return 0
