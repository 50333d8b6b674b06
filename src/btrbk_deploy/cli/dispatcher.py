"""CLI dispatcher.

This module builds the argument parser and routes each subcommand to
its handler module.
"""

import argparse
import sys
from typing import Callable

from ..btrbk.sections import SectionKind
from .common import add_verbosity_args

SECTIONS = tuple(kind.value for kind in SectionKind)


def create_subcommand_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="btrbk-deploy",
        description="Declare, validate and deploy btrbk configurations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    add_verbosity_args(parser)

    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help="Path to configuration file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands (use 'command --help' for details)",
    )

    # render command
    render_parser = subparsers.add_parser(
        "render",
        help="Print rendered btrbk.conf files",
        description="Build and render the btrbk configuration of instances",
    )
    render_parser.add_argument(
        "instances",
        metavar="INSTANCE",
        nargs="*",
        help="Only render these instances (default: all)",
    )

    # plan command
    plan_parser = subparsers.add_parser(
        "plan",
        help="List the files a deployment would write",
        description="Validate every instance and list the deployment artifacts",
    )
    _add_validation_args(plan_parser)

    # deploy command
    deploy_parser = subparsers.add_parser(
        "deploy",
        help="Write configs, units and access rules",
        description="Validate every instance, then write all deployment artifacts",
    )
    deploy_parser.add_argument(
        "--root",
        metavar="DIR",
        default="/",
        help="Write files below this directory (default: /)",
    )
    deploy_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without writing",
    )
    _add_validation_args(deploy_parser)

    # options command
    options_parser = subparsers.add_parser(
        "options",
        help="Show the accepted btrbk.conf options",
        description="List every option and the sections it is legal in",
    )
    options_parser.add_argument(
        "--section",
        choices=SECTIONS,
        help="Only show options of one section",
    )

    # config command with subcommands
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Validate or initialize configuration",
    )
    config_subs = config_parser.add_subparsers(dest="config_action")

    validate_parser = config_subs.add_parser(
        "validate",
        help="Validate configuration file",
    )
    validate_parser.add_argument(
        "--btrbk",
        metavar="PATH",
        help="btrbk executable used for validation (default: from config)",
    )
    validate_parser.add_argument(
        "--no-btrbk",
        action="store_true",
        help="Only check the schema, do not run btrbk",
    )

    init_parser = config_subs.add_parser(
        "init",
        help="Generate example configuration",
    )
    init_parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )

    return parser


def _add_validation_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--btrbk",
        metavar="PATH",
        help="btrbk executable used for validation (default: from config)",
    )
    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Do not round trip rendered configs through btrbk",
    )


def run_subcommand(args: argparse.Namespace) -> int:
    """Run the specified subcommand.

    Args:
        args: Parsed arguments

    Returns:
        Exit code
    """
    from .. import __version__

    if args.version:
        print(f"btrbk-deploy {__version__}")
        return 0

    if not args.command:
        print("No command specified. Use --help for usage information.")
        return 1

    # Route to appropriate command handler
    handlers: dict[str, Callable] = {
        "render": cmd_render,
        "plan": cmd_plan,
        "deploy": cmd_deploy,
        "options": cmd_options,
        "config": cmd_config,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


def cmd_render(args: argparse.Namespace) -> int:
    """Execute render command."""
    from .render_cmd import execute_render

    return execute_render(args)


def cmd_plan(args: argparse.Namespace) -> int:
    """Execute plan command."""
    from .deploy_cmd import execute_plan

    return execute_plan(args)


def cmd_deploy(args: argparse.Namespace) -> int:
    """Execute deploy command."""
    from .deploy_cmd import execute_deploy

    return execute_deploy(args)


def cmd_options(args: argparse.Namespace) -> int:
    """Execute options command."""
    from .options_cmd import execute_options

    return execute_options(args)


def cmd_config(args: argparse.Namespace) -> int:
    """Execute config command."""
    from .config_cmd import execute_config

    return execute_config(args)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for btrbk-deploy CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_subcommand_parser()
    args = parser.parse_args(argv)

    return run_subcommand(args)
