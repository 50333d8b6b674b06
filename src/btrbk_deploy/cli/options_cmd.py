"""Options command: Show which btrbk.conf options are accepted where."""

import argparse

from rich.console import Console
from rich.table import Table

from ..btrbk import CATALOG, SectionKind, options_for


def execute_options(args: argparse.Namespace) -> int:
    """Execute the options command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    section = getattr(args, "section", None)
    kinds = [SectionKind(section)] if section else list(SectionKind)

    table = Table(title="btrbk.conf options")
    table.add_column("Option", style="bold", no_wrap=True)
    table.add_column("Value")
    for kind in kinds:
        table.add_column(kind.value, justify="center")
    table.add_column("Description")

    for option in CATALOG.values():
        allowed = [option.name in options_for(kind) for kind in kinds]
        if not any(allowed):
            continue

        value = option.kind.value
        if option.choices:
            value = f"{value}: {' | '.join(option.choices)}"
        if option.minimum is not None or option.maximum is not None:
            low = "" if option.minimum is None else option.minimum
            high = "" if option.maximum is None else option.maximum
            value = f"{value} [{low}..{high}]"

        table.add_row(
            option.name,
            value,
            *("x" if ok else "" for ok in allowed),
            option.description,
        )

    console = Console()
    if not console.is_terminal:
        # Pipes get a fixed width instead of the 80 column fallback
        console = Console(width=150)
    console.print(table)
    return 0
