"""Catalog of every btrbk.conf option this tool knows how to write.

Names are the btrbk.conf keywords (see ``man btrbk.conf``). Each option
carries the shape of value it accepts; ``Option.coerce`` turns a caller
value into the text written after the keyword.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .errors import InvalidOptionValue


class OptionKind(Enum):
    """Accepted value shape of an option."""

    STRING = "string"
    ENUM = "enum"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    LINES = "lines"  # raw lines written verbatim


@dataclass(frozen=True)
class Option:
    """A recognized configuration key.

    Attributes:
        name: btrbk.conf keyword
        kind: Accepted value shape
        description: Human readable documentation
        choices: Legal values for enums, or extra literal tokens an
            integer option accepts (e.g. "default")
        minimum: Lowest accepted integer
        maximum: Highest accepted integer
    """

    name: str
    kind: OptionKind
    description: str
    choices: tuple[str, ...] = ()
    minimum: Optional[int] = None
    maximum: Optional[int] = None

    def coerce(self, value: Any) -> str | tuple[str, ...]:
        """Check a caller value and return its rendered form."""
        if self.kind is OptionKind.LINES:
            return self._coerce_lines(value)
        if self.kind is OptionKind.BOOLEAN:
            return self._coerce_bool(value)
        if self.kind is OptionKind.INTEGER:
            return self._coerce_int(value)
        if self.kind is OptionKind.ENUM:
            if isinstance(value, bool) and "yes" in self.choices:
                return "yes" if value else "no"
            if isinstance(value, str) and value in self.choices:
                return value
            raise self._invalid(value, f"one of {', '.join(self.choices)}")
        if not isinstance(value, str) or not value.strip():
            raise self._invalid(value, "a non-empty string")
        if "\n" in value:
            raise self._invalid(value, "a single line")
        return value

    def _coerce_bool(self, value: Any) -> str:
        if isinstance(value, bool):
            return "yes" if value else "no"
        if value in ("yes", "no"):
            return value
        raise self._invalid(value, "a boolean")

    def _coerce_int(self, value: Any) -> str:
        if isinstance(value, str):
            if value in self.choices:
                return value
            try:
                value = int(value)
            except ValueError:
                raise self._invalid(value, "an integer") from None
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._invalid(value, "an integer")
        if self.minimum is not None and value < self.minimum:
            raise self._invalid(value, f"an integer >= {self.minimum}")
        if self.maximum is not None and value > self.maximum:
            raise self._invalid(value, f"an integer <= {self.maximum}")
        return str(value)

    def _coerce_lines(self, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            return tuple(line.strip() for line in value.splitlines() if line.strip())
        if isinstance(value, (list, tuple)) and all(
            isinstance(line, str) and "\n" not in line for line in value
        ):
            return tuple(line.strip() for line in value if line.strip())
        raise self._invalid(value, "a list of lines")

    def _invalid(self, value: Any, expected: str) -> InvalidOptionValue:
        return InvalidOptionValue(
            f"Invalid value {value!r} for option '{self.name}': expected {expected}"
        )


_OPTIONS = [
    Option(
        "backend",
        OptionKind.ENUM,
        "Backend used to run btrfs commands.",
        choices=("btrfs-progs", "btrfs-progs-btrbk", "btrfs-progs-sudo", "btrfs-progs-doas"),
    ),
    Option(
        "snapshot_dir",
        OptionKind.STRING,
        "Directory in which the snapshots are stored, relative to the volume.",
    ),
    Option(
        "extra_options",
        OptionKind.LINES,
        "Extra lines added verbatim to this section.",
    ),
    Option(
        "timestamp_format",
        OptionKind.ENUM,
        "Timestamp format appended to snapshot and backup names.",
        choices=("short", "long", "long-iso"),
    ),
    Option(
        "snapshot_name",
        OptionKind.STRING,
        "Base name of the created snapshot (defaults to the subvolume name).",
    ),
    Option(
        "snapshot_create",
        OptionKind.ENUM,
        "When to create snapshots.",
        choices=("always", "onchange", "ondemand", "no"),
    ),
    Option(
        "incremental",
        OptionKind.ENUM,
        "Whether incremental backups are created.",
        choices=("yes", "no", "strict"),
    ),
    Option(
        "noauto",
        OptionKind.BOOLEAN,
        "Skip this section unless it is explicitly selected on the command line.",
    ),
    Option(
        "preserve_day_of_week",
        OptionKind.ENUM,
        "Day of the week on which weekly backups are preserved.",
        choices=(
            "monday",
            "tuesday",
            "wednesday",
            "thursday",
            "friday",
            "saturday",
            "sunday",
        ),
    ),
    Option(
        "preserve_hour_of_day",
        OptionKind.INTEGER,
        "Hour of the day at which daily backups are preserved.",
        minimum=0,
        maximum=23,
    ),
    Option(
        "ssh_user",
        OptionKind.STRING,
        "Remote user name for ssh connections.",
    ),
    Option(
        "ssh_identity",
        OptionKind.STRING,
        "Absolute path to the ssh private key.",
    ),
    Option(
        "ssh_compression",
        OptionKind.BOOLEAN,
        "Enable ssh compression.",
    ),
    Option(
        "ssh_cipher_spec",
        OptionKind.STRING,
        "Cipher specification passed to ssh -c.",
    ),
    Option(
        "snapshot_preserve",
        OptionKind.STRING,
        "Retention policy for snapshots, e.g. '14d 4w 6m'.",
    ),
    Option(
        "snapshot_preserve_min",
        OptionKind.STRING,
        "Minimum retention for snapshots, e.g. '2d' or 'latest'.",
    ),
    Option(
        "target_preserve",
        OptionKind.STRING,
        "Retention policy for backups on targets.",
    ),
    Option(
        "target_preserve_min",
        OptionKind.STRING,
        "Minimum retention for backups on targets.",
    ),
    Option(
        "stream_compress",
        OptionKind.ENUM,
        "Compress the btrfs send stream before transferring it.",
        choices=("no", "gzip", "pigz", "bzip2", "pbzip2", "bzip3", "xz", "lzo", "lz4", "zstd"),
    ),
    Option(
        "stream_compress_level",
        OptionKind.INTEGER,
        "Compression level of the send stream.",
        choices=("default",),
        minimum=0,
    ),
]

CATALOG: dict[str, Option] = {option.name: option for option in _OPTIONS}


def lookup(name: str) -> Option | None:
    """Return the option registered under ``name``, or None."""
    return CATALOG.get(name)
