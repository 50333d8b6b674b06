"""Which options are legal in which btrbk.conf section."""

from enum import Enum
from typing import Iterable

from .errors import SchemaViolation
from .options import lookup


class SectionKind(Enum):
    """Nesting role of a config node; the value is the btrbk keyword."""

    GLOBAL = "global"
    VOLUME = "volume"
    SUBVOLUME = "subvolume"
    TARGET = "target"


def _select(*names: str) -> frozenset[str]:
    for name in names:
        if lookup(name) is None:
            raise KeyError(f"Unknown option in section table: {name}")
    return frozenset(names)


_COMMON = _select(
    "backend",
    "extra_options",
    "incremental",
    "noauto",
    "preserve_day_of_week",
    "preserve_hour_of_day",
    "ssh_user",
    "ssh_identity",
    "ssh_compression",
    "ssh_cipher_spec",
    "target_preserve",
    "target_preserve_min",
    "stream_compress",
    "stream_compress_level",
)

# Options only meaningful where snapshots are taken
_SNAPSHOT = _select(
    "snapshot_dir",
    "timestamp_format",
    "snapshot_create",
    "snapshot_preserve",
    "snapshot_preserve_min",
)

SECTION_OPTIONS: dict[SectionKind, frozenset[str]] = {
    SectionKind.GLOBAL: _COMMON | _SNAPSHOT,
    SectionKind.VOLUME: _COMMON | _SNAPSHOT,
    SectionKind.SUBVOLUME: _COMMON | _SNAPSHOT | _select("snapshot_name"),
    SectionKind.TARGET: _COMMON,
}


def options_for(kind: SectionKind) -> frozenset[str]:
    """Return the option names permitted in a section of ``kind``."""
    return SECTION_OPTIONS[kind]


def check_options(kind: SectionKind, keys: Iterable[str], path: str) -> None:
    """Raise SchemaViolation for the first key not permitted for ``kind``."""
    allowed = SECTION_OPTIONS[kind]
    for key in keys:
        if key not in allowed:
            raise SchemaViolation(key, path, kind)


def defaults(kind: SectionKind) -> dict[str, str]:
    """Return the assignments every node of ``kind`` starts from."""
    if kind is SectionKind.GLOBAL:
        return {"backend": "btrfs-progs-sudo"}
    return {}
