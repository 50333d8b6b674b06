"""Build a typed btrbk config tree from caller supplied settings.

The caller describes one instance as nested mappings::

    {
        "snapshot_preserve": "14d",
        "volumes": {
            "/mnt/data": {
                "subvolumes": ["docs", "photos"],
                "targets": {"/backup": {"target_preserve": "20d"}},
            },
        },
    }

Subvolumes and targets are either a list of paths or a mapping of path to
per-item options. Every option key is checked against the section it
appears in before any text is produced.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .errors import InvalidOptionValue, UnsupportedValueShape
from .options import lookup
from .sections import SectionKind, check_options, defaults

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigNode:
    """One section of a btrbk config.

    Attributes:
        kind: Section kind, decides which options are legal
        name: Section identifier (volume path, subvolume path, ...);
            None for the implicit global section
        assignments: Option name to rendered value, in insertion order
        children: Subsections in insertion order
        path: Human readable location used in error messages
    """

    kind: SectionKind
    name: Optional[str] = None
    assignments: dict[str, str | tuple[str, ...]] = field(default_factory=dict)
    children: tuple["ConfigNode", ...] = ()
    path: str = "global"


@dataclass(frozen=True)
class Shorthand:
    """Subsections given as a plain list of paths."""

    items: tuple[str, ...]


@dataclass(frozen=True)
class Detailed:
    """Subsections given as a mapping of path to option overrides."""

    items: dict[str, Mapping[str, Any]]


def check_name(name: Any, path: str) -> str:
    """Return ``name`` if it can stand on a single section header line."""
    if not isinstance(name, str) or not name.strip() or "\n" in name or "\r" in name:
        raise UnsupportedValueShape(name, path, expected="a non-empty single line name")
    return name


def normalize_subsections(value: Any, path: str) -> dict[str, Mapping[str, Any]]:
    """Resolve a list-or-mapping subsection value to path -> overrides."""
    if isinstance(value, (list, tuple)):
        for item in value:
            if not isinstance(item, str):
                raise UnsupportedValueShape(item, path)
            check_name(item, path)
        variant: Shorthand | Detailed = Shorthand(tuple(value))
    elif isinstance(value, Mapping):
        for name, overrides in value.items():
            check_name(name, path)
            if not isinstance(overrides, Mapping):
                raise UnsupportedValueShape(overrides, f"{path} {name}")
        variant = Detailed(dict(value))
    else:
        raise UnsupportedValueShape(value, path)

    if isinstance(variant, Shorthand):
        if len(set(variant.items)) != len(variant.items):
            logger.warning("Duplicate entries at %s collapsed", path)
        return {item: {} for item in variant.items}
    return variant.items


def _make_node(
    kind: SectionKind,
    name: Optional[str],
    overrides: Mapping[str, Any],
    children: tuple[ConfigNode, ...],
    path: str,
) -> ConfigNode:
    check_options(kind, overrides.keys(), path)

    # Defaults keep their position, caller values win
    assignments: dict[str, str | tuple[str, ...]] = dict(defaults(kind))
    for key, value in overrides.items():
        option = lookup(key)
        if option is None:
            raise KeyError(f"Option {key!r} is missing from the catalog")
        try:
            assignments[key] = option.coerce(value)
        except InvalidOptionValue as e:
            raise InvalidOptionValue(f"{e} (at {path})") from e

    return ConfigNode(
        kind=kind, name=name, assignments=assignments, children=children, path=path
    )


def _build_subsections(
    kind: SectionKind, value: Any, parent_path: str
) -> tuple[ConfigNode, ...]:
    items = normalize_subsections(value, f"{parent_path} > {kind.value}")
    nodes = []
    for name, overrides in items.items():
        path = f"{parent_path} > {kind.value} {name}"
        nodes.append(_make_node(kind, name, overrides, (), path))
    return tuple(nodes)


def _build_volume(name: str, record: Any) -> ConfigNode:
    path = f"volume {name}"
    if not isinstance(record, Mapping):
        raise UnsupportedValueShape(record, path)

    overrides = dict(record)
    subvolumes = overrides.pop("subvolumes", [])
    targets = overrides.pop("targets", [])

    # Own options are checked before descending into children
    check_options(SectionKind.VOLUME, overrides.keys(), path)
    children = _build_subsections(
        SectionKind.SUBVOLUME, subvolumes, path
    ) + _build_subsections(SectionKind.TARGET, targets, path)

    return _make_node(SectionKind.VOLUME, name, overrides, children, path)


def build_tree(settings: Mapping[str, Any]) -> ConfigNode:
    """Build the root (global) node for one instance.

    Args:
        settings: Global option overrides plus a ``volumes`` mapping of
            volume path to volume record

    Returns:
        The root ConfigNode of kind global

    Raises:
        SchemaViolation: An option is not legal in its section
        UnsupportedValueShape: A subsection value has the wrong type
        InvalidOptionValue: An option value has the wrong type or range
    """
    if not isinstance(settings, Mapping):
        raise UnsupportedValueShape(settings, "global")

    overrides = dict(settings)
    volumes = overrides.pop("volumes", {})
    if not isinstance(volumes, Mapping):
        raise UnsupportedValueShape(volumes, "global > volumes")

    check_options(SectionKind.GLOBAL, overrides.keys(), "global")
    children = tuple(
        _build_volume(check_name(name, "global > volumes"), record)
        for name, record in volumes.items()
    )

    root = _make_node(SectionKind.GLOBAL, None, overrides, children, "global")
    logger.debug("Built config tree with %d volume(s)", len(children))
    return root
