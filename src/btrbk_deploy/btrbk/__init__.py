"""btrbk.conf modelling: option catalog, section schema, builder,
renderer and validator.
"""

from .errors import (
    BtrbkConfigError,
    BtrbkSyntaxError,
    InvalidOptionValue,
    SchemaViolation,
    UnsupportedValueShape,
    ValidatorUnavailable,
)
from .options import CATALOG, Option, OptionKind, lookup
from .render import render, render_lines
from .sections import SectionKind, defaults, options_for
from .tree import ConfigNode, build_tree
from .validate import ValidationResult, ensure_valid, validate

__all__ = [
    "BtrbkConfigError",
    "BtrbkSyntaxError",
    "InvalidOptionValue",
    "SchemaViolation",
    "UnsupportedValueShape",
    "ValidatorUnavailable",
    "CATALOG",
    "Option",
    "OptionKind",
    "lookup",
    "render",
    "render_lines",
    "SectionKind",
    "defaults",
    "options_for",
    "ConfigNode",
    "build_tree",
    "ValidationResult",
    "ensure_valid",
    "validate",
]
