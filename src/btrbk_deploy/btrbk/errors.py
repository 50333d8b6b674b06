"""Errors raised while building, rendering and validating btrbk configs."""


class BtrbkConfigError(Exception):
    """Base class for btrbk configuration errors."""

    pass


class SchemaViolation(BtrbkConfigError):
    """An option is not permitted in the section it was given for."""

    def __init__(self, key: str, path: str, kind) -> None:
        self.key = key
        self.path = path
        self.kind = kind
        super().__init__(
            f"Option '{key}' is not valid in a {kind.value} section (at {path})"
        )


class UnsupportedValueShape(BtrbkConfigError):
    """A subsection value or section name has an unsupported shape."""

    def __init__(
        self,
        value,
        path: str,
        expected: str = "a list of paths or a mapping of path to options",
    ) -> None:
        self.value_type = type(value).__name__
        self.path = path
        super().__init__(
            f"Unsupported value of type '{self.value_type}' at {path}: expected {expected}"
        )


class InvalidOptionValue(BtrbkConfigError):
    """An option value does not match the option's accepted kind."""

    pass


class BtrbkSyntaxError(BtrbkConfigError):
    """btrbk rejected a rendered configuration.

    Attributes:
        instance: Name of the instance whose config was rejected
        output: Combined stdout/stderr of the btrbk invocation
        text: The full rendered configuration text
    """

    def __init__(self, instance: str, output: str, text: str) -> None:
        self.instance = instance
        self.output = output
        self.text = text
        super().__init__(f"btrbk configuration for instance '{instance}' is invalid")


class ValidatorUnavailable(BtrbkConfigError):
    """The btrbk executable could not be started."""

    pass
