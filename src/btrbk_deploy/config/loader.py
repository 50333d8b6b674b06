"""TOML configuration loading and validation.

Handles config file discovery, parsing, and validation with helpful error messages.
"""

import re
import tomllib
from dataclasses import fields
from pathlib import Path
from typing import Any

from .schema import (
    IO_SCHEDULING_CLASSES,
    SSH_ROLES,
    InstanceConfig,
    ServiceConfig,
    SshAccess,
    ToolPaths,
)


class ConfigError(Exception):
    """Configuration loading or validation error."""

    pass


# Config file search paths in priority order
CONFIG_PATHS = [
    Path.home() / ".config" / "btrbk-deploy" / "config.toml",
    Path("/etc/btrbk-deploy/config.toml"),
]

INSTANCE_NAME = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")


def find_config_file(explicit_path: str | None = None) -> Path | None:
    """Find configuration file.

    Args:
        explicit_path: Explicitly specified config path (highest priority)

    Returns:
        Path to config file, or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        raise ConfigError(f"Config file not found: {explicit_path}")

    for path in CONFIG_PATHS:
        if path.exists():
            return path

    return None


def _expect(value: Any, kind: type, where: str) -> Any:
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise ConfigError(f"'{where}' must be of type {kind.__name__}")
    return value


def _parse_paths(data: dict[str, Any]) -> ToolPaths:
    """Parse program and file locations from dict."""
    known = {f.name for f in fields(ToolPaths)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown key(s) in [paths]: {', '.join(sorted(unknown))}")

    values = {}
    for key, value in data.items():
        if key == "ssh_commands":
            commands = _expect(value, list, "paths.ssh_commands")
            values[key] = [_expect(v, str, "paths.ssh_commands") for v in commands]
        else:
            values[key] = _expect(value, str, f"paths.{key}")
    return ToolPaths(**values)


def _parse_instance(name: str, data: Any) -> InstanceConfig:
    """Parse one instance table."""
    if not INSTANCE_NAME.match(name):
        raise ConfigError(
            f"Invalid instance name '{name}': use letters, digits, '.', '_' or '-'"
        )
    _expect(data, dict, f"instances.{name}")

    settings = data.get("settings", {})
    _expect(settings, dict, f"instances.{name}.settings")

    return InstanceConfig(
        name=name,
        on_calendar=_expect(
            data.get("on_calendar", "daily"), str, f"instances.{name}.on_calendar"
        ),
        settings=settings,
    )


def _parse_ssh_access(data: Any) -> SshAccess:
    """Parse one ssh access entry."""
    _expect(data, dict, "ssh_access")
    if "key" not in data:
        raise ConfigError("ssh_access entry missing required 'key' field")

    roles = _expect(data.get("roles", []), list, "ssh_access.roles")
    for role in roles:
        if role not in SSH_ROLES:
            raise ConfigError(
                f"Unknown ssh role '{role}', expected one of: {', '.join(SSH_ROLES)}"
            )

    return SshAccess(key=_expect(data["key"], str, "ssh_access.key"), roles=roles)


def _parse_service(data: dict[str, Any]) -> dict[str, Any]:
    """Parse the [service] table."""
    niceness = _expect(data.get("niceness", 10), int, "service.niceness")
    if not -20 <= niceness <= 19:
        raise ConfigError(f"service.niceness must be between -20 and 19, got {niceness}")

    io_class = data.get("io_scheduling_class", "idle")
    if io_class not in IO_SCHEDULING_CLASSES:
        raise ConfigError(
            f"service.io_scheduling_class must be one of: {', '.join(IO_SCHEDULING_CLASSES)}"
        )

    extra_paths = _expect(data.get("extra_paths", []), list, "service.extra_paths")

    return {
        "niceness": niceness,
        "io_scheduling_class": io_class,
        "extra_paths": [_expect(p, str, "service.extra_paths") for p in extra_paths],
    }


def _validate_config(config: ServiceConfig) -> list[str]:
    """Validate configuration and return list of warnings."""
    warnings = []

    if not config.enabled:
        warnings.append("No instances and no ssh access configured")

    for instance in config.instances.values():
        volumes = instance.settings.get("volumes", {})
        if not volumes:
            warnings.append(f"Instance '{instance.name}' has no volumes configured")
            continue
        if not isinstance(volumes, dict):
            # Reported as an error when the tree is built
            continue
        for path, record in volumes.items():
            if isinstance(record, dict) and not record.get("targets"):
                warnings.append(
                    f"Volume '{path}' of instance '{instance.name}' has no targets configured"
                )

    keys = [access.key for access in config.ssh_access]
    if len(keys) != len(set(keys)):
        warnings.append("Duplicate ssh keys in ssh_access")

    return warnings


def load_config(path: Path | str) -> tuple[ServiceConfig, list[str]]:
    """Load and validate configuration from TOML file.

    Args:
        path: Path to configuration file

    Returns:
        Tuple of (ServiceConfig object, list of warnings)

    Raises:
        ConfigError: If config is invalid or cannot be parsed
    """
    path = Path(path)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}")

    return parse_config(data)


def parse_config(data: dict[str, Any]) -> tuple[ServiceConfig, list[str]]:
    """Build a ServiceConfig from already decoded TOML data."""
    unknown = set(data) - {"service", "paths", "instances", "ssh_access"}
    if unknown:
        raise ConfigError(f"Unknown top-level key(s): {', '.join(sorted(unknown))}")

    service = _parse_service(_expect(data.get("service", {}), dict, "service"))
    paths = _parse_paths(_expect(data.get("paths", {}), dict, "paths"))

    instances = {}
    for name, instance_data in _expect(
        data.get("instances", {}), dict, "instances"
    ).items():
        instances[name] = _parse_instance(name, instance_data)

    ssh_access = [
        _parse_ssh_access(entry)
        for entry in _expect(data.get("ssh_access", []), list, "ssh_access")
    ]

    config = ServiceConfig(
        paths=paths, instances=instances, ssh_access=ssh_access, **service
    )

    # Validate and collect warnings
    warnings = _validate_config(config)

    return config, warnings


def generate_example_config() -> str:
    """Generate example configuration file content."""
    return """# btrbk-deploy configuration
# Option names inside "settings" are btrbk.conf keywords, see man btrbk.conf

[service]
niceness = 10
io_scheduling_class = "idle"
# Directories added to PATH, e.g. for stream_compress programs
# extra_paths = ["/opt/zstd/bin"]

# [paths]
# btrbk = "/usr/bin/btrbk"
# config_dir = "/etc/btrbk"

[instances.daily]
on_calendar = "daily"

[instances.daily.settings]
snapshot_preserve_min = "2d"
snapshot_preserve = "14d"
target_preserve_min = "no"
target_preserve = "20d 10w *m"

[instances.daily.settings.volumes."/mnt/btr_pool"]
snapshot_dir = "btrbk_snapshots"
subvolumes = ["rootfs", "home"]
targets = ["/mnt/backup_drive"]

# Per-item options use the mapping form
# [instances.daily.settings.volumes."/mnt/btr_pool".targets."/mnt/usb"]
# target_preserve = "7d"

# Remote hosts pulling backups from this machine
# [[ssh_access]]
# key = "ssh-ed25519 AAAA... backup@nas"
# roles = ["source", "info", "send"]
"""
