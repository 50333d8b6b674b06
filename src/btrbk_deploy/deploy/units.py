"""systemd service and timer units for btrbk instances."""

from pathlib import PurePosixPath

from .. import unit_name
from ..config.schema import InstanceConfig, ServiceConfig
from .access import SERVICE_GROUP, SERVICE_USER

ACCURACY = "10min"

DEFAULT_PATH = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"


def render_unit(sections: dict[str, list[tuple[str, str]]]) -> str:
    """Render ``{"Unit": [(key, value), ...], ...}`` as a unit file."""
    blocks = []
    for section, entries in sections.items():
        lines = [f"[{section}]"]
        lines.extend(f"{key}={value}" for key, value in entries)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def config_file(name: str, service: ServiceConfig) -> str:
    """Absolute path of the deployed btrbk.conf of instance ``name``."""
    return str(PurePosixPath(service.paths.config_dir) / f"{name}.conf")


def service_unit(name: str, service: ServiceConfig) -> str:
    """Oneshot service running ``btrbk run`` for one instance."""
    entries = [
        ("User", SERVICE_USER),
        ("Group", SERVICE_GROUP),
        ("Type", "oneshot"),
        ("ExecStart", f"{service.paths.btrbk} -c {config_file(name, service)} run"),
        ("Nice", str(service.niceness)),
        ("IOSchedulingClass", service.io_scheduling_class),
        ("StateDirectory", "btrbk"),
    ]
    if service.extra_paths:
        search_path = ":".join(service.extra_paths + [DEFAULT_PATH])
        entries.append(("Environment", f'"PATH={search_path}"'))

    return render_unit(
        {
            "Unit": [
                ("Description", "Takes BTRFS snapshots and maintains retention policies."),
                ("Documentation", "man:btrbk(1)"),
            ],
            "Service": entries,
        }
    )


def timer_unit(instance: InstanceConfig) -> str:
    """Calendar timer triggering the service of one instance."""
    return render_unit(
        {
            "Unit": [
                (
                    "Description",
                    "Timer to take BTRFS snapshots and maintain retention policies.",
                ),
            ],
            "Timer": [
                ("OnCalendar", instance.on_calendar),
                ("AccuracySec", ACCURACY),
                ("Persistent", "true"),
                ("Unit", f"{unit_name(instance.name)}.service"),
            ],
            "Install": [("WantedBy", "timers.target")],
        }
    )
