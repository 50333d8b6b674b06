"""Configuration schema definitions using dataclasses.

Defines the structure of the TOML deployment configuration with sensible
defaults.
"""

from dataclasses import dataclass, field
from typing import Any

IO_SCHEDULING_CLASSES = ("idle", "best-effort", "realtime")

SSH_ROLES = ("info", "source", "target", "delete", "snapshot", "send", "receive")


@dataclass
class ToolPaths:
    """Locations of external programs and deployed files.

    Attributes:
        btrbk: btrbk executable
        btrfs: btrfs executable allowed through sudo
        mkdir: mkdir executable allowed through sudo
        readlink: readlink executable allowed through sudo
        ionice: ionice executable used in forced ssh commands
        nice: nice executable used in forced ssh commands
        bash: Login shell of the service account
        ssh_filter: btrbk's ssh_filter_btrbk.sh script
        ssh_commands: Extra sudo command paths used by remote btrbk runs
        config_dir: Directory receiving <instance>.conf files
        state_dir: Home and state directory of the service account
        unit_dir: Directory receiving systemd units
    """

    btrbk: str = "/usr/bin/btrbk"
    btrfs: str = "/usr/bin/btrfs"
    mkdir: str = "/usr/bin/mkdir"
    readlink: str = "/usr/bin/readlink"
    ionice: str = "/usr/bin/ionice"
    nice: str = "/usr/bin/nice"
    bash: str = "/bin/bash"
    ssh_filter: str = "/usr/share/btrbk/scripts/ssh_filter_btrbk.sh"
    ssh_commands: list[str] = field(default_factory=list)
    config_dir: str = "/etc/btrbk"
    state_dir: str = "/var/lib/btrbk"
    unit_dir: str = "/etc/systemd/system"


@dataclass
class InstanceConfig:
    """One independently scheduled btrbk configuration.

    Attributes:
        name: Instance name, used in file and unit names
        on_calendar: systemd.time(7) calendar expression
        settings: Global options and volumes, see btrbk.tree.build_tree
    """

    name: str
    on_calendar: str = "daily"
    settings: dict[str, Any] = field(default_factory=dict)


@dataclass
class SshAccess:
    """An ssh key allowed to log in as the service account.

    Attributes:
        key: Public key line
        roles: ssh_filter_btrbk.sh roles granted to the key
    """

    key: str
    roles: list[str] = field(default_factory=list)


@dataclass
class ServiceConfig:
    """Root configuration object.

    Attributes:
        niceness: Nice level of btrbk runs (-20..19)
        io_scheduling_class: ionice class of btrbk runs
        extra_paths: Directories added to PATH of btrbk runs
            (compression programs for stream_compress etc.)
        paths: Program and file locations
        instances: Instances by name, in declaration order
        ssh_access: Keys allowed to run remote btrbk commands
    """

    niceness: int = 10
    io_scheduling_class: str = "idle"
    extra_paths: list[str] = field(default_factory=list)
    paths: ToolPaths = field(default_factory=ToolPaths)
    instances: dict[str, InstanceConfig] = field(default_factory=dict)
    ssh_access: list[SshAccess] = field(default_factory=list)

    @property
    def enabled(self) -> bool:
        """Whether anything needs to be deployed at all."""
        return bool(self.instances or self.ssh_access)
