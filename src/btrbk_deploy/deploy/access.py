"""Service account, permissions and remote access for btrbk.

None of this is enforced here; the output is handed to sysusers.d,
tmpfiles.d, sudoers and sshd.
"""

from pathlib import PurePosixPath

from ..config.schema import ServiceConfig, SshAccess, ToolPaths

SERVICE_USER = "btrbk"
SERVICE_GROUP = "btrbk"

IONICE_CLASSES = {
    "idle": 3,
    "best-effort": 2,
    "realtime": 1,
}


def authorized_key_line(access: SshAccess, service: ServiceConfig) -> str:
    """Wrap a public key so it can only run ssh_filter_btrbk.sh with its roles."""
    paths = service.paths
    command = [
        paths.ionice,
        "-t",
        "-c",
        str(IONICE_CLASSES[service.io_scheduling_class]),
    ]
    if service.niceness >= 1:
        command += [paths.nice, "-n", str(service.niceness)]
    command += [paths.ssh_filter, "--sudo"]
    command += [f"--{role}" for role in access.roles]

    return f'command="{" ".join(command)}" {access.key}'


def authorized_keys(service: ServiceConfig) -> str:
    """Content of the service account's authorized_keys file."""
    return "".join(
        authorized_key_line(access, service) + "\n" for access in service.ssh_access
    )


def sudoers_rule(paths: ToolPaths) -> str:
    """Passwordless sudo for the commands btrbk runs through its sudo backend."""
    commands = []
    for command in [paths.btrfs, paths.mkdir, paths.readlink, *paths.ssh_commands]:
        if command not in commands:
            commands.append(command)
    return f"{SERVICE_USER} ALL=(root) NOPASSWD: {', '.join(commands)}\n"


def sysusers_entries(paths: ToolPaths) -> str:
    """sysusers.d entries creating the service group and system user."""
    return (
        f"g {SERVICE_GROUP} -\n"
        f'u {SERVICE_USER} -:{SERVICE_GROUP} "btrbk backup user" '
        f"{paths.state_dir} {paths.bash}\n"
    )


def tmpfiles_rules(paths: ToolPaths) -> str:
    """tmpfiles.d rules for the home and ssh directories of the service user."""
    home = PurePosixPath(paths.state_dir)
    owner = f"{SERVICE_USER} {SERVICE_GROUP}"
    return (
        f"d {home} 0750 {owner}\n"
        f"d {home / '.ssh'} 0700 {owner}\n"
        f"f {home / '.ssh' / 'config'} 0700 {owner} - StrictHostKeyChecking=accept-new\n"
    )
