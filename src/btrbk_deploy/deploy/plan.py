"""Turn a service configuration into files on disk.

Every instance is built, rendered and validated before any artifact is
produced, so a single broken instance blocks the whole deployment.
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from filelock import FileLock

from .. import unit_name
from ..__logger__ import logger
from ..btrbk import build_tree, ensure_valid, render
from ..config.schema import InstanceConfig, ServiceConfig
from .access import authorized_keys, sudoers_rule, sysusers_entries, tmpfiles_rules
from .units import config_file, service_unit, timer_unit

SUDOERS_FILE = "/etc/sudoers.d/btrbk"
SYSUSERS_FILE = "/etc/sysusers.d/btrbk.conf"
TMPFILES_FILE = "/etc/tmpfiles.d/btrbk.conf"

LOCK_NAME = ".btrbk-deploy.lock"


@dataclass
class Artifact:
    """A file to be written.

    Attributes:
        path: Absolute path on the target system
        content: File content
        mode: Permission bits
    """

    path: str
    content: str
    mode: int = 0o644


@dataclass
class DeploymentPlan:
    """Everything a deployment writes.

    Attributes:
        artifacts: Files in write order
        rendered: Rendered btrbk.conf text per instance
    """

    artifacts: list[Artifact] = field(default_factory=list)
    rendered: dict[str, str] = field(default_factory=dict)


def render_instance(instance: InstanceConfig) -> str:
    """Build and render the btrbk.conf text of one instance."""
    return render(build_tree(instance.settings))


def build_plan(
    service: ServiceConfig,
    validate: bool = True,
    validator: Optional[Callable[[str, str], object]] = None,
) -> DeploymentPlan:
    """Render and validate every instance, then collect all artifacts.

    Args:
        service: Loaded service configuration
        validate: Round trip every rendered config through btrbk
        validator: Replacement for ``ensure_valid(name, text)``

    Returns:
        DeploymentPlan, empty if nothing is configured

    Raises:
        BtrbkConfigError: Any instance failed to build or validate
    """
    plan = DeploymentPlan()
    if not service.enabled:
        logger.info("Nothing configured, deployment plan is empty")
        return plan

    for name, instance in service.instances.items():
        plan.rendered[name] = render_instance(instance)

    if validate:
        check = validator or (
            lambda name, text: ensure_valid(name, text, btrbk=service.paths.btrbk)
        )
        for name, text in plan.rendered.items():
            check(name, text)
            logger.info("Instance '%s' is valid", name)

    unit_dir = PurePosixPath(service.paths.unit_dir)
    for name, instance in service.instances.items():
        plan.artifacts += [
            Artifact(config_file(name, service), plan.rendered[name]),
            Artifact(
                str(unit_dir / f"{unit_name(name)}.service"),
                service_unit(name, service),
            ),
            Artifact(str(unit_dir / f"{unit_name(name)}.timer"), timer_unit(instance)),
        ]

    plan.artifacts += [
        Artifact(SYSUSERS_FILE, sysusers_entries(service.paths)),
        Artifact(TMPFILES_FILE, tmpfiles_rules(service.paths)),
        Artifact(SUDOERS_FILE, sudoers_rule(service.paths), mode=0o440),
    ]
    if service.ssh_access:
        keys_file = PurePosixPath(service.paths.state_dir) / ".ssh" / "authorized_keys"
        plan.artifacts.append(
            Artifact(str(keys_file), authorized_keys(service), mode=0o600)
        )

    return plan


def write_plan(plan: DeploymentPlan, root: Path | str = "/") -> list[Path]:
    """Write all artifacts beneath ``root``.

    Each file is written to a temporary sibling and renamed into place.

    Returns:
        The written paths
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    written = []

    with FileLock(root / LOCK_NAME):
        for artifact in plan.artifacts:
            dest = root / artifact.path.lstrip("/")
            dest.parent.mkdir(parents=True, exist_ok=True)

            fd, tmp_name = tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.name}.")
            try:
                with os.fdopen(fd, "w") as f:
                    f.write(artifact.content)
                os.chmod(tmp_name, artifact.mode)
                os.replace(tmp_name, dest)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise

            logger.info("Wrote %s", dest)
            written.append(dest)

    return written
