"""Check rendered configs by handing them to btrbk itself.

btrbk has no dedicated syntax check, so the config is written to a
temporary file and ``btrbk -c <file> ls <dir>`` is run against it. On a
parse error btrbk names the offending config file in its output; normal
listing output never mentions the config file. The presence of the
temporary path in the combined output is therefore the failure signal.
The exit status is recorded but not used, since ``ls`` also exits
non-zero when nothing matches the probe directory.
"""

import logging
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .errors import BtrbkSyntaxError, ValidatorUnavailable

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of one btrbk round trip."""

    ok: bool
    config_path: str
    output: str
    returncode: int
    text: str


def validate(
    text: str,
    btrbk: str = "btrbk",
    runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
    timeout: Optional[float] = None,
) -> ValidationResult:
    """Run btrbk in listing mode against ``text``.

    Args:
        text: Rendered btrbk.conf content
        btrbk: Path to the btrbk executable
        runner: Replacement for subprocess.run
        timeout: Seconds to wait for btrbk; None waits forever

    Returns:
        ValidationResult with ok=False if btrbk echoed the config path

    Raises:
        ValidatorUnavailable: btrbk could not be executed
    """
    run = runner or subprocess.run

    with tempfile.TemporaryDirectory(prefix="btrbk-validate-") as tmpdir:
        config_path = Path(tmpdir) / "btrbk.conf"
        config_path.write_text(text)
        probe = Path(tmpdir) / "probe"
        probe.mkdir()

        cmd = [btrbk, "-c", str(config_path), "ls", str(probe)]
        logger.debug("Validating with: %s", " ".join(cmd))
        try:
            result = run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
                timeout=timeout,
            )
        except OSError as e:
            raise ValidatorUnavailable(f"Cannot execute {btrbk}: {e}") from e

    output = result.stdout or ""
    ok = str(config_path) not in output
    logger.debug("btrbk exited with status %d", result.returncode)

    return ValidationResult(
        ok=ok,
        config_path=str(config_path),
        output=output,
        returncode=result.returncode,
        text=text,
    )


def ensure_valid(name: str, text: str, **kwargs) -> ValidationResult:
    """Validate the config of instance ``name`` or raise BtrbkSyntaxError."""
    result = validate(text, **kwargs)
    if not result.ok:
        logger.error("btrbk configuration for instance '%s' is invalid", name)
        logger.error("%s", result.output.strip())
        raise BtrbkSyntaxError(name, result.output, text)
    return result
