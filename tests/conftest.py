"""Pytest configuration and shared fixtures."""

import subprocess

import pytest


@pytest.fixture
def tmp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def daily_settings():
    """Settings of a simple instance with one volume."""
    return {
        "volumes": {
            "/mnt/data": {
                "subvolumes": ["/mnt/data/docs"],
                "targets": ["/backup"],
            },
        },
    }


@pytest.fixture
def sample_config_toml():
    """Return a sample valid TOML configuration string."""
    return """
[service]
niceness = 5
io_scheduling_class = "best-effort"
extra_paths = ["/opt/zstd/bin"]

[paths]
btrbk = "/opt/btrbk/bin/btrbk"

[instances.daily]
on_calendar = "daily"

[instances.daily.settings]
snapshot_preserve = "14d"

[instances.daily.settings.volumes."/mnt/data"]
subvolumes = ["docs", "photos"]
targets = ["/mnt/backup"]

[instances.hourly]
on_calendar = "hourly"

[instances.hourly.settings.volumes."/home"]
snapshot_dir = ".snapshots"

[instances.hourly.settings.volumes."/home".subvolumes.alice]
snapshot_name = "alice-home"

[instances.hourly.settings.volumes."/home".targets."/mnt/usb"]
target_preserve = "7d"

[[ssh_access]]
key = "ssh-ed25519 AAAAC3Nza backup@nas"
roles = ["source", "info", "send"]
"""


@pytest.fixture
def minimal_config_toml():
    """Return a minimal valid TOML configuration string."""
    return """
[instances.btrbk.settings.volumes."/mnt/pool"]
subvolumes = ["home"]
targets = ["/mnt/backup"]
"""


@pytest.fixture
def config_file(tmp_config_dir, sample_config_toml):
    """Create a temporary config file with sample content."""
    config_path = tmp_config_dir / "config.toml"
    config_path.write_text(sample_config_toml)
    return config_path


@pytest.fixture
def minimal_config_file(tmp_config_dir, minimal_config_toml):
    """Create a temporary config file with minimal content."""
    config_path = tmp_config_dir / "minimal.toml"
    config_path.write_text(minimal_config_toml)
    return config_path


@pytest.fixture
def fake_btrbk():
    """A subprocess.run replacement imitating ``btrbk -c FILE ls DIR``.

    Unknown keywords make it print the config path the way btrbk reports
    parse errors. The calls are recorded on ``fake_btrbk.calls``.
    """
    known = ("backend", "volume", "subvolume", "target", "snapshot_", "target_")

    def run(cmd, **kwargs):
        run.calls.append((cmd, kwargs))
        config_path = cmd[2]
        with open(config_path) as f:
            for number, line in enumerate(f, start=1):
                keyword = line.split()[0] if line.strip() else ""
                if keyword and not keyword.startswith(known):
                    output = (
                        f'ERROR: Unknown option "{keyword}" '
                        f'in "{config_path}" line {number}\n'
                    )
                    return subprocess.CompletedProcess(cmd, 2, stdout=output)
        return subprocess.CompletedProcess(cmd, 0, stdout="NO MATCHES\n")

    run.calls = []
    return run


@pytest.fixture
def patched_btrbk(fake_btrbk, monkeypatch):
    """Route every btrbk invocation made through subprocess to fake_btrbk."""
    monkeypatch.setattr(subprocess, "run", fake_btrbk)
    return fake_btrbk
