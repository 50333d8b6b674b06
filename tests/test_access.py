"""Tests for service account and access rule generation."""

from btrbk_deploy.config.schema import ServiceConfig, SshAccess, ToolPaths
from btrbk_deploy.deploy.access import (
    authorized_key_line,
    authorized_keys,
    sudoers_rule,
    sysusers_entries,
    tmpfiles_rules,
)

KEY = "ssh-ed25519 AAAAC3Nza backup@nas"


class TestAuthorizedKeyLine:
    """Tests for authorized_key_line function."""

    def test_default_service(self):
        line = authorized_key_line(SshAccess(KEY, ["source", "info", "send"]), ServiceConfig())
        assert line == (
            'command="/usr/bin/ionice -t -c 3 /usr/bin/nice -n 10 '
            "/usr/share/btrbk/scripts/ssh_filter_btrbk.sh --sudo "
            f'--source --info --send" {KEY}'
        )

    def test_no_nice_below_one(self):
        service = ServiceConfig(niceness=0, io_scheduling_class="best-effort")
        line = authorized_key_line(SshAccess(KEY, ["target"]), service)
        assert "nice -n" not in line
        assert "-c 2 " in line
        assert line.endswith(f'--sudo --target" {KEY}')

    def test_realtime_class(self):
        service = ServiceConfig(io_scheduling_class="realtime")
        assert " -c 1 " in authorized_key_line(SshAccess(KEY, []), service)

    def test_authorized_keys_file(self):
        service = ServiceConfig(
            ssh_access=[SshAccess("key-a", ["info"]), SshAccess("key-b", ["receive"])]
        )
        lines = authorized_keys(service).splitlines()
        assert len(lines) == 2
        assert lines[0].endswith(" key-a")
        assert lines[1].endswith(" key-b")


class TestSudoers:
    """Tests for sudoers_rule function."""

    def test_default_commands(self):
        assert sudoers_rule(ToolPaths()) == (
            "btrbk ALL=(root) NOPASSWD: /usr/bin/btrfs, /usr/bin/mkdir, /usr/bin/readlink\n"
        )

    def test_ssh_commands_deduplicated(self):
        paths = ToolPaths(ssh_commands=["/usr/bin/btrfs", "/sbin/btrfs"])
        rule = sudoers_rule(paths)
        assert rule.count("/usr/bin/btrfs") == 1
        assert rule.rstrip().endswith("/sbin/btrfs")


class TestAccountFiles:
    """Tests for sysusers and tmpfiles output."""

    def test_sysusers(self):
        lines = sysusers_entries(ToolPaths()).splitlines()
        assert lines[0] == "g btrbk -"
        assert lines[1] == 'u btrbk -:btrbk "btrbk backup user" /var/lib/btrbk /bin/bash'

    def test_tmpfiles(self):
        assert tmpfiles_rules(ToolPaths()).splitlines() == [
            "d /var/lib/btrbk 0750 btrbk btrbk",
            "d /var/lib/btrbk/.ssh 0700 btrbk btrbk",
            "f /var/lib/btrbk/.ssh/config 0700 btrbk btrbk - StrictHostKeyChecking=accept-new",
        ]

    def test_tmpfiles_custom_state_dir(self):
        rules = tmpfiles_rules(ToolPaths(state_dir="/srv/btrbk"))
        assert rules.startswith("d /srv/btrbk 0750")
