"""Tests for rendering config trees to btrbk.conf text."""

from btrbk_deploy.btrbk.render import render, render_lines
from btrbk_deploy.btrbk.sections import SectionKind
from btrbk_deploy.btrbk.tree import ConfigNode, build_tree


def leading_spaces(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


class TestRender:
    """Tests for render function."""

    def test_daily_scenario(self, daily_settings):
        text = render(build_tree(daily_settings))
        assert text == (
            "backend btrfs-progs-sudo\n"
            "volume /mnt/data\n"
            " subvolume /mnt/data/docs\n"
            " target /backup\n"
        )

    def test_nested_assignments_indented(self):
        settings = {
            "snapshot_preserve": "14d",
            "volumes": {
                "/home": {
                    "snapshot_dir": ".snapshots",
                    "subvolumes": {"alice": {"snapshot_name": "alice-home"}},
                    "targets": {"/mnt/usb": {"target_preserve": "7d"}},
                }
            },
        }
        assert render(build_tree(settings)).splitlines() == [
            "backend btrfs-progs-sudo",
            "snapshot_preserve 14d",
            "volume /home",
            " snapshot_dir .snapshots",
            " subvolume alice",
            "  snapshot_name alice-home",
            " target /mnt/usb",
            "  target_preserve 7d",
        ]

    def test_assignments_precede_subsections(self):
        # Caller puts children before options in the record
        settings = {
            "volumes": {
                "/v": {
                    "subvolumes": ["a"],
                    "targets": ["/t"],
                    "snapshot_dir": "snaps",
                    "snapshot_preserve": "7d",
                }
            },
            "timestamp_format": "long",
        }
        lines = render(build_tree(settings)).splitlines()
        assert lines.index("timestamp_format long") < lines.index("volume /v")
        assert lines.index(" snapshot_dir snaps") < lines.index(" subvolume a")
        assert lines.index(" snapshot_preserve 7d") < lines.index(" subvolume a")

    def test_indentation_follows_depth(self):
        leaf = ConfigNode(
            SectionKind.TARGET, "/t", {"target_preserve": "1d"}, (), "t"
        )
        volume = ConfigNode(
            SectionKind.VOLUME, "/v", {"snapshot_dir": "s"}, (leaf,), "v"
        )
        root = ConfigNode(SectionKind.GLOBAL, None, {"backend": "btrfs-progs"}, (volume,))
        depths = [leading_spaces(line) for line in render_lines(root)]
        assert depths == [0, 0, 1, 1, 2]

    def test_extra_options_verbatim(self):
        root = build_tree({"extra_options": ["lockfile /run/btrbk.lock", "ssh_port 2222"]})
        assert render_lines(root) == [
            "backend btrfs-progs-sudo",
            "lockfile /run/btrbk.lock",
            "ssh_port 2222",
        ]

    def test_multiple_volumes_in_order(self):
        root = build_tree({"volumes": {"/b": {}, "/a": {}}})
        assert render_lines(root) == [
            "backend btrfs-progs-sudo",
            "volume /b",
            "volume /a",
        ]

    def test_deterministic(self, daily_settings):
        tree = build_tree(daily_settings)
        assert render(tree) == render(tree)
        assert render(tree) == render(build_tree(daily_settings))

    def test_does_not_mutate_tree(self, daily_settings):
        tree = build_tree(daily_settings)
        before = repr(tree)
        render(tree)
        assert repr(tree) == before

    def test_ends_with_newline(self):
        assert render(build_tree({})) == "backend btrfs-progs-sudo\n"
