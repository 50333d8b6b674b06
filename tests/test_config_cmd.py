"""Tests for config command functionality."""

import argparse

from btrbk_deploy.cli.config_cmd import _init_config, execute_config


def make_args(**kwargs) -> argparse.Namespace:
    defaults = {"verbose": False, "quiet": True, "debug": False, "config": None}
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


class TestInitConfig:
    """Tests for _init_config function."""

    def test_outputs_to_stdout(self, capsys):
        result = _init_config(argparse.Namespace(output=None))
        assert result == 0
        captured = capsys.readouterr()
        assert "[instances.daily]" in captured.out

    def test_writes_to_file(self, tmp_path):
        output_file = tmp_path / "config.toml"
        result = _init_config(argparse.Namespace(output=str(output_file)))
        assert result == 0
        assert "[service]" in output_file.read_text()

    def test_unwritable_output(self, tmp_path, capsys):
        output_file = tmp_path / "missing" / "config.toml"
        result = _init_config(argparse.Namespace(output=str(output_file)))
        assert result == 1
        assert "Error writing file" in capsys.readouterr().out


class TestValidateConfig:
    """Tests for the config validate action."""

    def test_valid(self, config_file, patched_btrbk, capsys):
        args = make_args(config=str(config_file), config_action="validate")

        assert execute_config(args) == 0
        out = capsys.readouterr().out
        assert "Configuration is valid." in out
        assert "Instances: 2" in out
        assert "Volumes: 2" in out
        assert len(patched_btrbk.calls) == 2

    def test_btrbk_override(self, config_file, patched_btrbk):
        args = make_args(
            config=str(config_file), config_action="validate", btrbk="/tmp/btrbk"
        )

        assert execute_config(args) == 0
        assert {cmd[0] for cmd, _ in patched_btrbk.calls} == {"/tmp/btrbk"}

    def test_rejected_by_btrbk_prints_text(self, tmp_config_dir, patched_btrbk, capsys):
        path = tmp_config_dir / "bad.toml"
        path.write_text('[instances.x.settings]\nextra_options = ["bogus_option 1"]\n')
        args = make_args(config=str(path), config_action="validate")

        assert execute_config(args) == 1
        out = capsys.readouterr().out
        assert "# Rendered configuration of instance 'x':" in out
        assert "bogus_option 1" in out

    def test_schema_violation(self, tmp_config_dir, patched_btrbk):
        path = tmp_config_dir / "bad.toml"
        path.write_text('[instances.x.settings]\nbogus_option = "x"\n')
        args = make_args(config=str(path), config_action="validate")

        assert execute_config(args) == 1
        assert patched_btrbk.calls == []

    def test_no_btrbk(self, config_file, capsys):
        args = make_args(config=str(config_file), config_action="validate", no_btrbk=True)
        assert execute_config(args) == 0
        assert "round trip skipped" in capsys.readouterr().out

    def test_missing_config(self, tmp_path):
        args = make_args(config=str(tmp_path / "nope.toml"), config_action="validate")
        assert execute_config(args) == 1

    def test_no_action(self, capsys):
        assert execute_config(make_args(config_action=None)) == 1
        assert "Usage" in capsys.readouterr().out
