from __future__ import annotations

from pathlib import Path

import yaml
from typer.testing import CliRunner

from compass_config.cli import app
from compass_config.config import CompassConfig, load_config

runner = CliRunner()


def test_init_config_writes_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.rb"
    result = runner.invoke(app, ["init-config", str(path)])
    assert result.exit_code == 0
    assert load_config(path) == CompassConfig()

    again = runner.invoke(app, ["init-config", str(path)])
    assert again.exit_code == 1


def test_show_renders_requested_format(config_rb: Path) -> None:
    result = runner.invoke(app, ["show", str(config_rb), "--format", "yaml"])
    assert result.exit_code == 0
    data = yaml.safe_load(result.stdout)
    assert data["sass_dir"] == "_compass_sass"
    assert data["output_style"] == "compressed"


def test_show_table(config_rb: Path) -> None:
    result = runner.invoke(app, ["show", str(config_rb)])
    assert result.exit_code == 0
    assert "javascripts_dir" in result.stdout


def test_show_rejects_unknown_format(config_rb: Path) -> None:
    result = runner.invoke(app, ["show", str(config_rb), "--format", "toml"])
    assert result.exit_code == 1


def test_check_valid_document(config_rb: Path) -> None:
    result = runner.invoke(app, ["check", str(config_rb)])
    assert result.exit_code == 0
    assert "valid" in result.stdout


def test_check_warnings_and_strict(config_factory) -> None:
    path = config_factory("config.rb", "line_comments = true\nline_comments = true\n")
    result = runner.invoke(app, ["check", str(path)])
    assert result.exit_code == 2
    assert "WARNING" in result.stdout

    strict = runner.invoke(app, ["check", str(path), "--strict"])
    assert strict.exit_code == 3


def test_check_errors(config_factory) -> None:
    path = config_factory("config.yaml", "css_dir: /abs/css\n")
    result = runner.invoke(app, ["check", str(path)])
    assert result.exit_code == 3
    assert "ERROR" in result.stdout


def test_check_invalid_configuration(config_factory) -> None:
    path = config_factory("config.rb", "fonts_dir = 'fonts'\n")
    result = runner.invoke(app, ["check", str(path)])
    assert result.exit_code == 4
    assert "Configuration error" in result.stdout


def test_convert_between_formats(config_rb: Path, tmp_path: Path) -> None:
    dest = tmp_path / "settings.json"
    result = runner.invoke(app, ["convert", str(config_rb), str(dest)])
    assert result.exit_code == 0
    assert load_config(dest) == load_config(config_rb)

    refused = runner.invoke(app, ["convert", str(config_rb), str(dest)])
    assert refused.exit_code == 1

    bad_suffix = runner.invoke(app, ["convert", str(config_rb), str(tmp_path / "settings.toml")])
    assert bad_suffix.exit_code == 4


def test_check_non_utf8_document(config_factory) -> None:
    path = config_factory("config.yaml", "")
    path.write_bytes(b"css_dir: \xff\n")
    result = runner.invoke(app, ["check", str(path)])
    assert result.exit_code == 4
    assert "Configuration error" in result.stdout


def test_init_config_in_new_directory(tmp_path: Path) -> None:
    path = tmp_path / "sub" / "config.rb"
    result = runner.invoke(app, ["init-config", str(path)])
    assert result.exit_code == 0
    assert load_config(path) == CompassConfig()
