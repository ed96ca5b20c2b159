"""Tests for the multitarget CLI."""

from pathlib import Path

from click.testing import CliRunner

from multitarget import __version__
from multitarget.cli import cli


CONFIG_YAML = """
entry:
  main: src/main.js
module:
  rules:
    - test: '\\.js$'
      loader: babel-loader
plugins:
  - type: html
    title: CLI demo
targets:
  - key: modern
    options:
      targets: {esmodules: true}
  - key: legacy
    options:
      targets: ie 11
"""


def _write_project(root: Path, text: str = CONFIG_YAML) -> Path:
    (root / "src").mkdir()
    (root / "src" / "main.js").write_text("console.log('hi');\n")
    path = root / "multitarget.yaml"
    path.write_text(text)
    return path


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_build_command(tmp_path: Path):
    path = _write_project(tmp_path)
    result = CliRunner().invoke(cli, ["build", str(path), "--quiet", "--html"])

    assert result.exit_code == 0, result.output
    assert "Built 2 target(s), 1 HTML document(s)" in result.output
    assert "nomodule" in result.output
    assert 'type="module"' in result.output


def test_build_command_reports_configuration_error(tmp_path: Path):
    path = _write_project(tmp_path, CONFIG_YAML.replace("babel-loader", "css-loader"))
    result = CliRunner().invoke(cli, ["build", str(path), "--quiet"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_build_command_reports_child_failure(tmp_path: Path):
    path = _write_project(tmp_path, CONFIG_YAML.replace("src/main.js", "src/missing.js"))
    result = CliRunner().invoke(cli, ["build", str(path), "--quiet"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_build_command_rejects_empty_target_list(tmp_path: Path):
    text = CONFIG_YAML.split("targets:")[0]
    path = _write_project(tmp_path, text)
    result = CliRunner().invoke(cli, ["build", str(path), "--quiet"])

    assert result.exit_code == 1
    assert "at least one" in result.output


def test_inspect_command(tmp_path: Path):
    path = _write_project(tmp_path)
    result = CliRunner().invoke(cli, ["inspect", str(path)])

    assert result.exit_code == 0, result.output
    assert "modern/main" in result.output
    assert "legacy/main" in result.output


def test_inspect_command_reports_invalid_plugin(tmp_path: Path):
    path = _write_project(tmp_path, CONFIG_YAML.replace("    title: CLI demo", "  - type: chunks"))
    result = CliRunner().invoke(cli, ["inspect", str(path)])

    assert result.exit_code == 1
    assert "Invalid chunks plugin" in result.output


def test_build_command_reports_invalid_plugin_option(tmp_path: Path):
    path = _write_project(tmp_path, CONFIG_YAML.replace("title: CLI demo", "titel: CLI demo"))
    result = CliRunner().invoke(cli, ["build", str(path), "--quiet"])

    assert result.exit_code == 1
    assert "Invalid html plugin" in result.output


def test_build_command_reports_malformed_yaml(tmp_path: Path):
    path = _write_project(tmp_path, "entry: [unclosed\n")
    result = CliRunner().invoke(cli, ["build", str(path), "--quiet"])

    assert result.exit_code == 1
    assert "Invalid YAML" in result.output
