"""Integration tests for the build and check commands (discover -> parse -> export)"""

import json

import pytest
from typer.testing import CliRunner

from docsparser.cli.cli import app


APP_MD = """\
# app

Process: [Main](../glossary.md#main-process)

## Methods

### `app.getPath(name)`

* `name` string - Can be `home` or `temp`.

Returns `string` - A path to a special directory.
"""

SIZE_MD = """\
# Size Object

* `width` number
* `height` number
"""


@pytest.fixture(name="runner")
def runner_fixture():
    return CliRunner()


@pytest.fixture(name="package_dir")
def package_dir_fixture(tmp_path, monkeypatch):
    """A package root with package.json and docs/api; run from tmp_path so no docsparser.yaml leaks in."""
    monkeypatch.chdir(tmp_path)
    api = tmp_path / "pkg" / "docs" / "api"
    (api / "structures").mkdir(parents=True)
    (api / "app.md").write_text(APP_MD)
    (api / "structures" / "size.md").write_text(SIZE_MD)
    (tmp_path / "pkg" / "package.json").write_text('{"name": "pkg", "version": "4.5.6"}')
    return tmp_path / "pkg"


def test_build_cmd_writes_api_json(runner, package_dir, tmp_path):
    """build parses the docs and writes api.json stamped with the package.json version."""
    result = runner.invoke(app, ["build", str(package_dir), "--out-dir", str(tmp_path / "dist")])

    assert result.exit_code == 0, result.output
    assert "Parsed 2 container(s) for version 4.5.6" in result.output
    data = json.loads((tmp_path / "dist" / "api.json").read_text())
    assert [c['type'] for c in data] == ['Module', 'Structure']
    param = data[0]['methods'][0]['parameters'][0]
    assert [v['value'] for v in param['possibleValues']] == ['home', 'temp']
    assert data[0]['repoUrl'] == 'https://github.com/electron/electron/blob/v4.5.6/docs/api/app.md'


def test_build_cmd_options(runner, package_dir, tmp_path):
    """--module-version and --out-file override the defaults."""
    result = runner.invoke(app, [
        "build", str(package_dir),
        "--out-dir", str(tmp_path / "dist"),
        "--out-file", "electron-api.json",
        "--module-version", "9.9.9",
    ])

    assert result.exit_code == 0, result.output
    data = json.loads((tmp_path / "dist" / "electron-api.json").read_text())
    assert all(c['version'] == '9.9.9' for c in data)


def test_build_cmd_file_filter(runner, package_dir, tmp_path):
    """--file limits parsing to the named files."""
    result = runner.invoke(app, [
        "build", str(package_dir), "--out-dir", str(tmp_path / "dist"), "--file", "size.md",
    ])

    assert result.exit_code == 0, result.output
    data = json.loads((tmp_path / "dist" / "api.json").read_text())
    assert [c['name'] for c in data] == ['Size']


def test_build_cmd_parse_error_exits_1(runner, package_dir, tmp_path):
    """A documentation error is reported and nothing is written."""
    (package_dir / "docs" / "api" / "bad.md").write_text("# bad\n\n## Methods\n\n### bad()\n")
    result = runner.invoke(app, ["build", str(package_dir), "--out-dir", str(tmp_path / "dist")])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "bad.md" in result.output
    assert not (tmp_path / "dist" / "api.json").exists()


def test_build_cmd_strict_rejects_capitalised_types(runner, package_dir, tmp_path):
    """--strict turns on the lowercase primitive rule."""
    (package_dir / "docs" / "api" / "structures" / "flag.md").write_text("# Flag Object\n\n* `on` Boolean\n")
    lenient = runner.invoke(app, ["build", str(package_dir), "--out-dir", str(tmp_path / "dist")])
    strict = runner.invoke(app, ["build", str(package_dir), "--out-dir", str(tmp_path / "dist"), "--strict"])

    assert lenient.exit_code == 0, lenient.output
    assert strict.exit_code == 1
    assert 'Use lowercase "boolean"' in strict.output


def test_build_cmd_missing_version(runner, tmp_path, monkeypatch):
    """Without package.json or --module-version the build fails."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs" / "api").mkdir(parents=True)
    result = runner.invoke(app, ["build", str(tmp_path)])

    assert result.exit_code == 1
    assert "Could not determine the module version" in result.output


def test_build_cmd_missing_dir(runner, tmp_path, monkeypatch):
    """A nonexistent package root exits 1."""
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["build", str(tmp_path / "nope")])

    assert result.exit_code == 1
    assert "Resolved directory does not exist" in result.output


def test_check_cmd_prints_counts(runner, package_dir, tmp_path):
    """check reports per-type counts and writes nothing."""
    result = runner.invoke(app, ["check", str(package_dir)])

    assert result.exit_code == 0, result.output
    assert "  Module: 1" in result.output
    assert "  Structure: 1" in result.output
    assert "Check complete - 2 container(s), no errors" in result.output
    assert not (tmp_path / "api.json").exists()


def test_check_cmd_multi_mode(runner, package_dir):
    """--package-mode multi is accepted."""
    result = runner.invoke(app, ["check", str(package_dir), "--package-mode", "multi"])
    assert result.exit_code == 0, result.output


def test_check_cmd_invalid_mode(runner, package_dir):
    """An unknown package mode is a configuration error."""
    result = runner.invoke(app, ["check", str(package_dir), "--package-mode", "both"])
    assert result.exit_code == 1
    assert "Error:" in result.output
