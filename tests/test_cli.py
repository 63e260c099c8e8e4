"""
Tests for CLI commands — generate, config check, and global options.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from idlstage.main import cli


@pytest.fixture(autouse=True)
def _default_log_level(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("IDLSTAGE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("IDLSTAGE_LOG_FILE", raising=False)


def _make_config(tmp_path: Path, with_sources: bool = True) -> Path:
    content = textwrap.dedent("""\
        project:
          artifact_id: users-service
        generator:
          command: [scrooge]
        thriftOpts: [--finagle]
    """)
    config = tmp_path / "idlstage.yml"
    config.write_text(content)
    (tmp_path / "pom.xml").write_text("<project/>")
    if with_sources:
        src = tmp_path / "src" / "main" / "thrift"
        src.mkdir(parents=True)
        (src / "user.thrift").write_text("struct User {}\n")
    return config


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Scrooge" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestGenerateCommand:
    def test_generate_mock(self, tmp_path: Path):
        config = _make_config(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(config), "generate", "--mock"])
        assert result.exit_code == 0
        assert "Sources generated" in result.output
        assert "generated-sources" in result.output

    def test_generate_json(self, tmp_path: Path):
        config = _make_config(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(config), "generate", "--mock", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["status"] == "generated"
        assert data["sources"]["total"] == 1

    def test_nothing_to_compile(self, tmp_path: Path):
        config = _make_config(tmp_path, with_sources=False)
        result = CliRunner().invoke(cli, ["--config", str(config), "generate", "--mock"])
        assert result.exit_code == 0
        assert "nothing-to-compile" in result.output

    def test_test_phase(self, tmp_path: Path):
        config = _make_config(tmp_path)
        result = CliRunner().invoke(
            cli, ["--config", str(config), "generate", "--mock", "--phase", "test-compile", "--json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["status"] == "nothing-to-compile"

    def test_missing_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["generate"])
        assert result.exit_code == 1
        assert "No idlstage.yml" in result.output

    def test_quiet(self, tmp_path: Path):
        config = _make_config(tmp_path)
        result = CliRunner().invoke(cli, ["--quiet", "--config", str(config), "generate", "--mock"])
        assert result.exit_code == 0
        assert result.output == ""


class TestConfigCheckCommand:
    def test_valid_config(self, tmp_path: Path):
        config = _make_config(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "users-service" in result.output

    def test_invalid_config(self, tmp_path: Path):
        config = tmp_path / "idlstage.yml"
        config.write_text("language: java\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 1
        assert "Missing 'project'" in result.output

    def test_json(self, tmp_path: Path):
        config = _make_config(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check", "--json"])
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["artifact_id"] == "users-service"
        assert data["phases"] == ["compile", "test-compile"]
