"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from server_health_check.cli import main
from server_health_check.config import CheckConfig

LOCAL_CONFIG = """
servers:
  - address: localhost
    username: me
commands:
  CPU Usage: null
  Memory Usage: null
  Network Check: null
  Disk Usage: "echo '10G total, {used}G used, {used}0% used'"
log_level: ERROR
"""


@pytest.fixture
def cli():
    return CliRunner()


def write_config(tmp_path, used: int) -> str:
    path = tmp_path / "healthcheck.yaml"
    path.write_text(LOCAL_CONFIG.format(used=used))
    return str(path)


class TestInit:
    """Tests for the init command."""

    def test_creates_example(self, cli, tmp_path):
        output = tmp_path / "healthcheck.yaml"
        result = cli.invoke(main, ["init", "-o", str(output)])
        assert result.exit_code == 0
        assert len(CheckConfig.from_yaml(output).servers) == 4

    def test_refuses_to_overwrite(self, cli, tmp_path):
        output = tmp_path / "healthcheck.yaml"
        output.write_text("servers: []\n")
        result = cli.invoke(main, ["init", "-o", str(output)])
        assert result.exit_code == 1
        assert output.read_text() == "servers: []\n"


class TestServers:
    """Tests for the servers command."""

    def test_lists_servers(self, cli, tmp_path):
        result = cli.invoke(main, ["servers", "-c", write_config(tmp_path, 2)])
        assert result.exit_code == 0
        assert "localhost" in result.output
        assert "local" in result.output


class TestCheck:
    """Tests for the check command."""

    def test_json_output(self, cli, tmp_path):
        result = cli.invoke(
            main,
            ["check", "-c", write_config(tmp_path, 2), "--json", "--log-level", "ERROR"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        results = data["servers"][0]["results"]
        assert results[0]["label"] == "Disk Usage"
        assert results[0]["status"] == "ok"
        assert results[0]["metric"] == 20.0
        assert results[1]["status"] == "info"

    def test_warning_exit_code(self, cli, tmp_path):
        result = cli.invoke(main, ["check", "-c", write_config(tmp_path, 9), "--no-notify"])
        assert result.exit_code == 2
        assert "Disk Usage" in result.output
        assert "WARN" in result.output
