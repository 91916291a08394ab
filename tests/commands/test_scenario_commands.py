"""Tests for the observe, price, chat and approve CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from dispatchkit.cli import cli


@pytest.mark.usefixtures("workdir")
class TestObserveCommand:
    def test_reference_scenario(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["observe"], input="2\nAmy\nBob\n3\n")
        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "Amy 1",
            "Bob 1",
            "Amy 2",
            "Bob 2",
            "Amy 3",
            "Bob 3",
        ]

    def test_reads_file_argument(self, cli_runner: CliRunner, workdir: Path) -> None:
        (workdir / "in.txt").write_text("1\nAmy\n2\n")
        result = cli_runner.invoke(cli, ["observe", "in.txt"])
        assert result.exit_code == 0
        assert result.stdout == "Amy 1\nAmy 2\n"

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "observe"], input="1\nAmy\n1\n")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["op"] == "observe"
        assert data["data"]["lines"] == ["Amy 1"]
        assert data["data"]["hour"] == 1

    def test_config_start_hour(self, cli_runner: CliRunner, workdir: Path) -> None:
        (workdir / "dispatchkit.toml").write_text("[clock]\nstart_hour = 23\n")
        result = cli_runner.invoke(cli, ["observe"], input="1\nAmy\n1\n")
        assert result.stdout == "Amy 0\n"

    def test_malformed_exits_nonzero(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["observe"], input="two\n")
        assert result.exit_code == 1
        assert result.stdout == "Invalid input\n"
        assert "ERROR: observe" in result.stderr


@pytest.mark.usefixtures("workdir")
class TestPriceCommand:
    def test_reference_scenario(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["price"], input="3\n120 1\n120 2\n50 3\n")
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["108", "115", "Unknown strategy type"]

    def test_stops_on_first_unknown(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["price"], input="3\n50 3\n120 1\n120 2\n")
        assert result.exit_code == 0
        assert result.stdout == "Unknown strategy type\n"

    def test_keep_going(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--keep-going", "price"], input="3\n50 3\n120 1\n120 2\n")
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["Unknown strategy type", "108", "115"]
        assert "WARNING" in result.stderr

    def test_quiet_suppresses_warnings(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "--keep-going", "price"], input="1\n5 9\n")
        assert result.stdout == "Unknown strategy type\n"
        assert "WARNING" not in result.stderr

    def test_local_plugin_strategy(self, cli_runner: CliRunner, workdir: Path) -> None:
        plugin_dir = workdir / ".dispatchkit" / "plugins"
        plugin_dir.mkdir(parents=True)
        (plugin_dir / "doubler.py").write_text(
            "from dispatchkit.plugins import hookimpl\n"
            "\n"
            "class Doubler:\n"
            "    @hookimpl\n"
            "    def register_strategies(self):\n"
            "        return {'double': lambda price: price * 2}\n"
        )
        result = cli_runner.invoke(cli, ["price"], input="1\n21 double\n")
        assert result.exit_code == 0
        assert result.stdout == "42\n"

    def test_plugins_disabled(self, cli_runner: CliRunner, workdir: Path) -> None:
        (workdir / "dispatchkit.toml").write_text("[plugins]\nenabled = false\n")
        result = cli_runner.invoke(cli, ["price"], input="1\n21 double\n")
        assert result.stdout == "Unknown strategy type\n"


@pytest.mark.usefixtures("workdir")
class TestChatCommand:
    def test_reference_scenario(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["chat"], input="3\nA\nB\nC\nA hi\n")
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["B received: hi", "C received: hi"]

    def test_unknown_sender_silent(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["chat"], input="2\nA\nB\nZ hello\n")
        assert result.exit_code == 0
        assert result.stdout == ""
        assert result.stderr == ""

    def test_pair_split_across_lines(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["chat"], input="2\nA B\nA\nhi\nB\n")
        assert result.exit_code == 0
        assert result.stdout == "B received: hi\n"
        assert result.stderr == ""

    def test_duplicate_user_fails(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["chat"], input="2\nA\nA\n")
        assert result.exit_code == 1
        assert "already registered" in result.stderr

    def test_replace_policy_from_config(self, cli_runner: CliRunner, workdir: Path) -> None:
        (workdir / "dispatchkit.toml").write_text('[registry]\nduplicates = "replace"\n')
        result = cli_runner.invoke(cli, ["chat"], input="3\nA\nB\nA\nB yo\n")
        assert result.exit_code == 0
        assert result.stdout == "A received: yo\n"


@pytest.mark.usefixtures("workdir")
class TestApproveCommand:
    def test_reference_scenario(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["approve"], input="4\nann 2\nbo 5\ncy 9\ndee 15\n")
        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "ann Approved by Supervisor.",
            "bo Approved by Manager.",
            "cy Approved by Director.",
            "dee Denied by Director.",
        ]

    def test_invalid_line_halts(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["approve"], input="2\nann\nbo 5\n")
        assert result.exit_code == 1
        assert result.stdout == "Invalid input\n"

    def test_json_failure_goes_to_stderr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "approve"], input="1\nann two\n")
        assert result.exit_code == 1
        assert result.stdout == ""
        data = json.loads(result.stderr)
        assert data["ok"] is False
        assert data["error"]["code"] == "MALFORMED_INPUT"
        assert data["data"]["lines"] == ["Invalid input"]

    def test_custom_chain_from_config(self, cli_runner: CliRunner, workdir: Path) -> None:
        (workdir / "dispatchkit.toml").write_text(
            '[[chain.links]]\ncapacity = 1\nlabel = "Lead"\n'
            '[[chain.links]]\ncapacity = 20\nlabel = "CEO"\n'
        )
        result = cli_runner.invoke(cli, ["approve"], input="3\na 1\nb 20\nc 21\n")
        assert result.stdout.splitlines() == [
            "a Approved by Lead.",
            "b Approved by CEO.",
            "c Denied by CEO.",
        ]

    def test_examples_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["approve", "--examples"])
        assert result.exit_code == 0
        assert "dispatchkit approve requests.txt" in result.stdout
