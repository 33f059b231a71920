"""Tests for the command line interface."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from mc_notifier import cli


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.delenv("MC_NOTIFIER_WEBHOOK_URL", raising=False)
    monkeypatch.delenv("MC_NOTIFIER_LOG_FILE", raising=False)
    return CliRunner()


def invoke(runner: CliRunner, tmp_path: Path, *args: str):
    return runner.invoke(cli.main, ["--config", str(tmp_path / "none.yaml"), *args])


class TestWatch:
    def test_missing_log_file(self, runner, tmp_path):
        result = invoke(runner, tmp_path, "watch")

        assert result.exit_code == 2
        assert "Missing log file" in result.output
        assert "Usage:" in result.output

    def test_missing_webhook_url(self, runner, tmp_path):
        result = invoke(runner, tmp_path, "watch", str(tmp_path / "latest.log"))

        assert result.exit_code == 2
        assert "Missing webhook url" in result.output

    def test_unreadable_log_file(self, runner, tmp_path):
        result = invoke(
            runner, tmp_path, "watch", str(tmp_path / "missing.log"), "https://discord.test/hook"
        )

        assert result.exit_code == 1
        assert "can't read log file" in result.output

    def test_runs_notifier(self, runner, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr(
            cli, "run_notifier", lambda *args: calls.append(args)
        )
        log_file = tmp_path / "latest.log"

        result = invoke(runner, tmp_path, "watch", str(log_file), "https://discord.test/hook")

        assert result.exit_code == 0
        assert calls[0][0] == log_file
        assert calls[0][1] == "https://discord.test/hook"

    def test_webhook_url_from_env(self, runner, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr(cli, "run_notifier", lambda *args: calls.append(args))
        monkeypatch.setenv("MC_NOTIFIER_WEBHOOK_URL", "https://discord.test/env")

        result = invoke(runner, tmp_path, "watch", str(tmp_path / "latest.log"))

        assert result.exit_code == 0
        assert calls[0][1] == "https://discord.test/env"


class TestClassify:
    def test_join_line(self, runner, tmp_path):
        result = invoke(
            runner, tmp_path, "classify", "[12:00:00] [Server thread/INFO]: Steve joined the game"
        )

        assert result.exit_code == 0
        assert "player_joined" in result.output
        assert "Steve joined the game" in result.output
        assert "16311836" in result.output

    def test_chat_line(self, runner, tmp_path):
        result = invoke(
            runner, tmp_path, "classify", "[12:00:00] [Server thread/INFO]: <Steve> hello world"
        )

        assert result.exit_code == 0
        assert "Chat message" in result.output

    def test_no_event(self, runner, tmp_path):
        result = invoke(runner, tmp_path, "classify", "just some text")

        assert result.exit_code == 0
        assert "No event" in result.output


class TestSendTest:
    def test_failure_exits_nonzero(self, runner, tmp_path, monkeypatch):
        monkeypatch.setattr(cli.DiscordClient, "send_test", lambda self: False)

        result = invoke(runner, tmp_path, "test", "https://discord.test/hook")

        assert result.exit_code == 1
        assert "Failed to send test notification" in result.output

    def test_success(self, runner, tmp_path, monkeypatch):
        monkeypatch.setattr(cli.DiscordClient, "send_test", lambda self: True)

        result = invoke(runner, tmp_path, "test", "https://discord.test/hook")

        assert result.exit_code == 0
        assert "sent successfully" in result.output


class TestConfigErrors:
    def test_badly_typed_config_reported(self, runner, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("poll_interval: fast\n")

        result = runner.invoke(cli.main, ["--config", str(path), "classify", "x"])

        assert result.exit_code == 1
        assert "poll_interval" in result.output
        assert not isinstance(result.exception, TypeError)
