"""Basic tests for mc-notifier."""

import json
from pathlib import Path

import pytest

from mc_notifier import __version__
from mc_notifier.config import Config, ConfigError
from mc_notifier.logging import configure_logging, get_logger


def test_version() -> None:
    """Test that version is defined."""
    assert __version__ == "0.1.0"


def test_config_defaults() -> None:
    config = Config()

    assert config.webhook_url is None
    assert config.poll_interval == 0.5
    assert config.queue_size == 2
    assert config.default_retry_after == 1
    assert config.follow_rotation is True
    assert config.patterns == {}


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test loading config from environment variables."""
    monkeypatch.setenv("MC_NOTIFIER_WEBHOOK_URL", "https://discord.test/hook")
    monkeypatch.setenv("MC_NOTIFIER_LOG_FILE", "/srv/minecraft/logs/latest.log")
    monkeypatch.setenv("MC_NOTIFIER_POLL_INTERVAL", "0.25")
    monkeypatch.setenv("MC_NOTIFIER_QUEUE_SIZE", "8")
    monkeypatch.setenv("MC_NOTIFIER_FOLLOW_ROTATION", "no")

    config = Config.from_env()

    assert config.webhook_url == "https://discord.test/hook"
    assert config.log_file == Path("/srv/minecraft/logs/latest.log")
    assert config.poll_interval == 0.25
    assert config.queue_size == 8
    assert config.follow_rotation is False


def test_config_from_env_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MC_NOTIFIER_QUEUE_SIZE", "lots")

    with pytest.raises(ConfigError, match="MC_NOTIFIER_QUEUE_SIZE"):
        Config.from_env()


def test_config_from_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test loading config from YAML, with env taking precedence."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "webhook_url: https://discord.test/from-file\n"
        "log_file: /srv/mc/latest.log\n"
        "request_timeout: 5\n"
        "patterns:\n"
        "  player_joined: '^(\\w+) logged in'\n"
    )
    monkeypatch.setenv("MC_NOTIFIER_WEBHOOK_URL", "https://discord.test/from-env")

    config = Config.from_file(path)

    assert config.webhook_url == "https://discord.test/from-env"
    assert config.log_file == Path("/srv/mc/latest.log")
    assert config.request_timeout == 5
    assert config.patterns == {"player_joined": "^(\\w+) logged in"}


def test_config_missing_file(tmp_path: Path) -> None:
    config = Config.from_file(tmp_path / "nope.yaml")
    assert config == Config()


def test_config_unknown_key(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("webhook: https://discord.test\n")

    with pytest.raises(ConfigError, match="unknown key"):
        Config.from_file(path)


def test_config_validation(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("queue_size: 0\n")

    with pytest.raises(ConfigError, match="queue_size"):
        Config.from_file(path)


@pytest.mark.parametrize(
    "yaml_text, field",
    [
        ("poll_interval: fast\n", "poll_interval"),
        ("queue_size: 2.5\n", "queue_size"),
        ("queue_size: true\n", "queue_size"),
        ("log_file: 123\n", "log_file"),
        ("follow_rotation: maybe\n", "follow_rotation"),
        ("webhook_url: [a, b]\n", "webhook_url"),
        ("patterns: player_joined\n", "patterns"),
    ],
)
def test_config_file_wrong_type(tmp_path: Path, yaml_text: str, field: str) -> None:
    """Badly typed file values are reported as config errors."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml_text)

    with pytest.raises(ConfigError, match=field):
        Config.from_file(path)


def test_config_file_string_values_parsed(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "poll_interval: '0.2'\n"
        "queue_size: '4'\n"
        "follow_rotation: 'off'\n"
        "echo_lines: false\n"
    )

    config = Config.from_file(path)

    assert config.poll_interval == 0.2
    assert config.queue_size == 4
    assert config.follow_rotation is False
    assert config.echo_lines is False


def test_config_file_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("poll_interval: [unclosed\n")

    with pytest.raises(ConfigError, match="invalid YAML"):
        Config.from_file(path)


def test_logs_go_to_stderr_as_json(capsys: pytest.CaptureFixture[str]) -> None:
    """stdout stays free for the echoed server log."""
    configure_logging("INFO", json_output=True)

    get_logger("mc_notifier.test").info("Webhook rate limited", wait_seconds=2)

    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip().splitlines()[-1])
    assert record["event"] == "Webhook rate limited"
    assert record["wait_seconds"] == 2
    assert record["level"] == "info"
