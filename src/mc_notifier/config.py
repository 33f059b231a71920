"""Configuration loading for mc-notifier."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""

    pass


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Not a boolean: {value!r}")


# Config field -> (environment variable, parser)
_ENV_VARS: dict[str, tuple[str, Any]] = {
    "webhook_url": ("MC_NOTIFIER_WEBHOOK_URL", str),
    "log_file": ("MC_NOTIFIER_LOG_FILE", Path),
    "poll_interval": ("MC_NOTIFIER_POLL_INTERVAL", float),
    "queue_size": ("MC_NOTIFIER_QUEUE_SIZE", int),
    "request_timeout": ("MC_NOTIFIER_REQUEST_TIMEOUT", float),
    "default_retry_after": ("MC_NOTIFIER_DEFAULT_RETRY_AFTER", int),
    "follow_rotation": ("MC_NOTIFIER_FOLLOW_ROTATION", _parse_bool),
    "echo_lines": ("MC_NOTIFIER_ECHO_LINES", _parse_bool),
    "log_level": ("MC_NOTIFIER_LOG_LEVEL", str),
}


def _coerce(name: str, value: Any) -> Any:
    """Convert a YAML value to the type of config field `name`.

    Strings go through the same parser as the environment variable, so
    `queue_size: "4"` and `MC_NOTIFIER_QUEUE_SIZE=4` behave alike.

    Raises:
        ConfigError: The value has the wrong type or does not parse
    """
    if name == "patterns":
        if not isinstance(value, dict):
            raise ConfigError("patterns must be a mapping")
        return {str(k): str(v) for k, v in value.items()}

    if value is None and name in ("webhook_url", "log_file"):
        return None

    parse = _ENV_VARS[name][1]
    if parse is _parse_bool and isinstance(value, bool):
        return value
    if parse is int and isinstance(value, int) and not isinstance(value, bool):
        return value
    if parse is float and isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        raise ConfigError(f"{name}: unexpected {type(value).__name__} value {value!r}")

    try:
        return parse(value)
    except ValueError as e:
        raise ConfigError(f"{name}: invalid value {value!r}") from e


@dataclass
class Config:
    """Application configuration."""

    webhook_url: str | None = None
    log_file: Path | None = None
    poll_interval: float = 0.5
    queue_size: int = 2
    request_timeout: float = 10.0
    default_retry_after: int = 1
    follow_rotation: bool = True
    echo_lines: bool = True
    log_level: str = "INFO"
    # Event kind value -> regex replacing the built-in pattern
    patterns: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: A value is out of range
        """
        if self.poll_interval <= 0:
            raise ConfigError("poll_interval must be positive")
        if self.queue_size < 1:
            raise ConfigError("queue_size must be at least 1")
        if self.request_timeout <= 0:
            raise ConfigError("request_timeout must be positive")
        if self.default_retry_after < 0:
            raise ConfigError("default_retry_after must not be negative")

    def _apply_env(self) -> None:
        for name, (var, parse) in _ENV_VARS.items():
            raw = os.environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                setattr(self, name, parse(raw))
            except ValueError as e:
                raise ConfigError(f"Invalid value for {var}: {raw!r}") from e

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        config = cls()
        config._apply_env()
        config.validate()
        return config

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load configuration from YAML file, with env var overrides."""
        config = cls()

        if path.exists():
            with open(path) as f:
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigError(f"{path}: invalid YAML: {e}") from e

            if data:
                if not isinstance(data, dict):
                    raise ConfigError(f"{path}: expected a mapping at top level")

                known = {f.name for f in fields(cls)}
                unknown = sorted(set(data) - known)
                if unknown:
                    raise ConfigError(f"{path}: unknown key(s): {', '.join(unknown)}")

                for key, value in data.items():
                    try:
                        setattr(config, key, _coerce(key, value))
                    except ConfigError as e:
                        raise ConfigError(f"{path}: {e}") from e

        config._apply_env()
        config.validate()
        return config
