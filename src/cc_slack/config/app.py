"""
Configuration management for the cc-slack daemon.

Provides YAML-based configuration with environment and CLI overrides,
configuration hierarchy (CLI > environment > YAML > Defaults), and validation.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from cc_slack.config.tmux import TmuxConfig
from cc_slack.hooks.mention import is_direct_message_channel

DEFAULT_CONFIG_FILE = "~/.cc-slack/config.yaml"

# (config key, primary variable, fallback variable)
ENV_VARIABLES: list[tuple[str, str, str | None]] = [
    ("slack.bot_token", "CC_NOTIFY_SLACK_TOKEN", "SLACK_TOKEN"),
    ("slack.channel", "CC_NOTIFY_SLACK_CHANNEL", "SLACK_CHANNEL"),
    ("slack.user_id", "CC_NOTIFY_SLACK_USER_ID", None),
    ("slack.app_token", "CC_NOTIFY_SLACK_APP_TOKEN", None),
]


class SlackSettings(BaseModel):
    """Slack workspace settings."""

    bot_token: str = Field(
        default="",
        description="Bot token (xoxb-...) used for chat.postMessage",
    )
    channel: str = Field(
        default="",
        description="Channel ID to post to. A user ID (U...) posts to that user's DM",
    )
    user_id: str = Field(
        default="",
        description="User ID to @-mention in every message and to accept replies from",
    )
    app_token: str = Field(
        default="",
        description="App-level token (xapp-...). Enables the Socket Mode reply relay when set",
    )
    api_base_url: str = Field(
        default="https://slack.com/api",
        description="Slack Web API base URL",
    )
    timeout: float = Field(
        default=10.0,
        description="HTTP timeout in seconds for Slack API calls",
    )

    @field_validator("timeout")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @property
    def bot_enabled(self) -> bool:
        return bool(self.app_token)


class SessionRegistrySettings(BaseModel):
    """Session-to-thread registry settings."""

    max_age_days: float = Field(
        default=30.0,
        description="Drop session/thread mappings older than this many days",
    )
    sweep_interval_seconds: float = Field(
        default=3600.0,
        description="How often the eviction sweep runs",
    )
    transcript_delay_seconds: float = Field(
        default=0.5,
        description="Grace period before reading the transcript after a hook fires",
    )

    @field_validator("max_age_days", "sweep_interval_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @field_validator("transcript_delay_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Validate value is not negative."""
        if v < 0:
            raise ValueError("Value must not be negative")
        return v


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Log level",
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path (rotated). Console only when unset",
    )
    max_size_mb: int = Field(
        default=10,
        description="Maximum log file size in MB",
    )
    backup_count: int = Field(
        default=5,
        description="Number of backup log files to keep",
    )

    @field_validator("max_size_mb", "backup_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class BridgeConfig(BaseModel):
    """
    Main configuration for the cc-slack daemon.

    Configuration is loaded with the following priority:
    1. CLI arguments (highest)
    2. Environment variables (CC_NOTIFY_SLACK_*)
    3. YAML file (~/.cc-slack/config.yaml)
    4. Defaults (lowest)
    """

    host: str = Field(
        default="127.0.0.1",
        description="Interface the hook server binds to",
    )
    port: int = Field(
        default=19999,
        description="Port the hook server listens on",
    )

    slack: SlackSettings = Field(
        default_factory=SlackSettings,
        description="Slack configuration",
    )
    tmux: TmuxConfig = Field(
        default_factory=TmuxConfig,
        description="tmux relay configuration",
    )
    sessions: SessionRegistrySettings = Field(
        default_factory=SessionRegistrySettings,
        description="Session registry configuration",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    def require_slack(self) -> None:
        """
        Ensure the settings needed to post messages are present.

        Raises:
            ValueError: If the bot token or channel is missing
        """
        if not self.slack.bot_token or not self.slack.channel:
            raise ValueError("CC_NOTIFY_SLACK_TOKEN and CC_NOTIFY_SLACK_CHANNEL must be set")


def resolve_allowed_user(config: BridgeConfig) -> str:
    """
    Resolve which Slack user may send replies into tmux.

    A DM channel is addressed by the user's own ID, so that user is the one
    allowed. For a regular channel the configured user ID is required.

    Raises:
        ValueError: If the bot is enabled on a non-DM channel without a user ID
    """
    if is_direct_message_channel(config.slack.channel):
        return config.slack.channel
    if not config.slack.user_id:
        raise ValueError(
            "CC_NOTIFY_SLACK_USER_ID is required when bot is enabled with a channel (non-DM)"
        )
    return config.slack.user_id


def load_yaml(config_file: str) -> dict[str, Any]:
    """
    Load YAML or JSON configuration file.

    Args:
        config_file: Path to YAML or JSON configuration file

    Returns:
        Dictionary with parsed YAML/JSON content, empty if the file is missing

    Raises:
        ValueError: If YAML/JSON is invalid or file format is wrong
    """
    config_path = Path(config_file).expanduser()

    if not config_path.exists():
        return {}

    file_ext = config_path.suffix.lower()
    if file_ext not in [".yaml", ".yml", ".json"]:
        raise ValueError(
            f"Config file must have .yaml, .yml, or .json extension, got: {file_ext}\n"
            f"File: {config_path}"
        )

    try:
        content = config_path.read_text()

        if file_ext == ".json":
            return json.loads(content) if content.strip() else {}

        data = yaml.safe_load(content)
        return data if data is not None else {}

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e


def _set_dotted(config_dict: dict[str, Any], key: str, value: Any) -> None:
    parts = key.split(".")
    current = config_dict
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value


def apply_env_overrides(
    config_dict: dict[str, Any],
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """
    Apply CC_NOTIFY_SLACK_* environment variables to the config dictionary.

    Each variable falls back to its legacy name (SLACK_TOKEN, SLACK_CHANNEL)
    when the primary one is unset or empty. Empty values never override.
    """
    env = os.environ if environ is None else environ
    for key, primary, fallback in ENV_VARIABLES:
        value = env.get(primary, "")
        if not value and fallback:
            value = env.get(fallback, "")
        if value:
            _set_dotted(config_dict, key, value)
    return config_dict


def apply_cli_overrides(
    config_dict: dict[str, Any],
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Apply CLI argument overrides to config dictionary.

    Args:
        config_dict: Configuration dictionary
        cli_overrides: Dictionary of CLI overrides; dotted keys such as
            "logging.level" address nested sections. None values are skipped.

    Returns:
        Configuration dictionary with CLI overrides applied
    """
    if cli_overrides is None:
        return config_dict

    for key, value in cli_overrides.items():
        if value is None:
            continue
        _set_dotted(config_dict, key, value)

    return config_dict


def load_config(
    config_file: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> BridgeConfig:
    """
    Load configuration with hierarchy: CLI > environment > YAML > Defaults.

    Args:
        config_file: Path to YAML config file (default: ~/.cc-slack/config.yaml)
        cli_overrides: Dictionary of CLI argument overrides
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated BridgeConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    if config_file is None:
        config_file = DEFAULT_CONFIG_FILE

    config_dict = load_yaml(config_file)
    config_dict = apply_env_overrides(config_dict, environ)
    config_dict = apply_cli_overrides(config_dict, cli_overrides)

    try:
        return BridgeConfig(**config_dict)
    except Exception as e:
        raise ValueError(
            f"Configuration validation failed: {e}\n"
            f"Please check your configuration file at {config_file}"
        ) from e
