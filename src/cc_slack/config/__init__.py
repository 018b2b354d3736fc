"""
Configuration package for cc-slack.

Pydantic config models for the bridge daemon, loaded from YAML with
environment and CLI overrides.

Module structure:
- app.py: BridgeConfig, sub-configs and the loading helpers
- tmux.py: TmuxConfig
"""

from cc_slack.config.app import (
    BridgeConfig,
    LoggingSettings,
    SessionRegistrySettings,
    SlackSettings,
    apply_cli_overrides,
    apply_env_overrides,
    load_config,
    load_yaml,
    resolve_allowed_user,
)
from cc_slack.config.tmux import TmuxConfig

__all__ = [
    "BridgeConfig",
    "LoggingSettings",
    "SessionRegistrySettings",
    "SlackSettings",
    "TmuxConfig",
    "apply_cli_overrides",
    "apply_env_overrides",
    "load_config",
    "load_yaml",
    "resolve_allowed_user",
]
