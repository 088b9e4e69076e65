import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import dotenv_values
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "CHATWEAVE_"


class ChatWeaveConfig(BaseSettings):
    """Configuration for chatweave.

    Settings can be provided via environment variables with CHATWEAVE_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # How multiple reasoning fragments in one message are merged on read
    reasoning_policy: Literal["last", "concat"] = "last"

    # Log tool results that match no pending call before dropping them
    warn_on_orphan_results: bool = True

    # Attach turn reasoning to persisted assistant messages
    persist_reasoning: bool = True


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a flat YAML mapping of field names to values."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return raw


def load_config(path: str | Path | None = None) -> ChatWeaveConfig:
    """Load configuration from an optional YAML file.

    Environment variables, including those in the ``.env`` file, take
    priority over YAML values.

    Args:
        path: YAML file to read. Missing files are ignored.

    Returns:
        The resolved configuration.
    """
    data: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        data = _load_yaml(Path(path))

    env_file = ChatWeaveConfig.model_config.get("env_file")
    dotenv = dotenv_values(env_file) if env_file and Path(env_file).exists() else {}
    overridden = {
        key.lower() for key in [*os.environ, *dotenv] if key.upper().startswith(ENV_PREFIX)
    }
    data = {
        key: value
        for key, value in data.items()
        if f"{ENV_PREFIX.lower()}{key.lower()}" not in overridden
    }
    return ChatWeaveConfig(**data)
