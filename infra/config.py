"""
Configuration Manager
---------------------
Loads configuration from YAML with environment variable overrides.

Rules:
- Secrets never in code or config files, environment only
- Environment overrides use MONAD_<SECTION>_<KEY>
"""

from pathlib import Path
from typing import Any, Dict, Optional
import copy
import logging
import os

import yaml


DEFAULTS: Dict[str, Any] = {
    "commands": {
        "registry_path": None,  # None -> bundled commands/command_map.yaml
    },
    "executors": {
        "timeout_seconds": 30.0,
        "dry_run": False,
    },
    "twitter": {
        "base_url": "https://api.memory.lol",
        "timeout_seconds": 15.0,
        "save_reports": False,
        "report_dir": ".",
    },
    "llm": {
        "base_url": "https://api.anthropic.com/v1",
        "model": "claude-3-sonnet-20240229",
        "max_tokens": 1000,
        "api_key_env": "ANTHROPIC_API_KEY",
        "timeout_seconds": 60.0,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 4000,
    },
    "logging": {
        "level": "INFO",
        "dir": "logs",
        "file": True,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _coerce(raw: str, like: Any) -> Any:
    """Coerce an environment string to the type of the default value."""
    if isinstance(like, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(like, int):
        return int(raw)
    if isinstance(like, float):
        return float(raw)
    return raw


class ConfigManager:
    """
    Centralized configuration management.
    Defaults < config file < environment.
    """

    ENV_PREFIX = "MONAD_"

    def __init__(self, config_path: Optional[str] = "config.yaml"):
        self._config_path = Path(config_path) if config_path else None
        self._config: Dict[str, Any] = {}
        self._logger = logging.getLogger("monad.infra.config")

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file."""
        file_config: Dict[str, Any] = {}

        if self._config_path is not None:
            if self._config_path.exists():
                with open(self._config_path, 'r', encoding='utf-8') as f:
                    file_config = yaml.safe_load(f) or {}
                self._logger.info(f"Loaded config from {self._config_path}")
            else:
                self._logger.warning(f"Config file not found: {self._config_path}")

        self._config = _merge(DEFAULTS, file_config)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.
        Supports dot notation: 'section.key'
        Environment variables override file config.
        """
        parts = key.split('.')
        value: Any = self._config

        for part in parts:
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                value = default
                break

        env_key = f"{self.ENV_PREFIX}{key.upper().replace('.', '_')}"
        env_value = os.getenv(env_key)
        if env_value is not None:
            return _coerce(env_value, value)

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value (runtime only, not persisted)."""
        parts = key.split('.')
        config = self._config

        for part in parts[:-1]:
            if part not in config:
                config[part] = {}
            config = config[part]

        config[parts[-1]] = value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get an entire configuration section, env overrides applied."""
        values = self._config.get(section, {})
        return {key: self.get(f"{section}.{key}") for key in values}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
