"""
Client defaults: the packaged config.yaml, overridden by RESTCLIENT_* variables
from the environment or a .env file.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any
from dotenv import find_dotenv, load_dotenv

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

# variable -> (section, key)
ENV_OVERRIDES = {
    'RESTCLIENT_USER_AGENT': ('client', 'user_agent'),
    'RESTCLIENT_LOG_LEVEL': ('logging', 'level'),
    'RESTCLIENT_LOG_FORMAT': ('logging', 'format'),
}


def coerce(value: str):
    """Turn an environment string into a bool, int or float where it reads as one."""
    lowered = value.lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


class Config:
    def __init__(self, config_path: str = None, env_file: str = None):
        """Load settings from config_path and apply environment overrides.

        When env_file is not given, the nearest .env at or above the current
        working directory is used.
        """
        self.config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        load_dotenv(env_file or find_dotenv(usecwd=True))
        self._config = self._read_yaml()
        self._override_from_env()

    def _read_yaml(self) -> Dict[str, Any]:
        try:
            with open(self.config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

    def _override_from_env(self):
        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            if not isinstance(self._config.get(section), dict):
                self._config[section] = {}
            self._config[section][key] = coerce(value)

    def get(self, *keys, default=None):
        """Walk nested keys, e.g. get('client', 'user_agent'); default when any is missing."""
        current = self._config
        for key in keys:
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    @property
    def client(self) -> Dict[str, Any]:
        return self.get('client', default={})

    @property
    def logging(self) -> Dict[str, Any]:
        return self.get('logging', default={})


_config = None


def get_config() -> Config:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = Config()
    return _config
