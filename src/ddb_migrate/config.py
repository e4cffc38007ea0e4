"""Loading connection profiles from the configuration file.

The file is YAML (plain JSON is accepted too, since JSON is valid YAML).
Its root is either a list of profile mappings or a mapping holding that
list under ``awsConfig`` (or ``profiles``)::

    awsConfig:
      - region: us-east-1
      - profile: dev
        region: eu-west-1
        accessKeyId: AKIA...
        secretAccessKey: ...
      - profile: local
        region: localhost
        dynamoDbEndpoint: http://localhost:8000
        mode: local
"""

import os
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError
from .models import ConnectionProfile

CONFIG_ENV_VAR = "DDB_MIGRATE_CONFIG"
"""Environment variable for overriding the configuration file path."""

DEFAULT_CONFIG_FILE = "ddb-migrate.yaml"
"""Configuration file looked up in the working directory by default."""

_LIST_KEYS = ("awsConfig", "profiles")


def config_path(path: str | Path | None = None) -> Path:
    """Resolve the configuration file path (argument, env var, then default)."""
    if path is not None:
        return Path(path)
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))


def load_profiles(path: str | Path | None = None) -> list[ConnectionProfile]:
    """
    Load all connection profiles from the configuration file.

    Profiles are read fresh on every call; nothing is cached.

    Args:
        path: Config file path (default: $DDB_MIGRATE_CONFIG or ./ddb-migrate.yaml)

    Returns:
        Profiles in file order

    Raises:
        ConfigError: If the file is missing, unparsable or wrongly shaped
    """
    resolved = config_path(path)
    if not resolved.exists():
        raise ConfigError(f"Config file not found: {resolved}")

    try:
        with resolved.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {resolved}: {e}") from e

    return parse_profiles(data)


def parse_profiles(data: Any) -> list[ConnectionProfile]:
    """Convert parsed config data into profiles."""
    if isinstance(data, dict):
        for key in _LIST_KEYS:
            if key in data:
                data = data[key]
                break
        else:
            raise ConfigError(f"Config mapping must contain one of: {', '.join(_LIST_KEYS)}")

    if not isinstance(data, list):
        raise ConfigError(f"Config must be a list of profiles, not {type(data).__name__}")

    profiles = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ConfigError(f"Profile #{index} must be a mapping, not {type(entry).__name__}")
        profiles.append(ConnectionProfile.from_dict(entry))
    return profiles
