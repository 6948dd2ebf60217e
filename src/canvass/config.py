"""
Runtime settings.

Resolution order (later wins):
    1. Settings defaults
    2. YAML file (--config, or CANVASS_CONFIG)
    3. CANVASS_* environment variables
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from canvass.errors import ConfigError
from canvass.export import DEFAULT_FILENAME
from canvass.storage import DEFAULT_KEY

ENV_PREFIX = "CANVASS_"
ENV_CONFIG = ENV_PREFIX + "CONFIG"

ENV_OVERRIDES = {
    "CANVASS_DATA_DIR": "data_dir",
    "CANVASS_STORAGE_FILE": "storage_file",
    "CANVASS_EXPORT_DIR": "export_dir",
    "CANVASS_LOG_LEVEL": "log_level",
}


@dataclass(frozen=True)
class Settings:
    """
    Properties:
        data_dir: Directory holding the key-value store file
        storage_file: Store file name inside data_dir
        storage_key: Slot the survey list is written under
        export_dir: Where the export file is written (defaults to data_dir)
        export_filename: Fixed, overwritten export file name
        log_level: Name of a logging level
    """

    data_dir: str = "."
    storage_file: str = "canvass.json"
    storage_key: str = DEFAULT_KEY
    export_dir: Optional[str] = None
    export_filename: str = DEFAULT_FILENAME
    log_level: str = "WARNING"

    @property
    def storage_path(self) -> Path:
        return Path(self.data_dir) / self.storage_file

    @property
    def export_path(self) -> Path:
        return Path(self.export_dir or self.data_dir) / self.export_filename


def _from_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must hold a mapping")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown settings in {path}: {', '.join(unknown)}")
    return {key: str(value) if value is not None else None for key, value in data.items()}


def load_settings(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Settings:
    if env is None:
        env = os.environ
    settings = Settings()

    path = path or env.get(ENV_CONFIG)
    if path:
        settings = replace(settings, **_from_yaml(path))

    overrides = {attr: env[var] for var, attr in ENV_OVERRIDES.items() if env.get(var)}
    if overrides:
        settings = replace(settings, **overrides)
    return settings
