"""
Configuration Loader

Loads the build configuration (TOML or JSON) and the snapshot lookup
produced by the upstream snapshot step.
"""

import json
import os
import tomllib
from typing import Any, Dict

from .types import BuildConfig


class ConfigLoader:
    """Loads and validates configuration from files"""

    @staticmethod
    def load_from_file(config_path: str) -> BuildConfig:
        """Load a build configuration from a .toml or .json file"""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.endswith(".toml"):
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        else:
            with open(config_path, "r") as f:
                data = json.load(f)

        return ConfigLoader.from_dict(data)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> BuildConfig:
        """Create a BuildConfig from a dictionary; invalid input raises ValueError"""
        config = BuildConfig.model_validate(data)
        polling = config.polling.with_env_overrides()
        if polling is not config.polling:
            config = config.model_copy(update={"polling": polling})
        return config

    @staticmethod
    def to_dict(config: BuildConfig) -> Dict[str, Any]:
        return config.model_dump(exclude_none=True)

    @staticmethod
    def load_snapshot_ids(path: str) -> Dict[str, str]:
        """Load the device name -> snapshot id lookup written by the snapshot step"""
        if not os.path.exists(path):
            raise FileNotFoundError(f"Snapshot id file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise ValueError(f"Snapshot id file must map device names to snapshot ids: {path}")
        return data
