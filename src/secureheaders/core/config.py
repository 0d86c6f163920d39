# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Policy configuration loaded from YAML/TOML files with profile overlays."""

from __future__ import annotations

import importlib.resources
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml  # type: ignore[import-untyped]

from secureheaders.kernel.exceptions import (
    ConfigResourceNotFoundException,
    ConfigurationException,
)

logger = structlog.get_logger("secureheaders.core.config")

DEFAULTS_RESOURCE = "secure-headers.yaml"

_SUPPORTED_SUFFIXES = (".yaml", ".yml", ".toml")


class Config:
    """Hierarchical policy configuration.

    Merge order when loading from files (later wins):
    1. Packaged defaults (``secure-headers.yaml``), when requested
    2. The named configuration file
    3. Profile overlays: ``<stem>-{profile}<suffix>`` next to the file
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data) if data else {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """List of config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def defaults(cls) -> Config:
        """Return the packaged default policy."""
        instance = cls(cls._load_packaged_defaults())
        instance._loaded_sources = [f"{DEFAULTS_RESOURCE} (packaged defaults)"]
        return instance

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = False,
    ) -> Config:
        """Load a policy from a YAML or TOML file.

        Raises:
            ConfigResourceNotFoundException: *path* does not exist.
            ConfigurationException: *path* has an unsupported suffix.
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigResourceNotFoundException(
                f"Configuration file not found: {path}",
                code="CONFIG_NOT_FOUND",
                context={"path": str(path)},
            )

        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_packaged_defaults()
            sources.append(f"{DEFAULTS_RESOURCE} (packaged defaults)")

        data = cls._deep_merge(data, cls._load_config_data(path))
        sources.append(str(path))

        for profile in active_profiles or []:
            profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
            if profile_path.is_file():
                data = cls._deep_merge(data, cls._load_config_data(profile_path))
                sources.append(f"{profile_path} (profile: {profile})")

        logger.debug("config_loaded", sources=sources)

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        """Load config data from a YAML or TOML file."""
        if path.suffix not in _SUPPORTED_SUFFIXES:
            raise ConfigurationException(
                f"Unsupported configuration format '{path.suffix}' for {path}",
                code="CONFIG_FORMAT",
                context={"path": str(path)},
            )
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_packaged_defaults() -> dict[str, Any]:
        """Load the default policy from secureheaders.resources."""
        defaults_file = importlib.resources.files("secureheaders.resources").joinpath(DEFAULTS_RESOURCE)
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
