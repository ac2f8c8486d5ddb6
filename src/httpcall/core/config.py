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
"""Type-safe configuration with YAML/TOML files, env vars, and model binding."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from httpcall.kernel.exceptions import ConfigurationException

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_CONFIG_PROPERTIES_ATTR = "__httpcall_config_prefix__"

ENV_PREFIX = "HTTPCALL_"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a class as bindable to a configuration prefix.

    Applies to Pydantic BaseModel subclasses.

    Usage:
        @config_properties(prefix="httpcall")
        class HttpCallProperties(BaseModel):
            url: str
            retry_count: int = Field(default=0, ge=0)
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (HTTPCALL_SECTION_KEY format)
    2. Configuration dict / file values
    3. Model defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """List of config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Load configuration from a YAML or TOML file.

        Profile overlays named ``{stem}-{profile}{suffix}`` next to *path*
        are merged on top, in the order given.
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigurationException(f"Configuration file not found: {path}", context={"path": str(path)})

        data = cls._load_config_data(path)
        sources = [str(path)]

        for profile in active_profiles or []:
            profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
            if profile_path.is_file():
                data = cls._deep_merge(data, cls._load_config_data(profile_path))
                sources.append(f"{profile_path} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        """Load config data from a YAML or TOML file."""
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    return tomllib.load(f) or {}
            with open(path) as f:
                return yaml.safe_load(f) or {}
        except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationException(f"Cannot parse configuration file {path}: {exc}") from exc

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

    def merge(self, override: dict[str, Any]) -> Config:
        """Return a new Config with *override* merged on top of this one."""
        merged = Config(self._deep_merge(self._data, override))
        merged._loaded_sources = list(self._loaded_sources)
        return merged

    @staticmethod
    def env_key(key: str) -> str:
        """Environment variable name overriding *key*: httpcall.retry-count -> HTTPCALL_RETRY_COUNT."""
        env_base = key.removeprefix("httpcall.") if key.startswith("httpcall.") else key
        return ENV_PREFIX + env_base.upper().replace(".", "_").replace("-", "_")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        Values are returned literally; no placeholder interpolation is done.
        """
        env_val = os.environ.get(self.env_key(key))
        if env_val is not None:
            return env_val

        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict):
                current = current.get(part)
                if current is None:
                    return default
            else:
                return default
        return current

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix as a dict."""
        parts = prefix.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict):
                current = current.get(part, {})
            else:
                return {}
        return current if isinstance(current, dict) else {}

    def bind(self, config_cls: type[M]) -> M:
        """Bind configuration to a @config_properties Pydantic model.

        Scalar fields can be overridden from the environment using the field
        name or its alias (``HTTPCALL_RETRY_COUNT``, ``HTTPCALL_RETRYCOUNT``).
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ConfigurationException(f"{config_cls.__name__} is not decorated with @config_properties")

        section = dict(self.get_section(prefix))
        for name, info in config_cls.model_fields.items():
            key = info.alias or name
            for candidate in (name, key):
                env_val = os.environ.get(self.env_key(f"{prefix}.{candidate}"))
                if env_val is not None:
                    section.pop(name, None)
                    section[key] = env_val
                    break
        try:
            return config_cls.model_validate(section)
        except ValidationError as exc:
            raise ConfigurationException(
                f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}",
                context={"prefix": prefix},
            ) from exc
