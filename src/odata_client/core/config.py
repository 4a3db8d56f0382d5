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
"""Layered client configuration: bundled defaults, YAML/TOML files, ODATA_* env vars."""

from __future__ import annotations

import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, TypeVar, cast

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_PREFIX_ATTR = "__odata_config_prefix__"
_CONFIG_STEM = "odata-client"
_DEFAULTS_FILE = f"{_CONFIG_STEM}-defaults.yaml"
_ENV_PREFIX = "ODATA_"
_MAX_PLACEHOLDER_DEPTH = 10


def config_properties(prefix: str) -> Callable[[type[M]], type[M]]:
    """Mark a Pydantic model as bound to the configuration section at *prefix*.

    Usage:
        @config_properties(prefix="odata.client")
        class ClientProperties(BaseModel):
            proxy_host: str | None = None
    """

    def decorator(cls: type[M]) -> type[M]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_key(key: str) -> str:
    """Environment variable overriding *key*: ``odata.client.proxy_host`` -> ``ODATA_CLIENT_PROXY_HOST``."""
    name = key.upper().replace(".", "_").replace("-", "_")
    return name if name.startswith(_ENV_PREFIX) else _ENV_PREFIX + name


def _read_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with open(path, "rb") as f:
            return tomllib.load(f)
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidates(base_dir: Path, name: str) -> Iterator[Path]:
    for search_dir in (base_dir / "config", base_dir):
        for ext in (".yaml", ".toml"):
            candidate = search_dir / f"{name}{ext}"
            if candidate.is_file():
                yield candidate


class Config:
    """Nested configuration read with dot-notation keys.

    Environment variables win over file values, file values win over the
    bundled defaults. String values may carry ``${ENV_VAR}``,
    ``${other.key}`` or ``${key:default}`` placeholders.
    """

    def __init__(self, data: dict[str, Any] | None = None, sources: list[str] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources = sources or []

    @property
    def loaded_sources(self) -> list[str]:
        """Files merged into this configuration, in merge order."""
        return list(self._sources)

    @classmethod
    def from_sources(
        cls,
        base_dir: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Merge ``odata-client.yaml|toml`` found in *base_dir*/config and *base_dir*.

        Profile overlays ``odata-client-{profile}.yaml|toml`` are merged last,
        in the order the profiles are given.
        """
        base_dir = Path(base_dir)
        data, sources = cls._defaults(load_defaults)
        for candidate in _candidates(base_dir, _CONFIG_STEM):
            data = _merge(data, _read_file(candidate))
            sources.append(str(candidate))
        for profile in active_profiles or []:
            for candidate in _candidates(base_dir, f"{_CONFIG_STEM}-{profile}"):
                data = _merge(data, _read_file(candidate))
                sources.append(f"{candidate} (profile: {profile})")
        return cls(data, sources)

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Load one YAML or TOML file over the bundled defaults."""
        path = Path(path)
        data, sources = cls._defaults(load_defaults)
        if path.is_file():
            data = _merge(data, _read_file(path))
            sources.append(str(path))
        return cls(data, sources)

    @staticmethod
    def _defaults(load: bool) -> tuple[dict[str, Any], list[str]]:
        if not load:
            return {}, []
        resource = importlib.resources.files("odata_client.resources").joinpath(_DEFAULTS_FILE)
        return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}, [f"{_DEFAULTS_FILE} (bundled defaults)"]

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
        return current

    def get(self, key: str, default: Any = None) -> Any:
        """Value at dot-notation *key*, overridden by its ``ODATA_*`` env var."""
        env_value = os.environ.get(env_key(key))
        if env_value is not None:
            return env_value
        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve(value)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Mapping stored under *prefix*, or an empty dict."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def _resolve(self, value: str, depth: int = 0) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Placeholders in '{value}' nest too deeply; check for circular references")

        def replace(match: re.Match[str]) -> str:
            inner = match.group(1)
            ref, _, fallback = inner.partition(":")
            env_value = os.environ.get(ref)
            if env_value is not None:
                return env_value
            found = self._lookup(ref)
            if found is not None:
                text = str(found)
                return self._resolve(text, depth + 1) if "${" in text else text
            if ":" in inner:
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(replace, value)

    def bind(self, model: type[M]) -> M:
        """Validate the section of a ``@config_properties`` model into an instance.

        Each declared field can be overridden by its env var, so
        ``ODATA_CLIENT_PROXY_HOST`` wins over ``odata.client.proxy_host``.
        """
        prefix = getattr(model, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{model.__name__} is not decorated with @config_properties")

        section = dict(self.get_section(prefix))
        for name in model.model_fields:
            value = self.get(f"{prefix}.{name}")
            if value is not None:
                section[name] = value
        try:
            return cast(M, model.model_validate(section))
        except ValidationError as exc:
            raise ValueError(f"Configuration validation failed for '{model.__name__}' (prefix='{prefix}'):\n{exc}") from exc
