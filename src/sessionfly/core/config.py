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
"""Layered configuration for sessionfly.

Values come from, lowest to highest priority:

1. ``sessionfly/resources/sessionfly-defaults.yaml`` shipped with the package
2. a YAML or TOML file (``sessionfly.yaml`` by default)
3. profile overlays beside it, ``sessionfly-<profile>.yaml``, in the order given
4. environment variables: ``sessionfly.session.secret-key`` is overridden by
   ``SESSIONFLY_SESSION_SECRET_KEY``

String values may contain ``${NAME}`` or ``${NAME:default}``, resolved from
the environment when read. Property classes marked with
:func:`config_properties` are populated from one prefix by :meth:`Config.bind`.
"""

from __future__ import annotations

import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, TypeVar, cast

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from sessionfly.kernel.exceptions import ConfigurationException

M = TypeVar("M", bound=BaseModel)

DEFAULTS_RESOURCE = "sessionfly-defaults.yaml"

_PREFIX_ATTR = "__sessionfly_config_prefix__"
_ENV_PLACEHOLDER = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<default>[^}]*))?\}")


def config_properties(prefix: str) -> Callable[[type[M]], type[M]]:
    """Mark a pydantic model as bindable to the configuration under *prefix*.

    Usage:
        @config_properties(prefix="sessionfly.session")
        class SessionProperties(BaseModel):
            cookie_name: str = "_session_id"
    """

    def decorator(cls: type[M]) -> type[M]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_var_name(key: str) -> str:
    """``sessionfly.session.secret-key`` -> ``SESSIONFLY_SESSION_SECRET_KEY``."""
    return re.sub(r"[.\-]", "_", key).upper()


class Config:
    """Read-only view over merged configuration data."""

    def __init__(self, data: dict[str, Any] | None = None, sources: Iterable[str] = ()) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources = list(sources)

    @property
    def loaded_sources(self) -> list[str]:
        """Descriptions of the layers that were merged, lowest priority first."""
        return list(self._sources)

    @classmethod
    def from_file(
        cls,
        path: str | Path | None = None,
        active_profiles: Iterable[str] = (),
        load_defaults: bool = True,
    ) -> Config:
        """Merge the packaged defaults, *path* and its profile overlays.

        A missing *path* is skipped along with its overlays, as are missing
        overlays.
        """
        layers: list[tuple[str, dict[str, Any]]] = []
        if load_defaults:
            layers.append((f"{DEFAULTS_RESOURCE} (defaults)", _read_defaults()))

        if path is not None and Path(path).is_file():
            base = Path(path)
            layers.append((str(base), _read_file(base)))
            for profile in active_profiles:
                overlay = base.with_name(f"{base.stem}-{profile}{base.suffix}")
                if overlay.is_file():
                    layers.append((f"{overlay} (profile: {profile})", _read_file(overlay)))

        merged: dict[str, Any] = {}
        for _, layer in layers:
            merged = _merge(merged, layer)
        return cls(merged, [name for name, _ in layers])

    def get(self, key: str, default: Any = None) -> Any:
        """Value at dot-separated *key*, after env overrides and placeholders."""
        override = os.environ.get(env_var_name(key))
        if override is not None:
            return override

        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]

        if node is None:
            return default
        if isinstance(node, str):
            return _expand(node)
        return node

    def get_section(self, prefix: str) -> dict[str, Any]:
        """The raw mapping under *prefix*, or an empty dict."""
        section = self.get(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, properties_cls: type[M]) -> M:
        """Build *properties_cls* from the values under its prefix.

        Each field ``cookie_name`` is read from ``<prefix>.cookie-name`` (or
        ``<prefix>.cookie_name``) through :meth:`get`, so env overrides and
        placeholders apply. Unset fields keep the model's default.

        Raises:
            ConfigurationException: If the class is not marked with
                :func:`config_properties`, a placeholder cannot be resolved,
                or the values fail validation.
        """
        prefix = getattr(properties_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ConfigurationException(
                f"{properties_cls.__name__} is not decorated with @config_properties",
                code="NOT_BINDABLE",
            )

        values: dict[str, Any] = {}
        for field in properties_cls.model_fields:
            for key in (field.replace("_", "-"), field):
                value = self.get(f"{prefix}.{key}")
                if value is not None:
                    values[field] = value
                    break

        try:
            return properties_cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigurationException(
                f"Invalid configuration under '{prefix}':\n{exc}",
                code="INVALID_CONFIG",
                context={"prefix": prefix},
            ) from exc


def _expand(value: str) -> str:
    def substitute(match: re.Match[str]) -> str:
        name, default = match.group("name"), match.group("default")
        resolved = os.environ.get(name, default)
        if resolved is None:
            raise ConfigurationException(
                f"Environment variable '{name}' is not set and has no default",
                code="UNRESOLVED_PLACEHOLDER",
                context={"name": name},
            )
        return resolved

    return _ENV_PLACEHOLDER.sub(substitute, value)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        merged[key] = _merge(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return merged


def _read_file(path: Path) -> dict[str, Any]:
    try:
        if path.suffix == ".toml":
            return tomllib.loads(path.read_text())
        data = yaml.safe_load(path.read_text()) or {}
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationException(
            f"Cannot parse {path}: {exc}", code="UNREADABLE_CONFIG", context={"path": str(path)}
        ) from exc
    if not isinstance(data, dict):
        raise ConfigurationException(
            f"{path} must contain a mapping at the top level", code="UNREADABLE_CONFIG", context={"path": str(path)}
        )
    return cast(dict[str, Any], data)


def _read_defaults() -> dict[str, Any]:
    resource = importlib.resources.files("sessionfly.resources").joinpath(DEFAULTS_RESOURCE)
    return cast(dict[str, Any], yaml.safe_load(resource.read_text()) or {})
