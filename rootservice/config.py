"""Service configuration document and the component settings it carries."""

from __future__ import annotations

import copy
import json
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any

ERROR_CODES: dict[int, str] = {}
"""Registry of response codes to their names, filled by ``load_error_config``."""

_MESH_SERVICE_DROPPED = (
    "name",
    "port",
    "app_token",
    "description",
    "service_guid",
    "service_type",
)
_MESH_CONFIG_DROPPED = ("crow", "features")


class ConfigError(ValueError):
    """Raised when the configuration text is invalid or malformed."""


@dataclass(frozen=True)
class DBConfig:
    """Connection settings of the PostgreSQL component."""

    name: str
    host: str
    port: int
    user: str
    password: str = field(repr=False)


def _string(mapping: dict[str, Any], key: str) -> str:
    value = mapping.get(key)
    if not isinstance(value, str):
        raise ConfigError(f"expected string value for {key!r}")
    return value


def _integer(mapping: dict[str, Any], key: str) -> int:
    value = mapping.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"expected integer value for {key!r}")
    return value


def _object(mapping: dict[str, Any], key: str) -> dict[str, Any]:
    value = mapping.get(key)
    if not isinstance(value, dict):
        raise ConfigError(f"expected object value for {key!r}")
    return value


class Config:
    """A parsed JSON configuration with lookups for its known components."""

    def __init__(self, text: str | bytes | None = None) -> None:
        self._text = ""
        self._document: dict[str, Any] = {}
        if text is not None:
            self.set_config(text)

    @property
    def text(self) -> str:
        """The raw text of the current configuration."""
        return self._text

    @property
    def document(self) -> dict[str, Any]:
        """A copy of the parsed configuration document."""
        return copy.deepcopy(self._document)

    def set_config(self, text: str | bytes) -> None:
        """Replace the configuration; on failure the previous one is kept."""
        try:
            document = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ConfigError(f"cannot parse config: {exc}") from exc
        if not isinstance(document, dict):
            raise ConfigError("config root must be a JSON object")
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        self._text = text
        self._document = document

    def _components(self) -> list[dict[str, Any]]:
        components = self._document.get("components")
        if not isinstance(components, list):
            raise ConfigError("config has no 'components' array")
        if not all(isinstance(component, dict) for component in components):
            raise ConfigError("every component must be a JSON object")
        return components

    def _find(self, key: str, value: str) -> dict[str, Any] | None:
        return next(
            (c for c in self._components() if c.get(key) == value),
            None,
        )

    def _endpoint(self, component_name: str) -> str | None:
        component = self._find("name", component_name)
        if component is None:
            return None
        params = _object(component, "parameters")
        return f"http://{_string(params, 'host')}:{_integer(params, 'port')}"

    def load_db_config(self) -> DBConfig | None:
        """Settings of the ``PostgreSQL`` component, or None if absent."""
        component = self._find("name", "PostgreSQL")
        if component is None:
            return None
        params = _object(component, "parameters")
        return DBConfig(
            name=_string(params, "database_name"),
            host=_string(params, "host"),
            port=_integer(params, "port"),
            user=_string(params, "user"),
            password=_string(params, "password"),
        )

    def load_token_config(self) -> str | None:
        """Base URL of the ``Token`` component, or None if absent."""
        return self._endpoint("Token")

    def load_mesh_config(self) -> tuple[str, str] | None:
        """Base URL of the ``Mesh`` component and the registration document.

        The registration document is the ``service`` section without its
        ``crow`` and ``features`` keys, with a ``config`` member holding the
        whole configuration minus the service's identifying keys.
        """
        host = self._endpoint("Mesh")
        if host is None:
            return None
        _object(self._document, "service")

        full = copy.deepcopy(self._document)
        for key in _MESH_SERVICE_DROPPED:
            full["service"].pop(key, None)

        registration = copy.deepcopy(self._document["service"])
        for key in _MESH_CONFIG_DROPPED:
            registration.pop(key, None)
        registration["config"] = full

        text = json.dumps(registration, separators=(",", ":"), ensure_ascii=False)
        return host, text

    def load_error_config(self, codes: MutableMapping[int, str] | None = None) -> bool:
        """Fill ``codes`` from the ``Error code`` component.

        Returns False when there is no such component.
        """
        target = ERROR_CODES if codes is None else codes
        component = self._find("type", "Error code")
        if component is None:
            return False
        errors = _object(component, "parameters").get("error")
        if not isinstance(errors, list):
            raise ConfigError("expected array value for 'error'")
        for entry in errors:
            if not isinstance(entry, dict):
                raise ConfigError("every error entry must be a JSON object")
            target[_integer(entry, "code")] = _string(entry, "name")
        return True