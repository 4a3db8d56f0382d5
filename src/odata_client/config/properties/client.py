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
"""Endpoint caller configuration properties."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from odata_client.core.config import config_properties

CONNECTION_TIMEOUT = "ConnectionTimeout"
SERVICE_PROXY_HOST_NAME = "ServiceProxyHostName"
SERVICE_PROXY_PORT = "ServiceProxyPort"

TIMEOUT_DEFAULT = 45000
PROXY_PORT_DEFAULT = 8888


@config_properties(prefix="odata.client")
class ClientProperties(BaseModel):
    """Configuration for the endpoint caller (odata.client.*).

    ``timeout`` is in milliseconds and applies to both connect and read.
    ``None`` leaves the transport defaults in place.
    """

    model_config = ConfigDict(frozen=True)

    timeout: int | None = Field(default=TIMEOUT_DEFAULT, ge=0)
    proxy_host: str | None = None
    proxy_port: int = Field(default=PROXY_PORT_DEFAULT, ge=1, le=65535)

    @field_validator("proxy_host", mode="before")
    @classmethod
    def _blank_host_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("proxy_port", mode="before")
    @classmethod
    def _missing_port_is_default(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return PROXY_PORT_DEFAULT
        return value

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any] | None) -> ClientProperties:
        """Build from flat client property keys.

        Reads ``ConnectionTimeout``, ``ServiceProxyHostName`` and
        ``ServiceProxyPort``. Absent or blank values fall back to defaults.
        """
        properties = properties or {}
        return cls(
            timeout=get_integer_property(properties, CONNECTION_TIMEOUT, TIMEOUT_DEFAULT),
            proxy_host=get_string_property(properties, SERVICE_PROXY_HOST_NAME),
            proxy_port=get_integer_property(properties, SERVICE_PROXY_PORT, PROXY_PORT_DEFAULT),
        )


def get_string_property(properties: Mapping[str, Any], name: str) -> str | None:
    """Return the trimmed string value of *name*, or ``None`` when absent or blank."""
    value = properties.get(name)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def get_integer_property(properties: Mapping[str, Any], name: str, default: int | None = None) -> int | None:
    """Return *name* as an int, or *default* when absent or blank.

    Raises ValueError when the value is present but not an integer.
    """
    text = get_string_property(properties, name)
    if text is None:
        return default
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError(f"Property '{name}' must be an integer, got '{text}'") from exc
