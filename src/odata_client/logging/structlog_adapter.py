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
"""StructlogAdapter: default LoggingPort implementation using structlog.

Reads the ``odata.logging`` section:

    odata:
      logging:
        format: console        # or json
        transport: WARNING     # level of the httpx / httpcore loggers
        level:
          root: INFO
          odata_client.caller: DEBUG
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from odata_client.core.config import Config

TRANSPORT_LOGGERS = ("httpx", "httpcore")

_RENDERERS: dict[str, Any] = {
    "console": structlog.dev.ConsoleRenderer,
    "json": structlog.processors.JSONRenderer,
}


def _level_number(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


class StructlogAdapter:
    """Structured logging for the endpoint caller, rendered through stdlib logging."""

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._transport_level: str = "WARNING"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        """Apply the odata.logging section of *config*.

        Raises ValueError for a format other than ``console`` or ``json``.
        """
        fmt = str(config.get("odata.logging.format", "console")).lower()
        if fmt not in _RENDERERS:
            raise ValueError(f"Unsupported log format '{fmt}', expected one of {sorted(_RENDERERS)}")

        level_section = dict(config.get_section("odata.logging.level"))
        self._root_level = str(level_section.pop("root", "INFO")).upper()
        self._module_levels = {k: str(v).upper() for k, v in level_section.items()}
        self._transport_level = str(config.get("odata.logging.transport", "WARNING")).upper()
        self._format = fmt

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                _RENDERERS[fmt](),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_level_number(self._root_level), force=True)

        for name in TRANSPORT_LOGGERS:
            self.set_level(name, self._transport_level)
        for module, level in self._module_levels.items():
            self.set_level(module, level)

    def get_logger(self, name: str, **context: Any) -> Any:
        """Get a structlog logger by name, with *context* bound to every event."""
        logger = structlog.get_logger(name)
        return logger.bind(**context) if context else logger

    def set_level(self, name: str, level: str) -> None:
        """Set the level of one stdlib logger; unknown level names mean INFO."""
        logging.getLogger(name).setLevel(_level_number(level))
