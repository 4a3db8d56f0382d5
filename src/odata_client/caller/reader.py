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
"""Reads, drains and classifies responses, releasing the connection on every path."""

from __future__ import annotations

import io
import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, BinaryIO

import httpx
import structlog

from odata_client.caller.classifier import classify_status, classify_transport_failure
from odata_client.caller.ports.outbound import ConnectionPort
from odata_client.caller.release import close_if_necessary, disconnect

HTTP_BAD_REQUEST = 400

NO_RESPONSE = "No Response."
ERROR_PREFIX = "Unable to get response from OData service: "


@dataclass(frozen=True)
class ResponseResult:
    """Outcome of one exchange: status code, drained text and error flag."""

    status_code: int
    text: str
    is_error: bool


def open_text_reader(stream: BinaryIO) -> io.TextIOWrapper:
    """Decode *stream* as UTF-8 text; malformed bytes become U+FFFD."""
    return io.TextIOWrapper(stream, encoding="utf-8", errors="replace")


def drain(lines: Iterable[str]) -> str:
    """Join *lines* with ``os.linesep`` after every line, including the last."""
    return "".join(line.removesuffix("\n") + os.linesep for line in lines)


class ResponseReader:
    """Turns a connection's response into a ResponseResult or a classified error."""

    def __init__(self, logger: Any = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    def read(self, connection: ConnectionPort) -> ResponseResult:
        """Read the status, drain the body or error stream, then release.

        For status 400 and above the drained text, prefixed with
        ``ERROR_PREFIX``, becomes the message of the raised error. When the
        selected stream is absent the text is ``NO_RESPONSE``. The reader is
        closed and the connection disconnected exactly once on every path.
        """
        reader = None
        try:
            status_code = connection.response_code()
            is_error = status_code >= HTTP_BAD_REQUEST
            stream = connection.error_stream() if is_error else connection.input_stream()
            self._logger.debug("request_completed", url=connection.url, status_code=status_code)

            if stream is not None:
                reader = open_text_reader(stream)
                text = drain(reader)
            else:
                text = NO_RESPONSE

            if is_error:
                raise classify_status(status_code, ERROR_PREFIX + text)

            return ResponseResult(status_code=status_code, text=text, is_error=False)
        except (httpx.HTTPError, OSError) as exc:
            self._logger.debug("response_read_failed", url=connection.url, error=str(exc))
            raise classify_transport_failure(exc) from exc
        finally:
            try:
                close_if_necessary(reader)
            finally:
                disconnect(connection)
