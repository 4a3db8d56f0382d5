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
"""Transmits the body of write requests (POST, PUT, DELETE)."""

from __future__ import annotations

import io
from typing import Any

import structlog

from odata_client.caller.ports.outbound import ConnectionPort
from odata_client.caller.release import close_if_necessary
from odata_client.kernel.exceptions import ErrorKind, ODataClientException

BODY_ENCODING = "utf-8"
# Characters UTF-8 cannot carry, such as lone surrogates, are sent as "?".
BODY_ERRORS = "replace"


def body_length(body: str) -> int:
    """Number of bytes *body* occupies on the wire."""
    return len(body.encode(BODY_ENCODING, BODY_ERRORS))


class RequestSender:
    """Writes a UTF-8 encoded body to a connection's output stream."""

    def __init__(self, logger: Any = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    def send(self, connection: ConnectionPort, body: str, method: str) -> None:
        """Send *body* with *method* over *connection*.

        The writer and the output stream are closed on every path, writer
        first. A write failure raises a GENERIC error naming the method; a
        close failure raises a RESOURCE_RELEASE error and takes precedence.
        """
        method_name = str(method)
        connection.do_output = True
        stream = None
        writer = None
        try:
            connection.method = method_name
            stream = connection.output_stream()
            writer = io.TextIOWrapper(stream, encoding=BODY_ENCODING, errors=BODY_ERRORS, newline="", write_through=True)
            writer.write(body)
            writer.flush()
            stream.flush()
        except (OSError, UnicodeError) as exc:
            self._logger.debug("request_write_failed", url=connection.url, method=method_name, error=str(exc))
            raise ODataClientException(
                f"Could not perform {method_name} request.",
                kind=ErrorKind.GENERIC,
                context={"method": method_name, "url": connection.url},
            ) from exc
        finally:
            try:
                close_if_necessary(writer)
            finally:
                close_if_necessary(stream)
