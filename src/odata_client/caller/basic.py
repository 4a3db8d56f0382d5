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
"""BasicEndpointCaller: GET, POST, PUT and DELETE against an OData service."""

from __future__ import annotations

import io
from collections.abc import Mapping
from typing import Any, BinaryIO

import httpx
import structlog

from odata_client.api.service import HttpMethod, MediaType
from odata_client.caller.adapters.httpx_connection import ConnectionFactory
from odata_client.caller.ports.outbound import ConnectionFactoryPort, ConnectionPort
from odata_client.caller.properties import populate_request_properties
from odata_client.caller.reader import ResponseReader
from odata_client.caller.release import disconnect
from odata_client.caller.sender import RequestSender, body_length
from odata_client.config.properties.client import ClientProperties
from odata_client.core.config import Config
from odata_client.kernel.exceptions import ErrorKind, ODataClientException
from odata_client.logging.port import LoggingPort


class _ConnectionStream(io.BufferedReader):
    """Response body stream that disconnects its connection when closed."""

    def __init__(self, raw: BinaryIO, connection: ConnectionPort) -> None:
        super().__init__(raw)  # type: ignore[arg-type]
        self._connection = connection

    def close(self) -> None:
        if self.closed:
            return
        try:
            super().close()
        finally:
            disconnect(self._connection)


class BasicEndpointCaller:
    """Endpoint caller performing one blocking HTTP exchange per call.

    Usage:
        caller = BasicEndpointCaller.from_config(Config.from_file("odata-client.yaml"))
        xml = caller.call_endpoint({"Authorization": token}, "http://host/odata.svc/Products")

    The only state shared between calls is the immutable configuration, so
    one instance may be used from several threads at once.
    """

    def __init__(
        self,
        properties: ClientProperties | None = None,
        *,
        logger: Any = None,
        connection_factory: ConnectionFactoryPort | None = None,
    ) -> None:
        self._properties = properties if properties is not None else ClientProperties()
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._connections: ConnectionFactoryPort = (
            connection_factory
            if connection_factory is not None
            else ConnectionFactory.from_properties(self._properties, logger=self._logger)
        )
        self._sender = RequestSender(self._logger)
        self._reader = ResponseReader(self._logger)
        self._log_configuration()

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        logging_port: LoggingPort | None = None,
        **kwargs: Any,
    ) -> BasicEndpointCaller:
        """Create a caller bound to the ``odata.client`` section of *config*.

        When *logging_port* is given it is configured from *config* and
        supplies the caller's logger.
        """
        if logging_port is not None:
            logging_port.configure(config)
            kwargs.setdefault("logger", logging_port.get_logger(__name__, component="endpoint_caller"))
        return cls(config.bind(ClientProperties), **kwargs)

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any] | None, **kwargs: Any) -> BasicEndpointCaller:
        """Create a caller from flat ``ConnectionTimeout`` / ``ServiceProxy*`` keys."""
        return cls(ClientProperties.from_properties(properties), **kwargs)

    @property
    def properties(self) -> ClientProperties:
        return self._properties

    def call_endpoint(self, request_properties: Mapping[str, str] | None, url: str) -> str:
        """GET *url* accepting XML and return the drained response body."""
        self._logger.debug("endpoint_call_prepared", url=str(url))
        headers = populate_request_properties(request_properties, -1, None, MediaType.XML)
        connection = self._connections.open(url, headers)
        return self._reader.read(connection).text

    def get_input_stream(self, request_properties: Mapping[str, str] | None, url: str) -> BinaryIO:
        """GET *url* and return the live response body stream.

        The caller owns the stream; closing it disconnects the connection.
        """
        connection = self._connections.open(url, request_properties)
        try:
            stream = connection.input_stream()
        except ODataClientException:
            disconnect(connection)
            raise
        except (httpx.HTTPError, OSError) as exc:
            disconnect(connection)
            raise ODataClientException(
                f"Unable to get connection input stream for url: {url}",
                kind=ErrorKind.GENERIC,
                context={"url": str(url)},
            ) from exc
        return _ConnectionStream(stream if stream is not None else io.BytesIO(), connection)

    def do_post_entity(
        self,
        request_properties: Mapping[str, str] | None,
        url: str,
        body: str,
        content_type: MediaType,
        accept_type: MediaType,
    ) -> str:
        """POST *body* and return the drained response body."""
        headers = populate_request_properties(request_properties, body_length(body), content_type, accept_type)
        return self._send_request(headers, url, body, HttpMethod.POST)

    def do_put_entity(
        self,
        request_properties: Mapping[str, str] | None,
        url: str,
        body: str,
        media_type: MediaType,
    ) -> str:
        """PUT *body*, using *media_type* as both Content-Type and Accept."""
        headers = populate_request_properties(request_properties, body_length(body), media_type, media_type)
        return self._send_request(headers, url, body, HttpMethod.PUT)

    def do_delete_entity(self, request_properties: Mapping[str, str] | None, url: str) -> None:
        """DELETE the entity at *url*."""
        headers = populate_request_properties(request_properties, 0, MediaType.ATOM_XML, MediaType.ATOM_XML)
        self._send_request(headers, url, "", HttpMethod.DELETE)

    def _send_request(self, headers: dict[str, str], url: str, body: str, method: HttpMethod) -> str:
        connection = self._connections.open(url, headers)
        try:
            self._sender.send(connection, body, method)
        except Exception:
            disconnect(connection)
            raise
        return self._reader.read(connection).text

    def _log_configuration(self) -> None:
        config_log: dict[str, Any] = {"timeout": self._properties.timeout}
        if self._properties.proxy_host is not None:
            config_log["proxy_host"] = self._properties.proxy_host
            config_log["proxy_port"] = self._properties.proxy_port
        self._logger.debug("endpoint_caller_initialized", **config_log)