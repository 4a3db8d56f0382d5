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
"""httpx-based connection handle and factory."""

from __future__ import annotations

import io
from collections.abc import Callable, Iterator, Mapping
from typing import Any, BinaryIO

import httpx
import structlog

from odata_client.caller.classifier import CONNECTION_OPEN_MESSAGE
from odata_client.config.properties.client import PROXY_PORT_DEFAULT, ClientProperties
from odata_client.kernel.exceptions import ErrorKind, ODataClientException

_BODYLESS_STATUS_CODES = frozenset({204, 304})

# Raised while the transport to the proxy itself is being established.
_PROXY_CONNECT_FAILURES = (httpx.ConnectError, httpx.ConnectTimeout, httpx.ProxyError)


def _has_body(response: httpx.Response) -> bool:
    if response.request.method == "HEAD" or response.status_code < 200:
        return False
    return response.status_code not in _BODYLESS_STATUS_CODES


class _RequestBody(io.BytesIO):
    """Output channel of a connection; keeps its bytes after being closed."""

    def __init__(self) -> None:
        super().__init__()
        self.content = b""

    def close(self) -> None:
        if not self.closed:
            self.content = self.getvalue()
        super().close()


class ResponseStream(io.RawIOBase):
    """Raw, undrained byte stream over a streaming httpx response."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__()
        self._response = response
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._response.close()
        finally:
            super().close()


class HttpxConnection:
    """Connection handle backed by a dedicated ``httpx.Client``.

    Nothing goes over the wire until ``response_code()`` is first called;
    by then headers, method and any request body are fixed. When the
    connection goes through a proxy, failing to reach that proxy raises a
    CONNECTION_OPEN error at that point.
    """

    def __init__(
        self,
        client: httpx.Client,
        url: str,
        *,
        proxy_url: str | None = None,
        logger: Any = None,
    ) -> None:
        self.url = url
        self.proxy_url = proxy_url
        self.method = "GET"
        self.do_output = False
        self._client = client
        self._headers: list[tuple[str, str]] = []
        self._body: _RequestBody | None = None
        self._response: httpx.Response | None = None
        self._disconnected = False
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Request headers in the order they were applied."""
        return list(self._headers)

    def set_header(self, name: str, value: str) -> None:
        if self._response is not None:
            raise RuntimeError("Cannot set a header after the request was sent")
        self._headers.append((name, value))

    def output_stream(self) -> BinaryIO:
        if not self.do_output:
            raise OSError("Output is not enabled on this connection")
        if self._response is not None:
            raise OSError("Cannot write output after the request was sent")
        if self._body is None:
            self._body = _RequestBody()
        return self._body

    def response_code(self) -> int:
        return self._exchange().status_code

    def input_stream(self) -> BinaryIO | None:
        response = self._exchange()
        if response.is_error:
            raise httpx.HTTPStatusError(
                f"Server returned HTTP response code: {response.status_code} for URL: {self.url}",
                request=response.request,
                response=response,
            )
        if not _has_body(response):
            return None
        return io.BufferedReader(ResponseStream(response))

    def error_stream(self) -> BinaryIO | None:
        response = self._response
        if response is None or not response.is_error:
            return None
        if response.headers.get("Content-Length") == "0":
            return None
        return io.BufferedReader(ResponseStream(response))

    def disconnect(self) -> None:
        if self._disconnected:
            return
        self._disconnected = True
        try:
            if self._response is not None:
                self._response.close()
        finally:
            self._client.close()

    def _exchange(self) -> httpx.Response:
        if self._response is None:
            if self._disconnected:
                raise OSError(f"Connection to {self.url} is already disconnected")
            content: bytes | None = None
            if self._body is not None:
                content = self._body.content if self._body.closed else self._body.getvalue()
            request = self._client.build_request(self.method, self.url, headers=self._headers, content=content)
            try:
                self._response = self._client.send(request, stream=True)
            except _PROXY_CONNECT_FAILURES as exc:
                if self.proxy_url is None:
                    raise
                self._logger.error("connection_open_failed", url=self.url, error=str(exc))
                self._logger.info("connection_proxy", proxy_url=self.proxy_url)
                raise ODataClientException(
                    CONNECTION_OPEN_MESSAGE,
                    kind=ErrorKind.CONNECTION_OPEN,
                    context={"url": self.url, "proxy_url": self.proxy_url},
                ) from exc
        return self._response


class ConnectionFactory:
    """Opens ``HttpxConnection`` instances, direct or through an HTTP proxy.

    Args:
        timeout: Connect and read timeout in milliseconds. ``None`` keeps httpx defaults.
        proxy_host: HTTP proxy host. ``None`` means a direct connection.
        proxy_port: HTTP proxy port.
        logger: Structured logger receiving connection events.
        client_factory: Builds the ``httpx.Client``; receives the client options as keywords.
    """

    def __init__(
        self,
        timeout: int | None = None,
        proxy_host: str | None = None,
        proxy_port: int = PROXY_PORT_DEFAULT,
        *,
        logger: Any = None,
        client_factory: Callable[..., httpx.Client] = httpx.Client,
    ) -> None:
        self._timeout = timeout
        self._proxy_host = proxy_host
        self._proxy_port = proxy_port
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._client_factory = client_factory

    @classmethod
    def from_properties(
        cls,
        properties: ClientProperties,
        *,
        logger: Any = None,
        client_factory: Callable[..., httpx.Client] = httpx.Client,
    ) -> ConnectionFactory:
        return cls(
            timeout=properties.timeout,
            proxy_host=properties.proxy_host,
            proxy_port=properties.proxy_port,
            logger=logger,
            client_factory=client_factory,
        )

    @property
    def proxy_url(self) -> str | None:
        """The HTTP proxy URL, or ``None`` for direct connections."""
        if self._proxy_host is None:
            return None
        return f"http://{self._proxy_host}:{self._proxy_port}"

    def client_options(self) -> dict[str, Any]:
        """Keyword options used to build the ``httpx.Client`` of each connection."""
        options: dict[str, Any] = {"follow_redirects": True}
        if self._timeout is not None:
            seconds = self._timeout / 1000
            options["timeout"] = httpx.Timeout(None, connect=seconds, read=seconds)
        if self.proxy_url is not None:
            options["proxy"] = httpx.Proxy(self.proxy_url)
        return options

    def open(self, url: str, headers: Mapping[str, str] | None) -> HttpxConnection:
        """Open a connection to *url* and apply *headers* one at a time, in order."""
        try:
            target = httpx.URL(str(url))
            if target.scheme not in ("http", "https"):
                raise httpx.UnsupportedProtocol(f"Unsupported protocol '{target.scheme}' in URL: {url}")
            client = self._client_factory(**self.client_options())
        except (httpx.InvalidURL, httpx.TransportError, OSError, ValueError) as exc:
            self._logger.error("connection_open_failed", url=str(url), error=str(exc))
            if self._proxy_host is not None:
                self._logger.info("connection_proxy", proxy_host=self._proxy_host, proxy_port=self._proxy_port)
            raise ODataClientException(CONNECTION_OPEN_MESSAGE, kind=ErrorKind.CONNECTION_OPEN) from exc

        connection = HttpxConnection(client, str(url), proxy_url=self.proxy_url, logger=self._logger)
        for name, value in (headers or {}).items():
            connection.set_header(name, value)
        return connection
