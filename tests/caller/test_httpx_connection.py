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
"""Tests for the httpx connection handle and factory."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from odata_client.caller.adapters.httpx_connection import ConnectionFactory, HttpxConnection
from odata_client.config.properties.client import ClientProperties
from odata_client.kernel.exceptions import ErrorKind, ODataClientException
from odata_client.testing import RecordingLogger

URL = "http://service.local/odata.svc/Products"


class FakeService:
    """MockTransport handler recording requests and replying with a fixed response."""

    def __init__(self, status_code: int = 200, content: bytes = b"", headers: dict[str, str] | None = None) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content, headers=self.headers)


def client_factory(service: FakeService, created: list[httpx.Client]) -> Callable[..., httpx.Client]:
    def build(**options: Any) -> httpx.Client:
        options.pop("proxy", None)
        client = httpx.Client(transport=httpx.MockTransport(service), **options)
        created.append(client)
        return client

    return build


class TestConnectionFactoryOptions:
    def test_direct_connection_has_no_proxy(self):
        factory = ConnectionFactory(timeout=None)
        assert factory.proxy_url is None
        assert "proxy" not in factory.client_options()

    def test_proxy_descriptor_uses_host_and_port(self):
        factory = ConnectionFactory(proxy_host="proxy.local", proxy_port=3128)
        proxy = factory.client_options()["proxy"]
        assert isinstance(proxy, httpx.Proxy)
        assert proxy.url.scheme == "http"
        assert proxy.url.host == "proxy.local"
        assert proxy.url.port == 3128

    def test_proxy_default_port_from_properties(self):
        factory = ConnectionFactory.from_properties(ClientProperties(proxy_host="proxy.local"))
        assert factory.proxy_url == "http://proxy.local:8888"

    def test_timeout_applies_to_connect_and_read(self):
        timeout = ConnectionFactory(timeout=1500).client_options()["timeout"]
        assert timeout.connect == 1.5
        assert timeout.read == 1.5

    def test_unset_timeout_keeps_transport_defaults(self):
        assert "timeout" not in ConnectionFactory(timeout=None).client_options()

    def test_follows_redirects(self):
        assert ConnectionFactory().client_options()["follow_redirects"] is True


class TestConnectionFactoryOpen:
    def test_applies_headers_in_order(self):
        service = FakeService()
        factory = ConnectionFactory(client_factory=client_factory(service, []))
        connection = factory.open(URL, {"Accept": "application/xml", "X-Trace": "1"})
        assert isinstance(connection, HttpxConnection)
        assert connection.headers == [("Accept", "application/xml"), ("X-Trace", "1")]
        assert service.requests == []

    def test_headers_mapping_is_not_mutated(self):
        headers = {"Accept": "application/xml"}
        ConnectionFactory(client_factory=client_factory(FakeService(), [])).open(URL, headers)
        assert headers == {"Accept": "application/xml"}

    def test_none_headers(self):
        connection = ConnectionFactory(client_factory=client_factory(FakeService(), [])).open(URL, None)
        assert connection.headers == []

    def test_unsupported_scheme_fails_to_open(self):
        with pytest.raises(ODataClientException) as exc_info:
            ConnectionFactory().open("ftp://service.local/file", None)
        assert exc_info.value.kind is ErrorKind.CONNECTION_OPEN
        assert isinstance(exc_info.value.cause, httpx.UnsupportedProtocol)

    def test_open_failure_wraps_cause_and_logs_proxy(self):
        cause = httpx.ProxyError("proxy unreachable")

        def failing_factory(**options: Any) -> httpx.Client:
            raise cause

        logger = RecordingLogger()
        factory = ConnectionFactory(proxy_host="proxy.local", proxy_port=3128, logger=logger, client_factory=failing_factory)
        with pytest.raises(ODataClientException, match="Could not open connection to the service endpoint.") as exc_info:
            factory.open(URL, None)
        assert exc_info.value.kind is ErrorKind.CONNECTION_OPEN
        assert exc_info.value.cause is cause
        assert [e.event for e in logger.events] == ["connection_open_failed", "connection_proxy"]
        assert logger.named("connection_proxy")[0].fields == {"proxy_host": "proxy.local", "proxy_port": 3128}

    def test_open_failure_without_proxy_logs_only_error(self):
        def failing_factory(**options: Any) -> httpx.Client:
            raise OSError("no sockets left")

        logger = RecordingLogger()
        with pytest.raises(ODataClientException):
            ConnectionFactory(logger=logger, client_factory=failing_factory).open(URL, None)
        assert [e.event for e in logger.events] == ["connection_open_failed"]


class TestHttpxConnectionExchange:
    def _open(self, service: FakeService, created: list[httpx.Client] | None = None) -> HttpxConnection:
        factory = ConnectionFactory(timeout=2000, client_factory=client_factory(service, created if created is not None else []))
        return factory.open(URL, {"Accept": "application/xml"})

    def test_get_sends_headers(self):
        service = FakeService(200, b"<feed/>")
        connection = self._open(service)
        assert connection.response_code() == 200
        [request] = service.requests
        assert request.method == "GET"
        assert request.headers["Accept"] == "application/xml"
        assert request.content == b""

    def test_input_stream_reads_body(self):
        connection = self._open(FakeService(200, b"<feed/>"))
        assert connection.input_stream().read() == b"<feed/>"

    def test_exchange_happens_once(self):
        service = FakeService(200, b"x")
        connection = self._open(service)
        connection.response_code()
        connection.response_code()
        connection.input_stream()
        assert len(service.requests) == 1

    def test_post_sends_written_body(self):
        service = FakeService(201, b"<entry id='1'/>")
        connection = self._open(service)
        connection.do_output = True
        connection.method = "POST"
        stream = connection.output_stream()
        stream.write(b"<entry/>")
        stream.close()
        assert connection.response_code() == 201
        [request] = service.requests
        assert request.method == "POST"
        assert request.content == b"<entry/>"

    def test_output_requires_do_output(self):
        connection = self._open(FakeService())
        with pytest.raises(OSError, match="Output is not enabled"):
            connection.output_stream()

    def test_no_content_has_no_input_stream(self):
        connection = self._open(FakeService(204))
        assert connection.input_stream() is None

    def test_empty_ok_body_has_empty_stream(self):
        connection = self._open(FakeService(200, b""))
        assert connection.input_stream().read() == b""

    def test_error_status_raises_from_input_stream(self):
        connection = self._open(FakeService(500, b"boom"))
        with pytest.raises(httpx.HTTPStatusError):
            connection.input_stream()

    def test_error_stream_holds_error_body(self):
        connection = self._open(FakeService(404, b"missing"))
        assert connection.response_code() == 404
        assert connection.error_stream().read() == b"missing"

    def test_empty_error_body_has_no_error_stream(self):
        connection = self._open(FakeService(500, b"", headers={"Content-Length": "0"}))
        connection.response_code()
        assert connection.error_stream() is None

    def test_no_error_stream_before_exchange_or_on_success(self):
        connection = self._open(FakeService(200, b"ok"))
        assert connection.error_stream() is None
        connection.response_code()
        assert connection.error_stream() is None

    def test_header_after_exchange_is_rejected(self):
        connection = self._open(FakeService())
        connection.response_code()
        with pytest.raises(RuntimeError):
            connection.set_header("X-Late", "1")


class TestHttpxConnectionDisconnect:
    def test_disconnect_closes_client(self):
        created: list[httpx.Client] = []
        factory = ConnectionFactory(client_factory=client_factory(FakeService(200, b"ok"), created))
        connection = factory.open(URL, None)
        connection.response_code()
        connection.disconnect()
        [client] = created
        assert client.is_closed

    def test_disconnect_is_idempotent(self):
        connection = ConnectionFactory(client_factory=client_factory(FakeService(), [])).open(URL, None)
        connection.disconnect()
        connection.disconnect()

    def test_exchange_after_disconnect_fails(self):
        connection = ConnectionFactory(client_factory=client_factory(FakeService(), [])).open(URL, None)
        connection.disconnect()
        with pytest.raises(OSError, match="already disconnected"):
            connection.response_code()


class TestHttpxConnectionProxyFailure:
    def _open_through_proxy(self, handler: Callable[[httpx.Request], httpx.Response], logger: Any = None) -> HttpxConnection:
        def build(**options: Any) -> httpx.Client:
            options.pop("proxy", None)
            return httpx.Client(transport=httpx.MockTransport(handler), **options)

        factory = ConnectionFactory(proxy_host="proxy.local", proxy_port=3128, logger=logger, client_factory=build)
        return factory.open(URL, None)

    @pytest.mark.parametrize("failure", [httpx.ConnectError, httpx.ConnectTimeout, httpx.ProxyError])
    def test_unreachable_proxy_is_connection_open(self, failure: type[httpx.TransportError]):
        def handler(request: httpx.Request) -> httpx.Response:
            raise failure("proxy unreachable", request=request)

        logger = RecordingLogger()
        connection = self._open_through_proxy(handler, logger)
        with pytest.raises(ODataClientException, match="Could not open connection to the service endpoint.") as exc_info:
            connection.response_code()
        assert exc_info.value.kind is ErrorKind.CONNECTION_OPEN
        assert isinstance(exc_info.value.cause, failure)
        assert exc_info.value.context == {"url": URL, "proxy_url": "http://proxy.local:3128"}
        assert [e.event for e in logger.events] == ["connection_open_failed", "connection_proxy"]

    def test_read_failure_through_proxy_is_not_reclassified(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadError("connection reset", request=request)

        with pytest.raises(httpx.ReadError):
            self._open_through_proxy(handler).response_code()

    def test_direct_connect_failure_propagates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        def build(**options: Any) -> httpx.Client:
            return httpx.Client(transport=httpx.MockTransport(handler), **options)

        connection = ConnectionFactory(client_factory=build).open(URL, None)
        with pytest.raises(httpx.ConnectError):
            connection.response_code()
