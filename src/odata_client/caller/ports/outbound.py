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
"""Outbound ports: the connection handle and endpoint caller interfaces."""

from __future__ import annotations

from collections.abc import Mapping
from typing import BinaryIO, Protocol, runtime_checkable

from odata_client.api.service import MediaType


@runtime_checkable
class ConnectionPort(Protocol):
    """A live, single-use transport resource bound to one request.

    Headers, ``method`` and ``do_output`` are set before any data transfer.
    The exchange happens on the first call to ``response_code()``.
    ``disconnect()`` releases everything the connection holds.
    """

    url: str
    method: str
    do_output: bool

    def set_header(self, name: str, value: str) -> None: ...

    def output_stream(self) -> BinaryIO: ...

    def response_code(self) -> int: ...

    def input_stream(self) -> BinaryIO | None: ...

    def error_stream(self) -> BinaryIO | None: ...

    def disconnect(self) -> None: ...


@runtime_checkable
class ConnectionFactoryPort(Protocol):
    """Opens connections with headers, timeout and proxy applied."""

    def open(self, url: str, headers: Mapping[str, str] | None) -> ConnectionPort: ...


@runtime_checkable
class EndpointCaller(Protocol):
    """One HTTP request/response exchange per call against an OData service."""

    def call_endpoint(self, request_properties: Mapping[str, str] | None, url: str) -> str: ...

    def get_input_stream(self, request_properties: Mapping[str, str] | None, url: str) -> BinaryIO: ...

    def do_post_entity(
        self,
        request_properties: Mapping[str, str] | None,
        url: str,
        body: str,
        content_type: MediaType,
        accept_type: MediaType,
    ) -> str: ...

    def do_put_entity(
        self,
        request_properties: Mapping[str, str] | None,
        url: str,
        body: str,
        media_type: MediaType,
    ) -> str: ...

    def do_delete_entity(self, request_properties: Mapping[str, str] | None, url: str) -> None: ...
