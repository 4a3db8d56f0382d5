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
"""Media types, methods and header names exchanged with an OData service."""

from __future__ import annotations

from enum import Enum


class MediaType(str, Enum):
    """Fixed set of media types the client sends as Content-Type or Accept."""

    XML = "application/xml"
    ATOM_XML = "application/atom+xml"
    ATOM_SVC_XML = "application/atomsvc+xml"
    JSON = "application/json"
    TEXT = "text/plain"
    MULTIPART = "multipart/mixed"

    def __str__(self) -> str:
        return self.value


class HttpMethod(str, Enum):
    """HTTP methods issued by the endpoint caller."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    def __str__(self) -> str:
        return self.value


class HeaderNames:
    """HTTP header names set by the endpoint caller."""

    ACCEPT = "Accept"
    CONTENT_TYPE = "Content-Type"
    CONTENT_LENGTH = "Content-Length"
