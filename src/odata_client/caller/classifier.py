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
"""Maps failing HTTP status codes and transport failures to error kinds."""

from __future__ import annotations

import httpx

from odata_client.kernel.exceptions import ErrorKind, ODataClientException

HTTP_UNAUTHORIZED = 401
HTTP_CLIENT_TIMEOUT = 408

CONNECTION_OPEN_MESSAGE = "Could not open connection to the service endpoint."
SOCKET_MESSAGE = "Could not initiate connection to the endpoint."
PROCESSING_MESSAGE = "Unable to process response from OData service."


def classify_status(status_code: int, message: str) -> ODataClientException:
    """Build the error for a failing response.

    408 is a timeout, 401 is unauthorized, any other positive code is an
    HTTP status error carrying that code, and anything else is generic.
    """
    if status_code == HTTP_CLIENT_TIMEOUT:
        return ODataClientException(message, kind=ErrorKind.TIMEOUT, status_code=status_code)
    if status_code == HTTP_UNAUTHORIZED:
        return ODataClientException(message, kind=ErrorKind.UNAUTHORIZED, status_code=status_code)
    if status_code > 0:
        return ODataClientException(message, kind=ErrorKind.HTTP_STATUS, status_code=status_code)
    return ODataClientException(message, kind=ErrorKind.GENERIC, status_code=status_code)


def classify_transport_failure(exc: BaseException) -> ODataClientException:
    """Build the error for a failure raised below the HTTP level.

    The returned exception is not chained; raise it ``from exc``.
    """
    if isinstance(exc, ODataClientException):
        return exc
    if isinstance(exc, httpx.ProxyError):
        return ODataClientException(CONNECTION_OPEN_MESSAGE, kind=ErrorKind.CONNECTION_OPEN)
    if isinstance(exc, (httpx.NetworkError, ConnectionError)):
        return ODataClientException(SOCKET_MESSAGE, kind=ErrorKind.SOCKET)
    return ODataClientException(PROCESSING_MESSAGE, kind=ErrorKind.GENERIC)
