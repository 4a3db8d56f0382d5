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
"""Guaranteed-release helpers for streams, writers and connections.

A release failure is raised even when a primary failure is already in
flight; the primary failure stays reachable through ``__context__``.
"""

from __future__ import annotations

from typing import Any

import httpx

from odata_client.caller.ports.outbound import ConnectionPort
from odata_client.kernel.exceptions import ErrorKind, ODataClientException


def close_if_necessary(closeable: Any) -> None:
    """Close *closeable* unless it is ``None``."""
    if closeable is None:
        return
    try:
        closeable.close()
    except (OSError, httpx.HTTPError) as exc:
        raise ODataClientException(
            f"Could not close '{type(closeable).__name__}'.",
            kind=ErrorKind.RESOURCE_RELEASE,
        ) from exc


def disconnect(connection: ConnectionPort) -> None:
    """Disconnect *connection*, reporting a failure as a release error."""
    try:
        connection.disconnect()
    except (OSError, httpx.HTTPError) as exc:
        raise ODataClientException(
            f"Could not disconnect from '{connection.url}'.",
            kind=ErrorKind.RESOURCE_RELEASE,
        ) from exc
