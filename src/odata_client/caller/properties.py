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
"""Request property population: merges computed headers over caller headers."""

from __future__ import annotations

from collections.abc import Mapping

from odata_client.api.service import HeaderNames, MediaType


def populate_request_properties(
    request_properties: Mapping[str, str] | None,
    body_length: int,
    content_type: MediaType | None,
    accept_type: MediaType | None,
) -> dict[str, str]:
    """Return a new header dict with Accept, Content-Type and Content-Length merged in.

    The caller's mapping is copied, never mutated, since it may be read-only.
    Accept and Content-Type are set only when given; Content-Length only when
    ``body_length`` is zero or more, so ``-1`` leaves it absent.
    """
    properties: dict[str, str] = dict(request_properties) if request_properties else {}
    if accept_type is not None:
        properties[HeaderNames.ACCEPT] = str(accept_type)
    if content_type is not None:
        properties[HeaderNames.CONTENT_TYPE] = str(content_type)
    if body_length > -1:
        properties[HeaderNames.CONTENT_LENGTH] = str(body_length)
    return properties
