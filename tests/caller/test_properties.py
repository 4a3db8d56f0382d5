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
"""Tests for request property population."""

from types import MappingProxyType

from odata_client.api.service import MediaType
from odata_client.caller.properties import populate_request_properties


class TestPopulateRequestProperties:
    def test_caller_mapping_is_not_mutated(self):
        original = {"Authorization": "Bearer t"}
        merged = populate_request_properties(original, 12, MediaType.ATOM_XML, MediaType.XML)
        assert original == {"Authorization": "Bearer t"}
        assert merged is not original

    def test_read_only_mapping_is_accepted(self):
        frozen = MappingProxyType({"X-Trace": "abc"})
        merged = populate_request_properties(frozen, -1, None, MediaType.XML)
        assert merged == {"X-Trace": "abc", "Accept": "application/xml"}
        assert dict(frozen) == {"X-Trace": "abc"}

    def test_none_mapping_yields_new_dict(self):
        assert populate_request_properties(None, -1, None, None) == {}

    def test_empty_mapping_yields_new_dict(self):
        empty: dict[str, str] = {}
        merged = populate_request_properties(empty, 0, None, None)
        assert merged == {"Content-Length": "0"}
        assert empty == {}

    def test_content_length_equals_body_length(self):
        for length in (0, 1, 8, 4096):
            merged = populate_request_properties(None, length, None, None)
            assert merged["Content-Length"] == str(length)

    def test_content_length_absent_for_minus_one(self):
        merged = populate_request_properties({"A": "b"}, -1, MediaType.JSON, MediaType.JSON)
        assert "Content-Length" not in merged

    def test_accept_only_when_given(self):
        merged = populate_request_properties(None, -1, MediaType.JSON, None)
        assert "Accept" not in merged
        assert merged["Content-Type"] == "application/json"

    def test_content_type_only_when_given(self):
        merged = populate_request_properties(None, -1, None, MediaType.ATOM_XML)
        assert "Content-Type" not in merged
        assert merged["Accept"] == "application/atom+xml"

    def test_computed_values_override_caller_values(self):
        merged = populate_request_properties({"Accept": "text/html", "X-Keep": "1"}, 3, None, MediaType.XML)
        assert merged["Accept"] == "application/xml"
        assert merged["X-Keep"] == "1"

    def test_order_is_deterministic(self):
        merged = populate_request_properties({"Z": "1", "A": "2"}, 5, MediaType.TEXT, MediaType.XML)
        assert list(merged) == ["Z", "A", "Accept", "Content-Type", "Content-Length"]
