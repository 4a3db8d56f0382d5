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
"""OData client endpoint caller: one HTTP exchange per call, classified failures."""

from odata_client.caller.adapters.httpx_connection import ConnectionFactory, HttpxConnection
from odata_client.caller.basic import BasicEndpointCaller
from odata_client.caller.classifier import classify_status, classify_transport_failure
from odata_client.caller.ports.outbound import ConnectionFactoryPort, ConnectionPort, EndpointCaller
from odata_client.caller.properties import populate_request_properties
from odata_client.caller.reader import ResponseReader, ResponseResult, drain
from odata_client.caller.sender import RequestSender

__all__ = [
    "BasicEndpointCaller",
    "ConnectionFactory",
    "ConnectionFactoryPort",
    "ConnectionPort",
    "EndpointCaller",
    "HttpxConnection",
    "RequestSender",
    "ResponseReader",
    "ResponseResult",
    "classify_status",
    "classify_transport_failure",
    "drain",
    "populate_request_properties",
]
