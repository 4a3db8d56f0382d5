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
"""odata-client: HTTP endpoint caller for OData services."""

from odata_client.api.service import HeaderNames, HttpMethod, MediaType
from odata_client.caller.basic import BasicEndpointCaller
from odata_client.caller.ports.outbound import EndpointCaller
from odata_client.caller.reader import ResponseResult
from odata_client.config.properties.client import ClientProperties
from odata_client.kernel.exceptions import ErrorKind, ODataClientException

__version__ = "0.1.0"

__all__ = [
    "BasicEndpointCaller",
    "ClientProperties",
    "EndpointCaller",
    "ErrorKind",
    "HeaderNames",
    "HttpMethod",
    "MediaType",
    "ODataClientException",
    "ResponseResult",
    "__version__",
]
