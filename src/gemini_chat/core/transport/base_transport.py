# Copyright 2025 - Oumi
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

"""Transport adapter contract shared by the blocking and non-blocking clients.

Both variants take the same inputs (HTTP method, endpoint path relative to the
API base URL, credential, optional JSON body and query parameters), return the
same :class:`TransportResponse`, and raise the same
:class:`~gemini_chat.core.errors.TransportError` for network failures. A
non-success HTTP status is *not* an exception at this level: it is returned as
a response and classified by the response interpreter.
"""

import copy
import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from gemini_chat.core.configs.params.remote_params import RemoteParams
from gemini_chat.utils.http import is_success_status_code

API_KEY_HEADER = "x-goog-api-key"
"""Header carrying the credential."""


@dataclass(frozen=True)
class TransportResponse:
    """Raw outcome of an HTTP call."""

    status: int
    """HTTP status code."""

    body: bytes = b""
    """Raw response body."""

    headers: Mapping[str, str] = field(default_factory=dict)
    """Response headers."""

    @property
    def ok(self) -> bool:
        """Whether the status is a 2xx success."""
        return is_success_status_code(self.status)

    def json(self) -> Any:
        """Decodes the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        return json.loads(self.body)


def build_request_headers(api_key: Optional[str]) -> dict[str, str]:
    """Returns the headers sent with every request."""
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers[API_KEY_HEADER] = api_key
    return headers


def _prepare_remote_params(remote_params: Optional[RemoteParams]) -> RemoteParams:
    if remote_params is None:
        remote_params = RemoteParams()
    else:
        remote_params = copy.deepcopy(remote_params)
    remote_params.finalize_and_validate()
    return remote_params


class AsyncTransport(ABC):
    """Non-blocking transport: suspends the calling task during the call."""

    def __init__(self, remote_params: Optional[RemoteParams] = None):
        """Initializes the transport.

        Args:
            remote_params: Base URL, timeout and retry policy.
        """
        self._remote_params = _prepare_remote_params(remote_params)

    @property
    def remote_params(self) -> RemoteParams:
        """Parameters of this transport."""
        return self._remote_params

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        *,
        api_key: Optional[str],
        json_body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> TransportResponse:
        """Performs an HTTP call against `{api_url}{path}`.

        Raises:
            TransportError: If no response could be obtained.
        """
        raise NotImplementedError

    async def post_json(
        self, path: str, payload: dict[str, Any], *, api_key: Optional[str]
    ) -> TransportResponse:
        """POSTs a JSON payload."""
        return await self.request("POST", path, api_key=api_key, json_body=payload)

    async def get_json(
        self,
        path: str,
        *,
        api_key: Optional[str],
        params: Optional[dict[str, Any]] = None,
    ) -> TransportResponse:
        """Performs a GET request."""
        return await self.request("GET", path, api_key=api_key, params=params)

    async def close(self) -> None:
        """Releases resources held by the transport."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()


class BlockingTransport(ABC):
    """Blocking transport: blocks the calling thread during the call."""

    def __init__(self, remote_params: Optional[RemoteParams] = None):
        """Initializes the transport.

        Args:
            remote_params: Base URL, timeout and retry policy.
        """
        self._remote_params = _prepare_remote_params(remote_params)

    @property
    def remote_params(self) -> RemoteParams:
        """Parameters of this transport."""
        return self._remote_params

    @abstractmethod
    def request(
        self,
        method: str,
        path: str,
        *,
        api_key: Optional[str],
        json_body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> TransportResponse:
        """Performs an HTTP call against `{api_url}{path}`.

        Raises:
            TransportError: If no response could be obtained.
        """
        raise NotImplementedError

    def post_json(
        self, path: str, payload: dict[str, Any], *, api_key: Optional[str]
    ) -> TransportResponse:
        """POSTs a JSON payload."""
        return self.request("POST", path, api_key=api_key, json_body=payload)

    def get_json(
        self,
        path: str,
        *,
        api_key: Optional[str],
        params: Optional[dict[str, Any]] = None,
    ) -> TransportResponse:
        """Performs a GET request."""
        return self.request("GET", path, api_key=api_key, params=params)

    def close(self) -> None:
        """Releases resources held by the transport."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
