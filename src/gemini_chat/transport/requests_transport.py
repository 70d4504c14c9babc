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

import time
from typing import Any, Optional

import requests
from typing_extensions import override

from gemini_chat.core.configs.params.remote_params import RemoteParams
from gemini_chat.core.errors import TransportError
from gemini_chat.core.transport.base_transport import (
    BlockingTransport,
    TransportResponse,
    build_request_headers,
)
from gemini_chat.utils.http import is_retriable_status_code
from gemini_chat.utils.logging import logger


class RequestsTransport(BlockingTransport):
    """Blocking transport backed by `requests`."""

    def __init__(
        self,
        remote_params: Optional[RemoteParams] = None,
        *,
        session: Optional[requests.Session] = None,
    ):
        """Initializes the transport.

        Args:
            remote_params: Base URL, timeout and retry policy.
            session: An existing session to use. If omitted, one is created and
                closed by `close()`.
        """
        super().__init__(remote_params)
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    @override
    def request(
        self,
        method: str,
        path: str,
        *,
        api_key: Optional[str],
        json_body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> TransportResponse:
        """Performs an HTTP call, retrying retriable failures.

        Returns the last response once retries are exhausted, even if its status
        is not a success.

        Raises:
            TransportError: If the last attempt failed with a connection error
                or a timeout.
        """
        remote_params = self._remote_params
        url = remote_params.api_url + path
        headers = build_request_headers(api_key)

        for attempt in range(remote_params.max_retries + 1):
            if attempt > 0:
                time.sleep(remote_params.get_retry_delay(attempt))

            try:
                response = self._session.request(
                    method,
                    url,
                    json=json_body,
                    params=params,
                    headers=headers,
                    timeout=remote_params.connection_timeout,
                )
            except requests.exceptions.RequestException as e:
                logger.warning(
                    f"{method} {path} failed (attempt {attempt + 1}): {e!r}"
                )
                if attempt >= remote_params.max_retries:
                    raise TransportError(
                        f"Failed to query API after {attempt + 1} attempts due to "
                        f"connection error: {e!r}",
                        retriable=True,
                    ) from e
                continue

            result = TransportResponse(
                status=response.status_code,
                body=response.content,
                headers=dict(response.headers),
            )
            if is_retriable_status_code(result.status) and (
                attempt < remote_params.max_retries
            ):
                logger.warning(
                    f"{method} {path} returned HTTP {result.status} "
                    f"(attempt {attempt + 1}), retrying."
                )
                continue
            return result

        # Only reached if max_retries is negative, which validation rejects.
        raise TransportError(f"No attempt was made to query {path}.")

    @override
    def close(self) -> None:
        """Closes the session if this transport created it."""
        if self._owns_session:
            self._session.close()
