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

import math
import os
from dataclasses import dataclass
from typing import Optional

from gemini_chat.core.configs.params.base_params import BaseParams
from gemini_chat.core.errors import ConfigurationError

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/"
"""Base URL of the Gemini REST API."""

GEMINI_API_KEY_ENV_VARNAME = "GEMINI_API_KEY"
"""Default environment variable holding the Gemini API key."""


@dataclass
class RemoteParams(BaseParams):
    """Parameters for the transport talking to the Gemini API.

    These are passed through to the transport adapter untouched; the session
    itself never times out or retries a request.
    """

    api_url: str = GEMINI_API_URL
    """Base URL of the API. Endpoint paths are appended to it."""

    api_key: Optional[str] = None
    """API key to use for authentication."""

    api_key_env_varname: Optional[str] = GEMINI_API_KEY_ENV_VARNAME
    """Name of the environment variable containing the API key.

    Only consulted when no key is given explicitly.
    """

    connection_timeout: float = 300.0
    """Timeout in seconds for a request to the API."""

    max_retries: int = 0
    """Maximum number of retries the transport attempts for retriable failures.

    Connection errors, timeouts, and retriable HTTP statuses (408, 429, 5xx) are
    retried. Defaults to 0: failures are surfaced to the caller immediately.
    """

    retry_backoff_base: float = 1.0
    """Base delay in seconds for exponential backoff between retries."""

    retry_backoff_max: float = 30.0
    """Maximum delay in seconds between retries."""

    def resolve_api_key(self, api_key: Optional[str] = None) -> Optional[str]:
        """Returns the first key found: argument, `api_key`, environment."""
        if api_key is not None:
            return api_key
        if self.api_key is not None:
            return self.api_key
        if self.api_key_env_varname:
            return os.environ.get(self.api_key_env_varname)
        return None

    def __finalize_and_validate__(self) -> None:
        """Validate the remote parameters."""
        if not self.api_url:
            raise ConfigurationError("API URL must not be empty.", field="api_url")
        if not self.api_url.endswith("/"):
            self.api_url = self.api_url + "/"
        if self.connection_timeout <= 0 or not math.isfinite(self.connection_timeout):
            raise ConfigurationError(
                "Connection timeout must be a finite number greater than 0.",
                field="connection_timeout",
            )
        if self.max_retries < 0:
            raise ConfigurationError(
                "Max retries must be greater than or equal to 0.", field="max_retries"
            )
        if self.retry_backoff_base <= 0:
            raise ConfigurationError(
                "Retry backoff base must be greater than 0.",
                field="retry_backoff_base",
            )
        if self.retry_backoff_max < self.retry_backoff_base:
            raise ConfigurationError(
                "Retry backoff max must be greater than or equal to retry backoff base.",
                field="retry_backoff_max",
            )

    def get_retry_delay(self, attempt: int) -> float:
        """Returns the backoff delay in seconds before retry number `attempt`."""
        if attempt <= 0:
            return 0.0
        return min(
            self.retry_backoff_base * (2 ** (attempt - 1)),
            self.retry_backoff_max,
        )
