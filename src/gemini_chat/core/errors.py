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

"""Exceptions raised by the Gemini client.

Errors fall into four families:

- :class:`ConfigurationError`: detected locally, before any request is sent.
- :class:`TransportError`: the request could not be delivered, or the service
  answered with a non-success HTTP status.
- :class:`ContentError`: the service answered, but produced no usable candidate
  (e.g. the prompt or the reply was blocked by safety filtering).
- :class:`MalformedResponseError`: the reply does not match the expected schema.
"""

from typing import Optional


class GeminiError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(GeminiError, ValueError):
    """Invalid credential, option, or input. Never retried automatically."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
        """Name of the offending field, if the error is about a single field."""


class SessionBusyError(ConfigurationError):
    """A send was issued while another send on the same session is in flight."""


class UnsupportedMediaError(ConfigurationError):
    """An image was attached with a MIME type the service does not accept."""

    def __init__(self, mime_type: Optional[str], accepted: frozenset[str]):
        super().__init__(
            f"Unsupported image MIME type: '{mime_type}'. "
            f"Accepted types: {', '.join(sorted(accepted))}.",
            field="mime_type",
        )
        self.mime_type = mime_type


class TransportError(GeminiError):
    """Network failure or non-success HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        retriable: bool = False,
    ):
        super().__init__(message)
        self.status_code = status_code
        """HTTP status code, or None if no response was received."""
        self.retriable = retriable
        """Whether retrying the same request later may succeed."""

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is None:
            return message
        return f"HTTP {self.status_code}: {message}"


class ContentError(GeminiError):
    """Well-formed response without a usable candidate."""

    def __init__(
        self,
        message: str,
        *,
        block_reason: Optional[str] = None,
        finish_reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.block_reason = block_reason
        """Why the prompt was blocked, if reported by the service."""
        self.finish_reason = finish_reason
        """Why the first candidate stopped, if reported by the service."""


class MalformedResponseError(GeminiError):
    """Response body does not match the expected schema."""
