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

"""Conversational client for the Gemini generative language API.

Sessions:
    - :class:`~gemini_chat.session.async_session.AsyncGemini`: non-blocking session.
    - :class:`~gemini_chat.session.blocking_session.Gemini`: blocking session.

Functions:
    - :func:`~gemini_chat.listing.get_models`: list the available models.
    - :func:`~gemini_chat.listing.get_models_blocking`: blocking version.

Example:
    >>> from gemini_chat import Gemini
    >>> with Gemini("my-api-key", "gemini-1.5-flash") as gemini: # doctest: +SKIP
    ...     gemini.send_message("What is 2+2?").text
    '4'
"""

from gemini_chat.core.configs import ClientConfig, GenerationOptions, RemoteParams
from gemini_chat.core.errors import (
    ConfigurationError,
    ContentError,
    GeminiError,
    MalformedResponseError,
    SessionBusyError,
    TransportError,
    UnsupportedMediaError,
)
from gemini_chat.core.types import (
    GenerationResult,
    InlineImagePart,
    LanguageModel,
    ModelDescriptor,
    Role,
    TextPart,
    Turn,
)
from gemini_chat.listing import get_models, get_models_blocking
from gemini_chat.session import AsyncGemini, Gemini

__all__ = [
    "AsyncGemini",
    "ClientConfig",
    "ConfigurationError",
    "ContentError",
    "Gemini",
    "GeminiError",
    "GenerationOptions",
    "GenerationResult",
    "get_models",
    "get_models_blocking",
    "InlineImagePart",
    "LanguageModel",
    "MalformedResponseError",
    "ModelDescriptor",
    "RemoteParams",
    "Role",
    "SessionBusyError",
    "TextPart",
    "TransportError",
    "Turn",
    "UnsupportedMediaError",
]
