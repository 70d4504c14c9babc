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

import copy
import threading
import unicodedata
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Optional, Union

from gemini_chat.core.configs.params.generation_options import GenerationOptions
from gemini_chat.core.configs.params.remote_params import RemoteParams
from gemini_chat.core.errors import ConfigurationError, SessionBusyError
from gemini_chat.core.transport.base_transport import TransportResponse
from gemini_chat.core.types.conversation import (
    History,
    InlineImagePart,
    Role,
    TextPart,
    Turn,
)
from gemini_chat.core.types.generation import GenerationResult
from gemini_chat.core.types.model_descriptor import (
    DEFAULT_MODEL,
    ModelLike,
    resolve_model_name,
)
from gemini_chat.protocol.request_builder import (
    build_generate_content_path,
    build_generate_content_request,
    validate_image_mime_type,
)
from gemini_chat.protocol.response_interpreter import (
    interpret_generate_content_response,
)
from gemini_chat.utils.logging import logger

_ALLOWED_CONTROL_CHARACTERS = frozenset("\n\r\t")


def validate_api_key(api_key: Optional[str], env_varname: Optional[str]) -> str:
    """Checks that a credential is present and well-formed.

    Raises:
        ConfigurationError: If the key is missing, empty, or contains
            whitespace or control characters.
    """
    if api_key is None or not api_key.strip():
        hint = (
            f" Pass `api_key` or set the environment variable `{env_varname}`."
            if env_varname
            else " Pass `api_key`."
        )
        raise ConfigurationError(
            "An API key is required to use the Gemini API." + hint, field="api_key"
        )
    if any(c.isspace() or not c.isprintable() for c in api_key):
        raise ConfigurationError(
            "API key must not contain whitespace or control characters.",
            field="api_key",
        )
    return api_key


def _contains_control_characters(text: str) -> bool:
    return any(
        unicodedata.category(c) == "Cc" and c not in _ALLOWED_CONTROL_CHARACTERS
        for c in text
    )


def _to_user_turn(message: Union[str, Turn]) -> Turn:
    if isinstance(message, Turn):
        return message
    if isinstance(message, str):
        return Turn(role=Role.USER, parts=(TextPart(text=message),))
    raise ConfigurationError(
        f"Expected a string or a Turn, got {type(message).__name__}.",
        field="message",
    )


@dataclass(frozen=True)
class _StagedSend:
    """A conversational send whose user turn is already in the history."""

    payload: dict[str, Any]
    previous_length: int


class BaseGeminiSession:
    """State shared by the blocking and non-blocking sessions.

    A session owns its configuration (model, system instruction, generation
    options) and its `History`. All state transitions live here; subclasses only
    decide how the transport call is awaited.

    Conversational sends are two-phase: the user turn is staged into the history
    before the request is sent, and the model turn is committed on success. On
    failure the staged turn stays visible (see `pending_turn_index`) until the
    caller discards it with `rebuild`.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: ModelLike = DEFAULT_MODEL,
        *,
        system_instruction: Optional[str] = None,
        options: Optional[GenerationOptions] = None,
        remote_params: Optional[RemoteParams] = None,
        history: Optional[Iterable[Turn]] = None,
    ):
        """Initializes a session with an empty history.

        Args:
            api_key: The credential. Falls back to `remote_params.api_key`, then
                to the environment variable named by
                `remote_params.api_key_env_varname`.
            model: The model to converse with.
            system_instruction: Optional instruction sent with every request.
            options: Generation options. Defaults to service defaults.
            remote_params: Transport parameters.
            history: Optional turns to seed the conversation with.

        Raises:
            ConfigurationError: If the credential, the model or an option is
                invalid.
        """
        remote_params = copy.deepcopy(remote_params) or RemoteParams()
        remote_params.finalize_and_validate()
        self._remote_params = remote_params
        self._api_key = validate_api_key(
            remote_params.resolve_api_key(api_key), remote_params.api_key_env_varname
        )
        self._model_name = resolve_model_name(model)
        self._system_instruction: Optional[str] = None
        self._options = GenerationOptions()
        self._history = History()
        self._pending_turn_index: Optional[int] = None
        self._send_lock = threading.Lock()

        if system_instruction is not None:
            self.set_system_instruction(system_instruction)
        if options is not None:
            self.set_options(options)
        if history is not None:
            self.start_chat(history)

    #
    # Configuration
    #
    @property
    def model_name(self) -> str:
        """Resource name of the model, e.g. `models/gemini-1.5-flash`."""
        return self._model_name

    @property
    def system_instruction(self) -> Optional[str]:
        """The current system instruction, if any."""
        return self._system_instruction

    @property
    def options(self) -> GenerationOptions:
        """A copy of the current generation options."""
        return copy.deepcopy(self._options)

    def set_system_instruction(self, instruction: Optional[str]) -> None:
        """Replaces the system instruction. Takes effect on the next send.

        Args:
            instruction: The new instruction, or None to clear it.

        Raises:
            ConfigurationError: If the instruction contains control characters
                other than newlines and tabs.
        """
        if instruction is not None:
            if not isinstance(instruction, str):
                raise ConfigurationError(
                    "System instruction must be a string.", field="system_instruction"
                )
            if _contains_control_characters(instruction):
                raise ConfigurationError(
                    "System instruction must not contain control characters.",
                    field="system_instruction",
                )
        self._system_instruction = instruction

    def set_options(self, options: GenerationOptions) -> None:
        """Replaces the generation options atomically.

        Either every field takes effect on the next send, or, if any field is
        invalid, the current options are kept unchanged.

        Raises:
            ConfigurationError: Naming the first invalid field.
        """
        if not isinstance(options, GenerationOptions):
            raise ConfigurationError(
                f"Expected GenerationOptions, got {type(options).__name__}.",
                field="options",
            )
        self._options = options.validated_copy()

    #
    # History
    #
    @property
    def history(self) -> tuple[Turn, ...]:
        """An immutable snapshot of the conversation history."""
        return self._history.snapshot()

    @property
    def pending_turn_index(self) -> Optional[int]:
        """Index of a user turn whose send failed, if it is still in the history."""
        return self._pending_turn_index

    @property
    def has_pending_turn(self) -> bool:
        """Whether the history ends with (or contains) a failed user turn."""
        return self._pending_turn_index is not None

    def rebuild(self, to_index: int) -> None:
        """Truncates the history to its first `to_index` turns.

        Used to discard a failed turn before retrying, or to branch the
        conversation from an earlier point.

        Raises:
            ConfigurationError: If `to_index` is outside `[0, len(history)]`.
        """
        self._history.truncate(to_index)
        if self._pending_turn_index is not None and self._pending_turn_index >= to_index:
            self._pending_turn_index = None

    def start_chat(self, history: Optional[Iterable[Turn]] = None) -> None:
        """Starts a new conversation, optionally seeded with earlier turns.

        Raises:
            ConfigurationError: If the seed turns break the history rules. The
                current history is kept in that case.
        """
        new_history = History(history)
        self._history = new_history
        self._pending_turn_index = None

    #
    # Send helpers used by subclasses
    #
    @property
    def _generate_content_path(self) -> str:
        return build_generate_content_path(self._model_name)

    @contextmanager
    def _exclusive_send(self) -> Iterator[None]:
        # Non-blocking so a concurrent send fails fast instead of queueing.
        if not self._send_lock.acquire(blocking=False):
            raise SessionBusyError(
                "Another send is in flight on this session. "
                "Wait for it to complete before sending again."
            )
        try:
            yield
        finally:
            self._send_lock.release()

    def _build_image_turn(self, text: str, image_bytes: bytes, mime_type: str) -> Turn:
        mime_type = validate_image_mime_type(mime_type)
        return Turn(
            role=Role.USER,
            parts=(
                TextPart(text=text),
                InlineImagePart(data=image_bytes, mime_type=mime_type),
            ),
        )

    def _build_single_shot_payload(self, turn: Turn) -> dict[str, Any]:
        logger.debug(f"Sending single-shot request to {self._model_name}.")
        return build_generate_content_request(
            turn,
            system_instruction=self._system_instruction,
            options=self._options,
        )

    def _stage(self, message: Union[str, Turn]) -> _StagedSend:
        """Builds the request, then appends the user turn to the history."""
        turn = _to_user_turn(message)
        snapshot = self._history.snapshot()
        payload = build_generate_content_request(
            turn,
            history=snapshot,
            system_instruction=self._system_instruction,
            options=self._options,
        )
        if self._pending_turn_index is not None:
            logger.warning(
                f"History still holds a failed user turn at index "
                f"{self._pending_turn_index}. Call rebuild() to discard it."
            )
        self._history.append(turn)
        self._pending_turn_index = len(snapshot)
        logger.debug(
            f"Sending conversation of {len(snapshot) + 1} turns to {self._model_name}."
        )
        return _StagedSend(payload=payload, previous_length=len(snapshot))

    def _commit(self, staged: _StagedSend, response: TransportResponse) -> GenerationResult:
        """Parses the reply and appends the model turn to the history."""
        result = interpret_generate_content_response(response, history=self._history)
        self._pending_turn_index = None
        return result

    def _record_failure(self, staged: _StagedSend, error: Exception) -> None:
        logger.warning(
            f"Send to {self._model_name} failed: {error}. The user turn at index "
            f"{staged.previous_length} is kept; call rebuild("
            f"{staged.previous_length}) to discard it."
        )

    def _roll_back(self, staged: _StagedSend) -> None:
        """Removes the staged user turn, e.g. when the send was cancelled."""
        if len(self._history) > staged.previous_length:
            self._history.truncate(staged.previous_length)
        if (
            self._pending_turn_index is not None
            and self._pending_turn_index >= staged.previous_length
        ):
            self._pending_turn_index = None

    def __repr__(self) -> str:
        """Returns a string representation without the credential."""
        return (
            f"{type(self).__name__}(model={self._model_name!r}, "
            f"turns={len(self._history)})"
        )
