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

from collections.abc import Iterable
from typing import Optional, Union

from typing_extensions import Self

from gemini_chat.core.configs.client_config import ClientConfig
from gemini_chat.core.configs.params.generation_options import GenerationOptions
from gemini_chat.core.configs.params.remote_params import RemoteParams
from gemini_chat.core.errors import GeminiError
from gemini_chat.core.transport.base_transport import BlockingTransport
from gemini_chat.core.types.conversation import Role, TextPart, Turn
from gemini_chat.core.types.generation import GenerationResult
from gemini_chat.core.types.model_descriptor import (
    DEFAULT_MODEL,
    ModelDescriptor,
    ModelLike,
)
from gemini_chat.protocol.request_builder import (
    build_list_models_params,
    validate_image_mime_type,
)
from gemini_chat.protocol.response_interpreter import (
    interpret_generate_content_response,
    interpret_list_models_response,
)
from gemini_chat.session.base_session import BaseGeminiSession
from gemini_chat.transport.requests_transport import RequestsTransport
from gemini_chat.utils.image_utils import ImageSource, load_image


class Gemini(BaseGeminiSession):
    """Blocking Gemini chat session.

    Same contract as `AsyncGemini`, except that every call blocks the calling
    thread until the reply arrives.

    Example:
        >>> with Gemini(api_key, "gemini-1.5-flash") as gemini: # doctest: +SKIP
        ...     print(gemini.send_simple_message("Hello!"))
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: ModelLike = DEFAULT_MODEL,
        *,
        system_instruction: Optional[str] = None,
        options: Optional[GenerationOptions] = None,
        remote_params: Optional[RemoteParams] = None,
        transport: Optional[BlockingTransport] = None,
        history: Optional[Iterable[Turn]] = None,
    ):
        """Initializes the session.

        Args:
            api_key: The credential. See `BaseGeminiSession`.
            model: The model to converse with.
            system_instruction: Optional instruction sent with every request.
            options: Generation options.
            remote_params: Transport parameters. Ignored if `transport` is given.
            transport: Transport to use. Defaults to a `RequestsTransport`, which
                the session closes in `close()`.
            history: Optional turns to seed the conversation with.
        """
        super().__init__(
            api_key,
            model,
            system_instruction=system_instruction,
            options=options,
            remote_params=remote_params,
            history=history,
        )
        self._owns_transport = transport is None
        self._transport: BlockingTransport = (
            transport
            if transport is not None
            else RequestsTransport(self._remote_params)
        )

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        api_key: Optional[str] = None,
        transport: Optional[BlockingTransport] = None,
    ) -> Self:
        """Creates a session from a `ClientConfig`."""
        config.finalize_and_validate()
        return cls(
            api_key,
            config.model,
            system_instruction=config.system_instruction,
            options=config.generation,
            remote_params=config.remote,
            transport=transport,
        )

    def generate_content(self, turn: Turn) -> GenerationResult:
        """Sends one user turn without any conversation context."""
        payload = self._build_single_shot_payload(turn)
        response = self._transport.post_json(
            self._generate_content_path, payload, api_key=self._api_key
        )
        return interpret_generate_content_response(response)

    def send_simple_message(self, text: str) -> str:
        """Sends a single text prompt and returns the reply text."""
        result = self.generate_content(
            Turn(role=Role.USER, parts=(TextPart(text=text),))
        )
        return result.text

    def analyze_image(
        self, text: str, image: ImageSource, mime_type: Optional[str] = None
    ) -> str:
        """Sends a prompt with one image and returns the reply text."""
        if mime_type is not None:
            validate_image_mime_type(mime_type)
        image_bytes, mime_type = load_image(image, mime_type)
        result = self.generate_content(
            self._build_image_turn(text, image_bytes, mime_type)
        )
        return result.text

    def send_message(self, message: Union[str, Turn]) -> GenerationResult:
        """Sends a user turn within the conversation.

        See `AsyncGemini.send_message`.
        """
        with self._exclusive_send():
            staged = self._stage(message)
            try:
                response = self._transport.post_json(
                    self._generate_content_path, staged.payload, api_key=self._api_key
                )
                return self._commit(staged, response)
            except GeminiError as e:
                self._record_failure(staged, e)
                raise

    def send_image_message(
        self, text: str, image: ImageSource, mime_type: Optional[str] = None
    ) -> GenerationResult:
        """Sends a prompt with one image within the conversation."""
        if mime_type is not None:
            validate_image_mime_type(mime_type)
        image_bytes, mime_type = load_image(image, mime_type)
        return self.send_message(self._build_image_turn(text, image_bytes, mime_type))

    def list_models(
        self, page_size: Optional[int] = None, page_token: Optional[str] = None
    ) -> list[ModelDescriptor]:
        """Lists the models available to this session's credential."""
        response = self._transport.get_json(
            "models",
            api_key=self._api_key,
            params=build_list_models_params(page_size, page_token),
        )
        return interpret_list_models_response(response)

    def close(self) -> None:
        """Closes the transport if this session created it."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
