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

import asyncio
from collections.abc import Iterable
from typing import Optional, Union

from typing_extensions import Self

from gemini_chat.core.configs.client_config import ClientConfig
from gemini_chat.core.configs.params.generation_options import GenerationOptions
from gemini_chat.core.configs.params.remote_params import RemoteParams
from gemini_chat.core.errors import GeminiError
from gemini_chat.core.transport.base_transport import AsyncTransport
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
from gemini_chat.transport.aiohttp_transport import AiohttpTransport
from gemini_chat.utils.image_utils import ImageSource, aload_image


class AsyncGemini(BaseGeminiSession):
    """Non-blocking Gemini chat session.

    Example:
        >>> async with AsyncGemini(api_key, "gemini-1.5-flash") as gemini: # doctest: +SKIP
        ...     reply = await gemini.send_message("Hello!")
        ...     print(reply.text)

    A session is not meant to be shared by concurrent tasks: a conversational
    send issued while another is in flight raises `SessionBusyError`.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: ModelLike = DEFAULT_MODEL,
        *,
        system_instruction: Optional[str] = None,
        options: Optional[GenerationOptions] = None,
        remote_params: Optional[RemoteParams] = None,
        transport: Optional[AsyncTransport] = None,
        history: Optional[Iterable[Turn]] = None,
    ):
        """Initializes the session.

        Args:
            api_key: The credential. See `BaseGeminiSession`.
            model: The model to converse with.
            system_instruction: Optional instruction sent with every request.
            options: Generation options.
            remote_params: Transport parameters. Ignored if `transport` is given.
            transport: Transport to use. Defaults to an `AiohttpTransport`, which
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
        self._transport: AsyncTransport = (
            transport if transport is not None else AiohttpTransport(self._remote_params)
        )

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        api_key: Optional[str] = None,
        transport: Optional[AsyncTransport] = None,
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

    #
    # Single-shot
    #
    async def generate_content(self, turn: Turn) -> GenerationResult:
        """Sends one user turn without any conversation context.

        The history is neither read nor modified.
        """
        payload = self._build_single_shot_payload(turn)
        response = await self._transport.post_json(
            self._generate_content_path, payload, api_key=self._api_key
        )
        return interpret_generate_content_response(response)

    async def send_simple_message(self, text: str) -> str:
        """Sends a single text prompt and returns the reply text.

        The history is neither read nor modified.
        """
        result = await self.generate_content(
            Turn(role=Role.USER, parts=(TextPart(text=text),))
        )
        return result.text

    async def analyze_image(
        self, text: str, image: ImageSource, mime_type: Optional[str] = None
    ) -> str:
        """Sends a prompt with one image and returns the reply text.

        The history is neither read nor modified.

        Raises:
            UnsupportedMediaError: If the image type is not accepted. No request
                is sent in that case.
        """
        if mime_type is not None:
            validate_image_mime_type(mime_type)
        image_bytes, mime_type = await aload_image(image, mime_type)
        result = await self.generate_content(
            self._build_image_turn(text, image_bytes, mime_type)
        )
        return result.text

    #
    # Conversation
    #
    async def send_message(self, message: Union[str, Turn]) -> GenerationResult:
        """Sends a user turn within the conversation.

        The user turn is appended to the history before the request is sent and
        the model turn after a successful reply. If the send fails, the user turn
        is kept and `pending_turn_index` points at it. If the send is cancelled,
        the user turn is removed.

        Raises:
            SessionBusyError: If another send is in flight on this session.
            ConfigurationError: If the message is invalid. The history is
                unchanged in that case.
            TransportError: If the request failed.
            MalformedResponseError: If the reply could not be parsed.
            ContentError: If the reply was blocked or empty.
        """
        with self._exclusive_send():
            staged = self._stage(message)
            try:
                response = await self._transport.post_json(
                    self._generate_content_path, staged.payload, api_key=self._api_key
                )
                return self._commit(staged, response)
            except asyncio.CancelledError:
                self._roll_back(staged)
                raise
            except GeminiError as e:
                self._record_failure(staged, e)
                raise

    async def send_image_message(
        self, text: str, image: ImageSource, mime_type: Optional[str] = None
    ) -> GenerationResult:
        """Sends a prompt with one image within the conversation.

        Args:
            text: The prompt.
            image: Raw bytes, a local file path, or an `http(s)://` URL.
            mime_type: Image MIME type. Guessed from the bytes if omitted.

        Raises:
            UnsupportedMediaError: If the image type is not accepted. Neither the
                history nor the network is touched in that case.
        """
        if mime_type is not None:
            validate_image_mime_type(mime_type)
        image_bytes, mime_type = await aload_image(image, mime_type)
        return await self.send_message(
            self._build_image_turn(text, image_bytes, mime_type)
        )

    #
    # Models
    #
    async def list_models(
        self, page_size: Optional[int] = None, page_token: Optional[str] = None
    ) -> list[ModelDescriptor]:
        """Lists the models available to this session's credential."""
        response = await self._transport.get_json(
            "models",
            api_key=self._api_key,
            params=build_list_models_params(page_size, page_token),
        )
        return interpret_list_models_response(response)

    #
    # Lifecycle
    #
    async def close(self) -> None:
        """Closes the transport if this session created it."""
        if self._owns_transport:
            await self._transport.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()
