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

import base64
from collections.abc import Sequence
from typing import Any, Final, Optional

from gemini_chat.core.configs.params.generation_options import GenerationOptions
from gemini_chat.core.errors import ConfigurationError, UnsupportedMediaError
from gemini_chat.core.types.conversation import (
    ContentPart,
    InlineImagePart,
    Role,
    TextPart,
    Turn,
)

ACCEPTED_IMAGE_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {
        "image/png",
        "image/jpeg",
        "image/webp",
        "image/heic",
        "image/heif",
    }
)
"""Image MIME types the generation endpoint accepts for inline data."""

_GENERATION_CONFIG_KEYS: Final[dict[str, str]] = {
    "temperature": "temperature",
    "top_p": "topP",
    "top_k": "topK",
    "max_output_tokens": "maxOutputTokens",
    "stop_sequences": "stopSequences",
    "candidate_count": "candidateCount",
    "response_mime_type": "responseMimeType",
    "presence_penalty": "presencePenalty",
    "frequency_penalty": "frequencyPenalty",
    "seed": "seed",
}


def validate_image_mime_type(mime_type: Optional[str]) -> str:
    """Checks that an image MIME type is accepted by the service.

    Returns:
        str: The normalized (lower-case) MIME type.

    Raises:
        UnsupportedMediaError: If the MIME type is not accepted.
    """
    normalized = (mime_type or "").strip().lower()
    if normalized == "image/jpg":
        normalized = "image/jpeg"
    if normalized not in ACCEPTED_IMAGE_MIME_TYPES:
        raise UnsupportedMediaError(mime_type, ACCEPTED_IMAGE_MIME_TYPES)
    return normalized


def convert_part_to_api_input(part: ContentPart) -> dict[str, Any]:
    """Converts a content part to its JSON representation."""
    if isinstance(part, TextPart):
        return {"text": part.text}
    elif isinstance(part, InlineImagePart):
        return {
            "inlineData": {
                "mimeType": part.mime_type,
                "data": base64.b64encode(part.data).decode("ascii"),
            }
        }
    raise ConfigurationError(f"Unsupported content part: {type(part).__name__}.")


def convert_turn_to_api_input(turn: Turn) -> dict[str, Any]:
    """Converts a turn to a `Content` JSON object."""
    if turn.role == Role.SYSTEM:
        raise ConfigurationError(
            "System turns cannot be sent as conversation contents.", field="role"
        )
    return {
        "role": turn.role.value,
        "parts": [convert_part_to_api_input(part) for part in turn.parts],
    }


def convert_options_to_api_input(options: GenerationOptions) -> dict[str, Any]:
    """Converts generation options to a `generationConfig` JSON object.

    Only fields that are set are emitted, so unset fields fall back to the
    service defaults.
    """
    generation_config: dict[str, Any] = {}
    for name, value in options:
        if value is None:
            continue
        if name == "stop_sequences":
            value = list(value)
        generation_config[_GENERATION_CONFIG_KEYS[name]] = value
    return generation_config


def build_generate_content_request(
    new_turn: Turn,
    *,
    history: Sequence[Turn] = (),
    system_instruction: Optional[str] = None,
    options: Optional[GenerationOptions] = None,
) -> dict[str, Any]:
    """Builds the body of a `generateContent` request.

    Args:
        new_turn: The user turn being sent.
        history: Earlier turns, sent in their original order before `new_turn`.
        system_instruction: Instruction sent alongside the contents, if set.
        options: Generation options. Only set fields are serialized.

    Returns:
        dict[str, Any]: The JSON-serializable request body.

    Raises:
        ConfigurationError: If `new_turn` is not a user turn, or the history
            contains a system turn.
        UnsupportedMediaError: If an image of `new_turn` has a MIME type the
            service does not accept.
    """
    if new_turn.role != Role.USER:
        raise ConfigurationError(
            f"The new turn must have role '{Role.USER}', got '{new_turn.role}'.",
            field="role",
        )
    for image in new_turn.images:
        validate_image_mime_type(image.mime_type)

    api_input: dict[str, Any] = {
        "contents": [convert_turn_to_api_input(turn) for turn in history]
        + [convert_turn_to_api_input(new_turn)],
    }

    if system_instruction is not None:
        api_input["systemInstruction"] = {"parts": [{"text": system_instruction}]}

    if options is not None:
        generation_config = convert_options_to_api_input(options)
        if generation_config:
            api_input["generationConfig"] = generation_config

    return api_input


def build_generate_content_path(model_name: str) -> str:
    """Returns the endpoint path of `generateContent` for a model resource name."""
    return f"{model_name}:generateContent"


def build_list_models_params(
    page_size: Optional[int] = None, page_token: Optional[str] = None
) -> Optional[dict[str, Any]]:
    """Returns the query parameters of a model listing request, if any."""
    params: dict[str, Any] = {}
    if page_size is not None:
        if page_size < 1:
            raise ConfigurationError(
                "page_size must be greater than or equal to 1.", field="page_size"
            )
        params["pageSize"] = page_size
    if page_token:
        params["pageToken"] = page_token
    return params or None
