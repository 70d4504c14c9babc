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
import binascii
import json
from typing import Any, Optional, Union

import pydantic
from pydantic.alias_generators import to_camel

from gemini_chat.core.errors import (
    ContentError,
    MalformedResponseError,
    TransportError,
)
from gemini_chat.core.transport.base_transport import TransportResponse
from gemini_chat.core.types.conversation import History, InlineImagePart, TextPart
from gemini_chat.core.types.generation import (
    BlockReason,
    Candidate,
    GenerationResult,
    SafetyRating,
    UsageMetadata,
)
from gemini_chat.core.types.model_descriptor import ModelDescriptor
from gemini_chat.utils.http import (
    get_failure_reason_from_body,
    is_retriable_status_code,
)
from gemini_chat.utils.logging import logger


class _WireModel(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class _WireInlineData(_WireModel):
    mime_type: str
    data: str


class _WirePart(_WireModel):
    text: Optional[str] = None
    inline_data: Optional[_WireInlineData] = None
    thought: Optional[bool] = None


class _WireContent(_WireModel):
    role: Optional[str] = None
    parts: list[_WirePart] = []


class _WireCandidate(_WireModel):
    content: Optional[_WireContent] = None
    finish_reason: Optional[str] = None
    safety_ratings: list[SafetyRating] = []
    token_count: Optional[int] = None
    index: Optional[int] = None


class _WirePromptFeedback(_WireModel):
    block_reason: Optional[str] = None
    safety_ratings: list[SafetyRating] = []


class _WireGenerateContentResponse(_WireModel):
    candidates: list[_WireCandidate] = []
    prompt_feedback: Optional[_WirePromptFeedback] = None
    usage_metadata: Optional[UsageMetadata] = None
    model_version: Optional[str] = None


class _WireListModelsResponse(_WireModel):
    models: list[ModelDescriptor] = []
    next_page_token: Optional[str] = None


def raise_for_status(response: TransportResponse) -> None:
    """Raises a `TransportError` if the response status is not a 2xx success."""
    if response.ok:
        return
    raise TransportError(
        get_failure_reason_from_body(response.status, response.body),
        status_code=response.status,
        retriable=is_retriable_status_code(response.status),
    )


def _parse_json_object(response: TransportResponse) -> dict[str, Any]:
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResponseError(
            f"Failed to parse response as JSON. Response text: {response.body[:200]!r}"
        ) from e
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(payload).__name__}."
        )
    return payload


def _validate(model: type[pydantic.BaseModel], payload: dict[str, Any]) -> Any:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise MalformedResponseError(
            f"Response does not match the expected schema: {e}"
        ) from e


def _convert_wire_candidate(position: int, wire: _WireCandidate) -> Candidate:
    parts: list[Union[TextPart, InlineImagePart]] = []
    wire_parts = wire.content.parts if wire.content is not None else []
    for wire_part in wire_parts:
        if wire_part.thought:
            continue
        if wire_part.text is not None:
            parts.append(TextPart(text=wire_part.text))
        elif wire_part.inline_data is not None:
            if not wire_part.inline_data.mime_type:
                raise MalformedResponseError(
                    f"Candidate {position} contains inline data without a MIME type."
                )
            try:
                data = base64.b64decode(wire_part.inline_data.data, validate=True)
            except (binascii.Error, ValueError) as e:
                raise MalformedResponseError(
                    f"Candidate {position} contains invalid base64 image data."
                ) from e
            if data:
                parts.append(
                    InlineImagePart(data=data, mime_type=wire_part.inline_data.mime_type)
                )
        else:
            logger.debug(f"Skipping unsupported part in candidate {position}.")

    return Candidate(
        index=wire.index if wire.index is not None else position,
        parts=tuple(parts),
        finish_reason=wire.finish_reason,
        safety_ratings=tuple(wire.safety_ratings),
        token_count=wire.token_count,
    )


def interpret_generate_content_response(
    response: TransportResponse, *, history: Optional[History] = None
) -> GenerationResult:
    """Parses the reply of a `generateContent` request.

    The first candidate is authoritative: it becomes the model turn. All
    candidates are exposed in order on the result.

    Args:
        response: The raw transport response.
        history: If given, the model turn is appended to it on success. It is
            left untouched on failure.

    Returns:
        GenerationResult: The parsed reply.

    Raises:
        TransportError: If the HTTP status is not a success.
        MalformedResponseError: If the body does not match the expected schema.
        ContentError: If the prompt or the first candidate was blocked, or no
            usable candidate was returned.
    """
    raise_for_status(response)
    wire: _WireGenerateContentResponse = _validate(
        _WireGenerateContentResponse, _parse_json_object(response)
    )

    if wire.prompt_feedback is not None and wire.prompt_feedback.block_reason:
        block_reason = BlockReason.from_wire(wire.prompt_feedback.block_reason)
        raise ContentError(
            f"Prompt was blocked: {block_reason}. Rephrase the prompt.",
            block_reason=block_reason,
        )
    if not wire.candidates:
        raise ContentError("Response contains no candidates.")

    candidates = tuple(
        _convert_wire_candidate(position, candidate)
        for position, candidate in enumerate(wire.candidates)
    )
    first = candidates[0]
    if first.is_blocked:
        raise ContentError(
            f"Candidate was blocked: {first.finish_reason}.",
            finish_reason=first.finish_reason,
        )
    turn = first.to_turn()

    result = GenerationResult(
        turn=turn,
        candidates=candidates,
        usage=wire.usage_metadata,
        model_version=wire.model_version,
    )
    if history is not None:
        history.append(turn)
    return result


def interpret_list_models_response(
    response: TransportResponse,
) -> list[ModelDescriptor]:
    """Parses the reply of a model listing request.

    Raises:
        TransportError: If the HTTP status is not a success.
        MalformedResponseError: If the body does not match the expected schema.
    """
    raise_for_status(response)
    wire: _WireListModelsResponse = _validate(
        _WireListModelsResponse, _parse_json_object(response)
    )
    return list(wire.models)
