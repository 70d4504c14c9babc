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

from enum import Enum
from typing import Final, Optional, Union

import pydantic
from pydantic.alias_generators import to_camel

from gemini_chat.core.errors import ContentError
from gemini_chat.core.types.conversation import ContentPart, Role, TextPart, Turn


class FinishReason(str, Enum):
    """Why the model stopped generating tokens for a candidate."""

    FINISH_REASON_UNSPECIFIED = "FINISH_REASON_UNSPECIFIED"
    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    RECITATION = "RECITATION"
    LANGUAGE = "LANGUAGE"
    OTHER = "OTHER"
    BLOCKLIST = "BLOCKLIST"
    PROHIBITED_CONTENT = "PROHIBITED_CONTENT"
    SPII = "SPII"
    MALFORMED_FUNCTION_CALL = "MALFORMED_FUNCTION_CALL"


BLOCKING_FINISH_REASONS: Final[frozenset[str]] = frozenset(
    {
        FinishReason.SAFETY.value,
        FinishReason.RECITATION.value,
        FinishReason.LANGUAGE.value,
        FinishReason.OTHER.value,
        FinishReason.BLOCKLIST.value,
        FinishReason.PROHIBITED_CONTENT.value,
        FinishReason.SPII.value,
        FinishReason.MALFORMED_FUNCTION_CALL.value,
    }
)
"""Finish reasons that mean the candidate was filtered rather than completed."""


class BlockReason(str, Enum):
    """Why the prompt was blocked."""

    BLOCK_REASON_UNSPECIFIED = "BLOCK_REASON_UNSPECIFIED"
    SAFETY = "SAFETY"
    OTHER = "OTHER"
    BLOCKLIST = "BLOCKLIST"
    PROHIBITED_CONTENT = "PROHIBITED_CONTENT"

    def __str__(self) -> str:
        """Return the wire value."""
        return self.value

    @classmethod
    def from_wire(cls, value: str) -> Union["BlockReason", str]:
        """Returns the matching member, or `value` unchanged if it is unknown."""
        try:
            return cls(value)
        except ValueError:
            return value


class _ApiModel(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SafetyRating(_ApiModel):
    """Harm probability of a piece of content in one harm category."""

    category: str
    probability: Optional[str] = None
    blocked: Optional[bool] = None


class UsageMetadata(_ApiModel):
    """Token usage of a generation request."""

    prompt_token_count: int = 0
    cached_content_token_count: Optional[int] = None
    candidates_token_count: int = 0
    total_token_count: int = 0


class Candidate(pydantic.BaseModel):
    """One alternative reply returned by the service."""

    model_config = pydantic.ConfigDict(frozen=True)

    index: int
    """Position of the candidate in the response."""

    parts: tuple[ContentPart, ...] = ()
    """Text and inline image parts of the reply, in order. May be empty."""

    finish_reason: Optional[str] = None
    """Why the model stopped generating, e.g. `STOP` or `SAFETY`."""

    safety_ratings: tuple[SafetyRating, ...] = ()
    token_count: Optional[int] = None

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))

    @property
    def is_blocked(self) -> bool:
        """Whether the candidate was stopped by a content filter."""
        return self.finish_reason in BLOCKING_FINISH_REASONS

    def to_turn(self) -> Turn:
        """Converts the candidate to a model turn.

        Raises:
            ContentError: If the candidate has no usable parts.
        """
        if not self.parts:
            raise ContentError(
                f"Candidate {self.index} has no text or image content.",
                finish_reason=self.finish_reason,
            )
        return Turn(role=Role.MODEL, parts=self.parts)


class GenerationResult(pydantic.BaseModel):
    """Outcome of a successful generation request."""

    model_config = pydantic.ConfigDict(frozen=True)

    turn: Turn
    """The model turn built from the first candidate."""

    candidates: tuple[Candidate, ...]
    """All candidates returned by the service, in order."""

    usage: Optional[UsageMetadata] = None
    model_version: Optional[str] = None

    @property
    def text(self) -> str:
        """Text of the authoritative (first) candidate."""
        return self.turn.text

    @property
    def finish_reason(self) -> Optional[str]:
        """Finish reason of the authoritative (first) candidate."""
        return self.candidates[0].finish_reason
