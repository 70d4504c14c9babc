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
from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Annotated, Literal, Optional, Union, overload

import pydantic

from gemini_chat.core.errors import ConfigurationError


class Role(str, Enum):
    """Role of the entity a turn is attributed to."""

    USER = "user"
    """Represents a turn written by the caller."""

    MODEL = "model"
    """Represents a turn generated by the model."""

    SYSTEM = "system"
    """Represents a system instruction. Never stored in a `History`."""

    def __str__(self) -> str:
        """Return the string value of the Role enum."""
        return self.value


class TextPart(pydantic.BaseModel):
    """A text sub-part of a turn."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    """Discriminator of the `ContentPart` variant."""

    text: str
    """The text content."""

    def __repr__(self) -> str:
        """Returns the text itself."""
        return self.text


class InlineImagePart(pydantic.BaseModel):
    """An image sub-part of a turn, transmitted inline as base64."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: Literal["inline_image"] = "inline_image"
    """Discriminator of the `ContentPart` variant."""

    data: bytes
    """Raw image bytes."""

    mime_type: str
    """MIME type of the image, e.g. `image/png`."""

    @pydantic.field_serializer("data")
    def _encode_data(self, value: bytes) -> str:
        """Encode image bytes as base64 ASCII string.

        This is needed for compatibility with JSON.
        """
        return base64.b64encode(value).decode("ascii")

    @pydantic.field_validator("data", mode="before")
    @classmethod
    def _decode_data(cls, value: Union[str, bytes]) -> bytes:
        if isinstance(value, str):
            return base64.b64decode(value)
        return value

    def __init__(self, **data) -> None:
        """Initializes the part and rejects empty images.

        Raises:
            ConfigurationError: If no image bytes or MIME type are given.
        """
        super().__init__(**data)
        if len(self.data) == 0:
            raise ConfigurationError("No image bytes in inline image part.")
        if not self.mime_type:
            raise ConfigurationError(
                "MIME type is required for inline image parts.", field="mime_type"
            )

    def __repr__(self) -> str:
        """Returns a placeholder naming the image type."""
        return f"<{self.mime_type.upper()}>"


ContentPart = Annotated[
    Union[TextPart, InlineImagePart], pydantic.Field(discriminator="kind")
]
"""One part of a turn: either text or an inline image."""


class Turn(pydantic.BaseModel):
    """One message of a conversation: a role and one or more content parts."""

    model_config = pydantic.ConfigDict(frozen=True)

    role: Role
    """The role the turn is attributed to."""

    parts: tuple[ContentPart, ...]
    """Ordered content parts. At least one part is required."""

    def __init__(self, **data) -> None:
        """Initializes the turn and rejects turns without parts."""
        super().__init__(**data)
        if len(self.parts) == 0:
            raise ConfigurationError(
                f"A turn must have at least one part (role: {self.role}).",
                field="parts",
            )

    @classmethod
    def user(
        cls,
        text: str,
        image: Optional[bytes] = None,
        mime_type: Optional[str] = None,
    ) -> "Turn":
        """Creates a user turn with a text part and an optional image part."""
        parts: list[Union[TextPart, InlineImagePart]] = [TextPart(text=text)]
        if image is not None:
            parts.append(InlineImagePart(data=image, mime_type=mime_type or ""))
        return cls(role=Role.USER, parts=tuple(parts))

    @classmethod
    def model(cls, text: str) -> "Turn":
        """Creates a model turn with a single text part."""
        return cls(role=Role.MODEL, parts=(TextPart(text=text),))

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))

    @property
    def images(self) -> list[InlineImagePart]:
        """All inline image parts, in order."""
        return [part for part in self.parts if isinstance(part, InlineImagePart)]

    def contains_images(self) -> bool:
        """Checks if the turn contains at least one image."""
        return any(isinstance(part, InlineImagePart) for part in self.parts)

    def __repr__(self) -> str:
        """Returns a string representation of the turn."""
        return f"{self.role.upper()}: " + " | ".join(repr(p) for p in self.parts)


class History:
    """Ordered, append-only transcript of turns owned by a session.

    `truncate` is the only operation that removes turns. A model turn may never
    directly follow another model turn, and system turns are not stored: the
    system instruction is configured separately on the session.
    """

    def __init__(self, turns: Optional[Iterable[Turn]] = None):
        self._turns: list[Turn] = []
        for turn in turns or ():
            self.append(turn)

    def append(self, turn: Turn) -> None:
        """Adds a turn to the tail of the history.

        Raises:
            ConfigurationError: If the turn would break the alternation rules.
        """
        if not isinstance(turn, Turn):
            raise ConfigurationError(f"Expected a Turn, got {type(turn).__name__}.")
        if turn.role == Role.SYSTEM:
            raise ConfigurationError(
                "System turns cannot be added to the history. "
                "Set a system instruction instead.",
                field="role",
            )
        if turn.role == Role.MODEL and self._turns and self._turns[-1].role == Role.MODEL:
            raise ConfigurationError(
                "A model turn cannot directly follow another model turn.",
                field="role",
            )
        self._turns.append(turn)

    def truncate(self, to_index: int) -> None:
        """Discards all turns at or after `to_index`.

        Raises:
            ConfigurationError: If `to_index` is outside `[0, len(self)]`.
        """
        if isinstance(to_index, bool) or not isinstance(to_index, int):
            raise ConfigurationError(
                f"History index must be an integer, got {to_index!r}.",
                field="to_index",
            )
        if not 0 <= to_index <= len(self._turns):
            raise ConfigurationError(
                f"History index {to_index} is out of range [0, {len(self._turns)}].",
                field="to_index",
            )
        del self._turns[to_index:]

    def snapshot(self) -> tuple[Turn, ...]:
        """Returns an immutable ordered view of the history."""
        return tuple(self._turns)

    def __len__(self) -> int:
        """Returns the number of turns."""
        return len(self._turns)

    @overload
    def __getitem__(self, idx: int) -> Turn: ...

    @overload
    def __getitem__(self, idx: slice) -> tuple[Turn, ...]: ...

    def __getitem__(self, idx):
        """Gets the turn (or turns, for a slice) at the specified index."""
        if isinstance(idx, slice):
            return tuple(self._turns[idx])
        return self._turns[idx]

    def __iter__(self) -> Iterator[Turn]:
        """Iterates over a snapshot of the turns."""
        return iter(self.snapshot())

    def __repr__(self) -> str:
        """Returns a string representation of the history."""
        return "\n".join(repr(turn) for turn in self._turns)
