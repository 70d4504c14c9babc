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
import numbers
from dataclasses import dataclass
from typing import Any, Optional

from gemini_chat.core.configs.params.base_params import BaseParams
from gemini_chat.core.errors import ConfigurationError

SUPPORTED_RESPONSE_MIME_TYPES = frozenset({"text/plain", "application/json"})


def _is_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass
class GenerationOptions(BaseParams):
    """Generation options sent with every request of a session.

    Every field defaults to `None`, meaning "use the service default". Fields
    left unset are never serialized into the request.
    """

    temperature: Optional[float] = None
    """Controls the randomness of the output. Must be >= 0."""

    top_p: Optional[float] = None
    """Nucleus sampling probability mass. Must be in [0, 1]."""

    top_k: Optional[int] = None
    """Top-k sampling size. Must be >= 1."""

    max_output_tokens: Optional[int] = None
    """Maximum number of tokens in a candidate. Must be >= 1."""

    stop_sequences: Optional[list[str]] = None
    """Strings that stop generation.

    Treated as a set: duplicates are dropped, first occurrence order is kept.
    """

    candidate_count: Optional[int] = None
    """Number of candidates to generate. Must be >= 1."""

    response_mime_type: Optional[str] = None
    """MIME type of the generated text: `text/plain` or `application/json`."""

    presence_penalty: Optional[float] = None
    """Penalty applied to tokens that already appeared in the response."""

    frequency_penalty: Optional[float] = None
    """Penalty scaled by how many times a token already appeared."""

    seed: Optional[int] = None
    """Seed used for decoding."""

    def is_empty(self) -> bool:
        """Returns True if no option is set."""
        return all(value is None for _, value in self)

    def __finalize_and_validate__(self) -> None:
        """Validates each field, reporting the first invalid one."""
        if self.temperature is not None and not (
            _is_real(self.temperature) and self.temperature >= 0
        ):
            raise ConfigurationError(
                f"temperature must be a finite number >= 0, got {self.temperature!r}.",
                field="temperature",
            )
        if self.top_p is not None and not (
            _is_real(self.top_p) and 0.0 <= self.top_p <= 1.0
        ):
            raise ConfigurationError(
                f"top_p must be in [0, 1], got {self.top_p!r}.", field="top_p"
            )
        for name in ("top_k", "max_output_tokens"):
            value = getattr(self, name)
            if value is not None and not (_is_int(value) and value >= 1):
                raise ConfigurationError(
                    f"{name} must be an integer >= 1, got {value!r}.", field=name
                )
        if self.stop_sequences is not None:
            if not isinstance(
                self.stop_sequences, (list, tuple, set, frozenset)
            ) or not all(isinstance(s, str) and s for s in self.stop_sequences):
                raise ConfigurationError(
                    "stop_sequences must be a collection of non-empty strings, "
                    f"got {self.stop_sequences!r}.",
                    field="stop_sequences",
                )
            self.stop_sequences = list(dict.fromkeys(self.stop_sequences))
        if self.candidate_count is not None and not (
            _is_int(self.candidate_count) and self.candidate_count >= 1
        ):
            raise ConfigurationError(
                f"candidate_count must be an integer >= 1, got {self.candidate_count!r}.",
                field="candidate_count",
            )
        if (
            self.response_mime_type is not None
            and self.response_mime_type not in SUPPORTED_RESPONSE_MIME_TYPES
        ):
            raise ConfigurationError(
                f"response_mime_type must be one of "
                f"{sorted(SUPPORTED_RESPONSE_MIME_TYPES)}, "
                f"got {self.response_mime_type!r}.",
                field="response_mime_type",
            )
        for name in ("presence_penalty", "frequency_penalty"):
            value = getattr(self, name)
            if value is not None and not _is_real(value):
                raise ConfigurationError(
                    f"{name} must be a finite number, got {value!r}.", field=name
                )
        if self.seed is not None and not _is_int(self.seed):
            raise ConfigurationError(
                f"seed must be an integer, got {self.seed!r}.", field="seed"
            )
