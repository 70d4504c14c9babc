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

"""Value types exchanged with sessions: turns, results and model descriptors."""

from gemini_chat.core.types.conversation import (
    ContentPart,
    History,
    InlineImagePart,
    Role,
    TextPart,
    Turn,
)
from gemini_chat.core.types.generation import (
    BlockReason,
    Candidate,
    FinishReason,
    GenerationResult,
    SafetyRating,
    UsageMetadata,
)
from gemini_chat.core.types.model_descriptor import (
    DEFAULT_MODEL,
    LanguageModel,
    ModelDescriptor,
    ModelLike,
    resolve_model_name,
)

__all__ = [
    "BlockReason",
    "Candidate",
    "ContentPart",
    "DEFAULT_MODEL",
    "FinishReason",
    "GenerationResult",
    "History",
    "InlineImagePart",
    "LanguageModel",
    "ModelDescriptor",
    "ModelLike",
    "resolve_model_name",
    "Role",
    "SafetyRating",
    "TextPart",
    "Turn",
    "UsageMetadata",
]
