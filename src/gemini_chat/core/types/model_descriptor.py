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
from typing import Optional, Union

import pydantic
from pydantic.alias_generators import to_camel

from gemini_chat.core.errors import ConfigurationError

_MODEL_RESOURCE_PREFIX = "models/"


class LanguageModel(str, Enum):
    """Well-known Gemini models.

    Any other model name can be passed to a session as a plain string.
    """

    GEMINI_1_0_PRO = "gemini-1.0-pro"
    GEMINI_1_5_PRO = "gemini-1.5-pro"
    GEMINI_1_5_FLASH = "gemini-1.5-flash"
    GEMINI_2_0_FLASH = "gemini-2.0-flash"
    GEMINI_2_5_FLASH = "gemini-2.5-flash"
    GEMINI_2_5_PRO = "gemini-2.5-pro"

    def __str__(self) -> str:
        """Return the model name."""
        return self.value


DEFAULT_MODEL = LanguageModel.GEMINI_1_5_FLASH


class ModelDescriptor(pydantic.BaseModel):
    """Information about a Gemini model, as returned by the listing endpoint."""

    model_config = pydantic.ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    name: str
    """Resource name of the model, e.g. `models/gemini-1.5-flash`."""

    display_name: str = ""
    """Human-readable name of the model, e.g. `Gemini 1.5 Flash`."""

    supported_generation_methods: tuple[str, ...] = ()
    """API methods the model supports, e.g. `generateContent`."""

    input_token_limit: Optional[int] = None
    """Maximum number of input tokens allowed for this model."""

    output_token_limit: Optional[int] = None
    """Maximum number of output tokens available for this model."""

    base_model_id: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None

    @property
    def supports_generate_content(self) -> bool:
        """Whether the model can be used by a chat session."""
        return "generateContent" in self.supported_generation_methods


ModelLike = Union[str, LanguageModel, ModelDescriptor]


def resolve_model_name(model: ModelLike) -> str:
    """Returns the resource name (`models/...`) of a model.

    Raises:
        ConfigurationError: If the model name is empty or the descriptor does
            not support content generation.
    """
    if isinstance(model, ModelDescriptor):
        if model.supported_generation_methods and not model.supports_generate_content:
            raise ConfigurationError(
                f"Model '{model.name}' does not support generateContent.",
                field="model",
            )
        name = model.name
    elif isinstance(model, LanguageModel):
        name = model.value
    elif isinstance(model, str):
        name = model
    else:
        raise ConfigurationError(
            f"Unsupported model type: {type(model).__name__}.", field="model"
        )

    name = name.strip()
    if not name or name == _MODEL_RESOURCE_PREFIX:
        raise ConfigurationError("Model name must not be empty.", field="model")
    if not name.startswith(_MODEL_RESOURCE_PREFIX):
        name = _MODEL_RESOURCE_PREFIX + name
    return name
