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

from dataclasses import dataclass, field
from typing import Optional

from gemini_chat.core.configs.base_config import BaseConfig
from gemini_chat.core.configs.params.generation_options import GenerationOptions
from gemini_chat.core.configs.params.remote_params import RemoteParams
from gemini_chat.core.errors import ConfigurationError
from gemini_chat.core.types.model_descriptor import DEFAULT_MODEL


@dataclass
class ClientConfig(BaseConfig):
    """Everything needed to construct a session, loadable from YAML.

    Example:
        .. code-block:: yaml

            model: gemini-1.5-flash
            system_instruction: "You are a terse assistant."
            generation:
              temperature: 0.2
              max_output_tokens: 128
            remote:
              connection_timeout: 60
    """

    model: str = DEFAULT_MODEL.value
    """Name of the model to converse with, e.g. `gemini-1.5-flash`."""

    system_instruction: Optional[str] = None
    """Instruction sent with every request of the session."""

    generation: GenerationOptions = field(default_factory=GenerationOptions)
    """Generation options of the session."""

    remote: RemoteParams = field(default_factory=RemoteParams)
    """Transport parameters, including the API key or its environment variable."""

    def __finalize_and_validate__(self) -> None:
        if not self.model or not self.model.strip():
            raise ConfigurationError("Model name must not be empty.", field="model")
