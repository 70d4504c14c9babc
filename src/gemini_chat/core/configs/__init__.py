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

"""Configuration classes of the gemini_chat library.

- :class:`~gemini_chat.core.configs.client_config.ClientConfig`
- :class:`~gemini_chat.core.configs.params.generation_options.GenerationOptions`
- :class:`~gemini_chat.core.configs.params.remote_params.RemoteParams`
"""

from gemini_chat.core.configs.base_config import BaseConfig
from gemini_chat.core.configs.client_config import ClientConfig
from gemini_chat.core.configs.params.base_params import BaseParams
from gemini_chat.core.configs.params.generation_options import GenerationOptions
from gemini_chat.core.configs.params.remote_params import RemoteParams

__all__ = [
    "BaseConfig",
    "BaseParams",
    "ClientConfig",
    "GenerationOptions",
    "RemoteParams",
]
