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

"""Request building and response interpretation for the Gemini REST API."""

from gemini_chat.protocol.request_builder import (
    ACCEPTED_IMAGE_MIME_TYPES,
    build_generate_content_path,
    build_generate_content_request,
    build_list_models_params,
    validate_image_mime_type,
)
from gemini_chat.protocol.response_interpreter import (
    interpret_generate_content_response,
    interpret_list_models_response,
    raise_for_status,
)

__all__ = [
    "ACCEPTED_IMAGE_MIME_TYPES",
    "build_generate_content_path",
    "build_generate_content_request",
    "build_list_models_params",
    "interpret_generate_content_response",
    "interpret_list_models_response",
    "raise_for_status",
    "validate_image_mime_type",
]
