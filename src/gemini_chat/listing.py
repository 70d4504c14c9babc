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

"""Model discovery, independent of any session."""

import copy
from typing import Optional

from gemini_chat.core.configs.params.remote_params import RemoteParams
from gemini_chat.core.transport.base_transport import AsyncTransport, BlockingTransport
from gemini_chat.core.types.model_descriptor import ModelDescriptor
from gemini_chat.protocol.request_builder import build_list_models_params
from gemini_chat.protocol.response_interpreter import interpret_list_models_response
from gemini_chat.session.base_session import validate_api_key
from gemini_chat.transport.aiohttp_transport import AiohttpTransport
from gemini_chat.transport.requests_transport import RequestsTransport
from gemini_chat.utils.logging import logger

_MODELS_PATH = "models"


def _resolve_api_key(
    api_key: Optional[str], remote_params: Optional[RemoteParams]
) -> tuple[str, RemoteParams]:
    remote_params = copy.deepcopy(remote_params) or RemoteParams()
    remote_params.finalize_and_validate()
    api_key = validate_api_key(
        remote_params.resolve_api_key(api_key), remote_params.api_key_env_varname
    )
    return api_key, remote_params


async def get_models(
    api_key: Optional[str] = None,
    *,
    remote_params: Optional[RemoteParams] = None,
    transport: Optional[AsyncTransport] = None,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
) -> list[ModelDescriptor]:
    """Lists the models available to a credential.

    Args:
        api_key: The credential. Falls back to `remote_params` and the
            environment.
        remote_params: Transport parameters. Ignored if `transport` is given.
        transport: Transport to use. A temporary `AiohttpTransport` is created
            and closed if omitted.
        page_size: Maximum number of models to return.
        page_token: Token of the page to return.

    Returns:
        list[ModelDescriptor]: The models, in the order the service lists them.

    Raises:
        ConfigurationError: If the credential is missing or malformed.
        TransportError: If the request failed.
        MalformedResponseError: If the reply could not be parsed.
    """
    api_key, remote_params = _resolve_api_key(api_key, remote_params)
    params = build_list_models_params(page_size, page_token)
    logger.debug("Listing models.")
    if transport is not None:
        response = await transport.get_json(_MODELS_PATH, api_key=api_key, params=params)
    else:
        async with AiohttpTransport(remote_params) as owned_transport:
            response = await owned_transport.get_json(
                _MODELS_PATH, api_key=api_key, params=params
            )
    return interpret_list_models_response(response)


def get_models_blocking(
    api_key: Optional[str] = None,
    *,
    remote_params: Optional[RemoteParams] = None,
    transport: Optional[BlockingTransport] = None,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
) -> list[ModelDescriptor]:
    """Blocking version of `get_models`."""
    api_key, remote_params = _resolve_api_key(api_key, remote_params)
    params = build_list_models_params(page_size, page_token)
    logger.debug("Listing models.")
    if transport is not None:
        response = transport.get_json(_MODELS_PATH, api_key=api_key, params=params)
    else:
        with RequestsTransport(remote_params) as owned_transport:
            response = owned_transport.get_json(
                _MODELS_PATH, api_key=api_key, params=params
            )
    return interpret_list_models_response(response)
