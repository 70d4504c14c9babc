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

import asyncio
import io
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiohttp
import PIL.Image
import requests

from gemini_chat.core.errors import ConfigurationError, TransportError
from gemini_chat.utils.logging import logger

ImageSource = Union[bytes, str, Path]
"""Raw image bytes, a local file path, or an `http(s)://` URL."""


def _is_url(source: ImageSource) -> bool:
    return isinstance(source, str) and source.lower().startswith(
        ("http://", "https://")
    )


def guess_image_mime_type(image_bytes: bytes) -> Optional[str]:
    """Guesses the MIME type of an image from its bytes.

    Returns:
        Optional[str]: e.g. `image/png`, or None if the format is not recognized.
    """
    if not image_bytes:
        return None
    try:
        with PIL.Image.open(io.BytesIO(image_bytes)) as pil_image:
            image_format = pil_image.format
    except (PIL.UnidentifiedImageError, OSError):
        return None
    if image_format is None:
        return None
    return PIL.Image.MIME.get(image_format.upper())


def load_image_bytes_from_path(input_image_filepath: Union[str, Path]) -> bytes:
    """Loads image bytes from a local file."""
    if not input_image_filepath:
        raise ConfigurationError("Empty image file path!", field="image")

    image_path = Path(input_image_filepath)
    if not image_path.is_file():
        raise ConfigurationError(
            f"Image path is not a file: {input_image_filepath}"
            if image_path.exists()
            else f"Image path doesn't exist: {input_image_filepath}",
            field="image",
        )
    return image_path.read_bytes()


def load_image_bytes_from_url(input_image_url: str, timeout: float = 60.0) -> bytes:
    """Downloads image bytes from a URL.

    Raises:
        TransportError: If the download fails.
    """
    try:
        response = requests.get(input_image_url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.exception(f"Failed to download image: '{input_image_url}'")
        status_code = e.response.status_code if e.response is not None else None
        raise TransportError(
            f"Failed to download image: {e!r}", status_code=status_code
        ) from e
    return response.content


async def aload_image_bytes_from_path(input_image_filepath: Union[str, Path]) -> bytes:
    """Loads image bytes from a local file without blocking the event loop."""
    if not input_image_filepath or not Path(input_image_filepath).is_file():
        raise ConfigurationError(
            f"Image path is not a file: {input_image_filepath}", field="image"
        )
    async with aiofiles.open(input_image_filepath, "rb") as f:
        return await f.read()


async def aload_image_bytes_from_url(
    input_image_url: str, timeout: float = 60.0
) -> bytes:
    """Downloads image bytes from a URL without blocking the event loop.

    Raises:
        TransportError: If the download fails.
    """
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                input_image_url, timeout=aiohttp.ClientTimeout(total=timeout)
            ) as response:
                response.raise_for_status()
                return await response.read()
    except aiohttp.ClientResponseError as e:
        logger.exception(f"Failed to download image: '{input_image_url}'")
        raise TransportError(
            f"Failed to download image: {e.message}", status_code=e.status
        ) from e
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.exception(f"Failed to download image: '{input_image_url}'")
        raise TransportError(f"Failed to download image: {e!r}") from e


def _finalize_image(image_bytes: bytes, mime_type: Optional[str]) -> tuple[bytes, str]:
    if not image_bytes:
        raise ConfigurationError("No image bytes.", field="image")
    resolved_mime_type = mime_type or guess_image_mime_type(image_bytes)
    if not resolved_mime_type:
        raise ConfigurationError(
            "Could not determine the image MIME type. Pass `mime_type` explicitly.",
            field="mime_type",
        )
    return image_bytes, resolved_mime_type


def load_image(
    source: ImageSource, mime_type: Optional[str] = None
) -> tuple[bytes, str]:
    """Loads an image from bytes, a path, or a URL.

    Args:
        source: Raw bytes, a local file path, or an `http(s)://` URL.
        mime_type: MIME type of the image. Guessed from the bytes if omitted.

    Returns:
        tuple[bytes, str]: The image bytes and MIME type.
    """
    if isinstance(source, (bytes, bytearray)):
        image_bytes = bytes(source)
    elif _is_url(source):
        image_bytes = load_image_bytes_from_url(str(source))
    else:
        image_bytes = load_image_bytes_from_path(source)
    return _finalize_image(image_bytes, mime_type)


async def aload_image(
    source: ImageSource, mime_type: Optional[str] = None
) -> tuple[bytes, str]:
    """Non-blocking version of `load_image`."""
    if isinstance(source, (bytes, bytearray)):
        image_bytes = bytes(source)
    elif _is_url(source):
        image_bytes = await aload_image_bytes_from_url(str(source))
    else:
        image_bytes = await aload_image_bytes_from_path(source)
    return _finalize_image(image_bytes, mime_type)
