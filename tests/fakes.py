"""In-memory transports that record requests and replay canned responses."""

import asyncio
import io
import json
from typing import Any, Callable, NamedTuple, Optional, Union

import PIL.Image

from gemini_chat.core.transport.base_transport import (
    AsyncTransport,
    BlockingTransport,
    TransportResponse,
)

ResponseOrError = Union[TransportResponse, BaseException]


class RecordedRequest(NamedTuple):
    method: str
    path: str
    api_key: Optional[str]
    json_body: Optional[dict[str, Any]]
    params: Optional[dict[str, Any]]


def make_response(
    payload: Any = None, status: int = 200, body: Optional[bytes] = None
) -> TransportResponse:
    if body is None:
        body = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return TransportResponse(status=status, body=body)


def make_candidate(
    *texts: str, finish_reason: Optional[str] = "STOP", index: Optional[int] = None
) -> dict[str, Any]:
    candidate: dict[str, Any] = {
        "content": {"role": "model", "parts": [{"text": text} for text in texts]},
    }
    if finish_reason is not None:
        candidate["finishReason"] = finish_reason
    if index is not None:
        candidate["index"] = index
    return candidate


def make_generate_content_payload(*texts: str, **kwargs) -> dict[str, Any]:
    return {
        "candidates": [make_candidate(*texts, **kwargs)],
        "usageMetadata": {
            "promptTokenCount": 3,
            "candidatesTokenCount": 2,
            "totalTokenCount": 5,
        },
        "modelVersion": "gemini-1.5-flash-002",
    }


def make_text_response(*texts: str, **kwargs) -> TransportResponse:
    return make_response(make_generate_content_payload(*texts, **kwargs))


def make_error_response(status: int, message: str = "boom") -> TransportResponse:
    return make_response(
        {"error": {"code": status, "message": message, "status": "INTERNAL"}},
        status=status,
    )


def create_png_bytes(size: tuple[int, int] = (8, 8)) -> bytes:
    output = io.BytesIO()
    PIL.Image.new(mode="RGB", size=size).save(output, format="PNG")
    return output.getvalue()


def create_jpeg_bytes(size: tuple[int, int] = (8, 8)) -> bytes:
    output = io.BytesIO()
    PIL.Image.new(mode="RGB", size=size).save(output, format="JPEG")
    return output.getvalue()


class FakeAsyncTransport(AsyncTransport):
    """Replays queued responses in order. Exceptions in the queue are raised."""

    def __init__(self, *responses: ResponseOrError):
        super().__init__()
        self.requests: list[RecordedRequest] = []
        self.responses: list[ResponseOrError] = list(responses)
        self.gate: Optional[asyncio.Event] = None
        self.started: Optional[asyncio.Event] = None
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def request(
        self,
        method: str,
        path: str,
        *,
        api_key: Optional[str],
        json_body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> TransportResponse:
        self.requests.append(
            RecordedRequest(method, path, api_key, json_body, params)
        )
        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


class FakeBlockingTransport(BlockingTransport):
    """Blocking counterpart of `FakeAsyncTransport`."""

    def __init__(self, *responses: ResponseOrError):
        super().__init__()
        self.requests: list[RecordedRequest] = []
        self.responses: list[ResponseOrError] = list(responses)
        self.on_request: Optional[Callable[[RecordedRequest], None]] = None
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def request(
        self,
        method: str,
        path: str,
        *,
        api_key: Optional[str],
        json_body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> TransportResponse:
        recorded = RecordedRequest(method, path, api_key, json_body, params)
        self.requests.append(recorded)
        if self.on_request is not None:
            self.on_request(recorded)
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self) -> None:
        self.closed = True
