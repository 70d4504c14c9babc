import pytest

from gemini_chat.core.errors import (
    ConfigurationError,
    ContentError,
    GeminiError,
    MalformedResponseError,
    SessionBusyError,
    TransportError,
    UnsupportedMediaError,
)


@pytest.mark.parametrize(
    "error_type",
    [
        ConfigurationError,
        SessionBusyError,
        TransportError,
        ContentError,
        MalformedResponseError,
    ],
)
def test_errors_share_a_base_class(error_type):
    assert issubclass(error_type, GeminiError)


def test_configuration_error_is_value_error():
    error = ConfigurationError("bad temperature", field="temperature")
    assert isinstance(error, ValueError)
    assert error.field == "temperature"
    assert str(error) == "bad temperature"


def test_unsupported_media_error():
    error = UnsupportedMediaError("image/bmp", frozenset({"image/png", "image/jpeg"}))
    assert isinstance(error, ConfigurationError)
    assert error.mime_type == "image/bmp"
    assert error.field == "mime_type"
    assert str(error) == (
        "Unsupported image MIME type: 'image/bmp'. "
        "Accepted types: image/jpeg, image/png."
    )


def test_transport_error_str_includes_status_code():
    error = TransportError("Internal error", status_code=500, retriable=True)
    assert str(error) == "HTTP 500: Internal error"
    assert error.retriable


def test_transport_error_without_status_code():
    error = TransportError("Connection reset")
    assert str(error) == "Connection reset"
    assert error.status_code is None
    assert not error.retriable


def test_content_error_reasons():
    error = ContentError("blocked", block_reason="SAFETY")
    assert error.block_reason == "SAFETY"
    assert error.finish_reason is None
