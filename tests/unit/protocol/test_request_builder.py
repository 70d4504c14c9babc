import base64

import pytest

from gemini_chat.core.configs.params.generation_options import GenerationOptions
from gemini_chat.core.errors import ConfigurationError, UnsupportedMediaError
from gemini_chat.core.types.conversation import (
    InlineImagePart,
    Role,
    TextPart,
    Turn,
)
from gemini_chat.protocol.request_builder import (
    ACCEPTED_IMAGE_MIME_TYPES,
    build_generate_content_path,
    build_generate_content_request,
    build_list_models_params,
    convert_options_to_api_input,
    convert_part_to_api_input,
    validate_image_mime_type,
)
from tests.fakes import create_png_bytes


def test_build_request_text_only():
    api_input = build_generate_content_request(Turn.user("hello"))
    assert api_input == {"contents": [{"role": "user", "parts": [{"text": "hello"}]}]}


def test_build_request_history_order_is_preserved():
    history = (
        Turn.user("first"),
        Turn.model("second"),
        Turn.user("third"),
        Turn.model("fourth"),
    )
    api_input = build_generate_content_request(Turn.user("fifth"), history=history)
    assert [c["parts"][0]["text"] for c in api_input["contents"]] == [
        "first",
        "second",
        "third",
        "fourth",
        "fifth",
    ]
    assert [c["role"] for c in api_input["contents"]] == [
        "user",
        "model",
        "user",
        "model",
        "user",
    ]


def test_build_request_with_system_instruction():
    api_input = build_generate_content_request(
        Turn.user("hi"), system_instruction="You are a pirate."
    )
    assert api_input["systemInstruction"] == {"parts": [{"text": "You are a pirate."}]}


def test_build_request_empty_system_instruction_is_sent():
    api_input = build_generate_content_request(Turn.user("hi"), system_instruction="")
    assert api_input["systemInstruction"] == {"parts": [{"text": ""}]}


def test_build_request_omits_unset_options():
    api_input = build_generate_content_request(
        Turn.user("hi"), options=GenerationOptions()
    )
    assert "generationConfig" not in api_input


def test_build_request_only_emits_set_options():
    api_input = build_generate_content_request(
        Turn.user("hi"),
        options=GenerationOptions(temperature=0.0, max_output_tokens=128),
    )
    assert api_input["generationConfig"] == {
        "temperature": 0.0,
        "maxOutputTokens": 128,
    }


def test_convert_options_to_api_input_all_fields():
    options = GenerationOptions(
        temperature=0.2,
        top_p=0.9,
        top_k=40,
        max_output_tokens=64,
        stop_sequences=["END", "STOP"],
        candidate_count=2,
        response_mime_type="application/json",
        presence_penalty=0.1,
        frequency_penalty=0.3,
        seed=1234,
    )
    assert convert_options_to_api_input(options) == {
        "temperature": 0.2,
        "topP": 0.9,
        "topK": 40,
        "maxOutputTokens": 64,
        "stopSequences": ["END", "STOP"],
        "candidateCount": 2,
        "responseMimeType": "application/json",
        "presencePenalty": 0.1,
        "frequencyPenalty": 0.3,
        "seed": 1234,
    }


def test_build_request_with_image():
    png_bytes = create_png_bytes()
    api_input = build_generate_content_request(
        Turn.user("What is this?", image=png_bytes, mime_type="image/png")
    )
    parts = api_input["contents"][0]["parts"]
    assert parts[0] == {"text": "What is this?"}
    assert parts[1] == {
        "inlineData": {
            "mimeType": "image/png",
            "data": base64.b64encode(png_bytes).decode("ascii"),
        }
    }


def test_build_request_rejects_unsupported_image_type():
    turn = Turn.user("What is this?", image=b"BM\x00\x00", mime_type="image/bmp")
    with pytest.raises(UnsupportedMediaError) as exc_info:
        build_generate_content_request(turn)
    assert exc_info.value.mime_type == "image/bmp"


@pytest.mark.parametrize("role", [Role.MODEL, Role.SYSTEM])
def test_build_request_rejects_non_user_turn(role):
    turn = Turn(role=role, parts=(TextPart(text="hi"),))
    with pytest.raises(ConfigurationError) as exc_info:
        build_generate_content_request(turn)
    assert exc_info.value.field == "role"


def test_build_request_rejects_system_turn_in_history():
    history = (Turn(role=Role.SYSTEM, parts=(TextPart(text="rules"),)),)
    with pytest.raises(ConfigurationError, match="System turns"):
        build_generate_content_request(Turn.user("hi"), history=history)


def test_build_request_is_pure():
    history = (Turn.user("a"), Turn.model("b"))
    options = GenerationOptions(stop_sequences=["END"])
    first = build_generate_content_request(
        Turn.user("c"), history=history, options=options
    )
    first["contents"].clear()
    first["generationConfig"]["stopSequences"].append("MUTATED")
    second = build_generate_content_request(
        Turn.user("c"), history=history, options=options
    )
    assert len(second["contents"]) == 3
    assert options.stop_sequences == ["END"]
    assert second["generationConfig"]["stopSequences"] == ["END"]


def test_convert_part_to_api_input():
    assert convert_part_to_api_input(TextPart(text="x")) == {"text": "x"}
    assert convert_part_to_api_input(
        InlineImagePart(data=b"\x01", mime_type="image/webp")
    ) == {"inlineData": {"mimeType": "image/webp", "data": "AQ=="}}


@pytest.mark.parametrize(
    "mime_type,expected",
    [
        ("image/png", "image/png"),
        ("IMAGE/PNG", "image/png"),
        ("image/jpeg", "image/jpeg"),
        ("image/jpg", "image/jpeg"),
        ("image/webp", "image/webp"),
        ("image/heic", "image/heic"),
        ("image/heif", "image/heif"),
    ],
)
def test_validate_image_mime_type(mime_type, expected):
    assert validate_image_mime_type(mime_type) == expected
    assert expected in ACCEPTED_IMAGE_MIME_TYPES


@pytest.mark.parametrize(
    "mime_type", ["image/bmp", "image/gif", "application/pdf", "", None]
)
def test_validate_image_mime_type_rejects(mime_type):
    with pytest.raises(UnsupportedMediaError):
        validate_image_mime_type(mime_type)


def test_build_generate_content_path():
    assert (
        build_generate_content_path("models/gemini-1.5-flash")
        == "models/gemini-1.5-flash:generateContent"
    )


def test_build_list_models_params():
    assert build_list_models_params() is None
    assert build_list_models_params(page_size=10) == {"pageSize": 10}
    assert build_list_models_params(page_size=5, page_token="abc") == {
        "pageSize": 5,
        "pageToken": "abc",
    }


def test_build_list_models_params_rejects_bad_page_size():
    with pytest.raises(ConfigurationError) as exc_info:
        build_list_models_params(page_size=0)
    assert exc_info.value.field == "page_size"
