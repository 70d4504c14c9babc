import pytest

from gemini_chat.core.errors import ConfigurationError
from gemini_chat.core.types.model_descriptor import (
    DEFAULT_MODEL,
    LanguageModel,
    ModelDescriptor,
    resolve_model_name,
)


def test_model_descriptor_from_api_json():
    descriptor = ModelDescriptor.model_validate(
        {
            "name": "models/gemini-1.5-flash",
            "baseModelId": "gemini-1.5-flash",
            "version": "001",
            "displayName": "Gemini 1.5 Flash",
            "description": "Fast and versatile",
            "inputTokenLimit": 1000000,
            "outputTokenLimit": 8192,
            "supportedGenerationMethods": ["generateContent", "countTokens"],
            "temperature": 1.0,
            "maxTemperature": 2.0,
            "topP": 0.95,
            "topK": 40,
            "someFutureField": "ignored",
        }
    )
    assert descriptor.name == "models/gemini-1.5-flash"
    assert descriptor.display_name == "Gemini 1.5 Flash"
    assert descriptor.supported_generation_methods == (
        "generateContent",
        "countTokens",
    )
    assert descriptor.input_token_limit == 1000000
    assert descriptor.output_token_limit == 8192
    assert descriptor.max_temperature == 2.0
    assert descriptor.supports_generate_content


def test_model_descriptor_minimal():
    descriptor = ModelDescriptor(name="models/embedding-001")
    assert descriptor.display_name == ""
    assert descriptor.input_token_limit is None
    assert not descriptor.supports_generate_content


@pytest.mark.parametrize(
    "model,expected",
    [
        ("gemini-1.5-pro", "models/gemini-1.5-pro"),
        ("models/gemini-1.5-pro", "models/gemini-1.5-pro"),
        ("  gemini-2.0-flash ", "models/gemini-2.0-flash"),
        (LanguageModel.GEMINI_2_5_FLASH, "models/gemini-2.5-flash"),
        (
            ModelDescriptor(
                name="models/gemini-pro",
                supported_generation_methods=("generateContent",),
            ),
            "models/gemini-pro",
        ),
        (ModelDescriptor(name="models/custom"), "models/custom"),
    ],
)
def test_resolve_model_name(model, expected):
    assert resolve_model_name(model) == expected


@pytest.mark.parametrize("model", ["", "   ", "models/"])
def test_resolve_model_name_rejects_empty(model):
    with pytest.raises(ConfigurationError) as exc_info:
        resolve_model_name(model)
    assert exc_info.value.field == "model"


def test_resolve_model_name_rejects_embedding_only_model():
    descriptor = ModelDescriptor(
        name="models/embedding-001", supported_generation_methods=("embedContent",)
    )
    with pytest.raises(ConfigurationError, match="does not support generateContent"):
        resolve_model_name(descriptor)


def test_resolve_model_name_rejects_other_types():
    with pytest.raises(ConfigurationError, match="Unsupported model type"):
        resolve_model_name(42)  # type: ignore


def test_default_model():
    assert DEFAULT_MODEL == LanguageModel.GEMINI_1_5_FLASH
    assert str(DEFAULT_MODEL) == "gemini-1.5-flash"
