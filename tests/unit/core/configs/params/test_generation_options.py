import pytest

from gemini_chat.core.configs.params.generation_options import GenerationOptions
from gemini_chat.core.errors import ConfigurationError


def test_generation_options_default_is_empty():
    options = GenerationOptions()
    options.finalize_and_validate()
    assert options.is_empty()


def test_generation_options_valid():
    options = GenerationOptions(
        temperature=0.2,
        top_p=1.0,
        top_k=40,
        max_output_tokens=128,
        stop_sequences=["END"],
        candidate_count=2,
        response_mime_type="application/json",
        presence_penalty=-0.5,
        frequency_penalty=0.5,
        seed=7,
    )
    options.finalize_and_validate()
    assert not options.is_empty()


@pytest.mark.parametrize(
    "kwargs,field",
    [
        ({"temperature": -0.1}, "temperature"),
        ({"temperature": float("nan")}, "temperature"),
        ({"temperature": "hot"}, "temperature"),
        ({"top_p": 1.5}, "top_p"),
        ({"top_p": -0.01}, "top_p"),
        ({"top_k": 0}, "top_k"),
        ({"top_k": 2.5}, "top_k"),
        ({"top_k": True}, "top_k"),
        ({"max_output_tokens": 0}, "max_output_tokens"),
        ({"stop_sequences": "END"}, "stop_sequences"),
        ({"stop_sequences": ["END", ""]}, "stop_sequences"),
        ({"stop_sequences": 5}, "stop_sequences"),
        ({"stop_sequences": {"END": 1}}, "stop_sequences"),
        ({"stop_sequences": b"END"}, "stop_sequences"),
        ({"candidate_count": 0}, "candidate_count"),
        ({"response_mime_type": "text/html"}, "response_mime_type"),
        ({"presence_penalty": float("inf")}, "presence_penalty"),
        ({"frequency_penalty": "low"}, "frequency_penalty"),
        ({"seed": 1.5}, "seed"),
    ],
)
def test_generation_options_invalid_field(kwargs, field):
    with pytest.raises(ConfigurationError) as exc_info:
        GenerationOptions(**kwargs).finalize_and_validate()
    assert exc_info.value.field == field


def test_generation_options_reports_first_invalid_field():
    options = GenerationOptions(temperature=-1, top_k=0, candidate_count=0)
    with pytest.raises(ConfigurationError) as exc_info:
        options.finalize_and_validate()
    assert exc_info.value.field == "temperature"


def test_generation_options_deduplicates_stop_sequences():
    options = GenerationOptions(stop_sequences=["b", "a", "b", "c", "a"])
    options.finalize_and_validate()
    assert options.stop_sequences == ["b", "a", "c"]


@pytest.mark.parametrize("temperature", [0, 0.0, 1, 2.0])
def test_generation_options_temperature_boundaries(temperature):
    GenerationOptions(temperature=temperature).finalize_and_validate()


@pytest.mark.parametrize("top_p", [0, 0.0, 0.5, 1, 1.0])
def test_generation_options_top_p_boundaries(top_p):
    GenerationOptions(top_p=top_p).finalize_and_validate()
