from dataclasses import dataclass
from typing import Any, Optional

import pytest

from gemini_chat.core.configs.params.base_params import BaseParams
from gemini_chat.core.errors import ConfigurationError


@dataclass
class NestedParams(BaseParams):
    simple_param: Any
    list_param: list
    dict_param: dict


@dataclass
class PositiveValueParams(BaseParams):
    value: Any

    def __finalize_and_validate__(self) -> None:
        if self.value <= 0:
            raise ConfigurationError(
                f"Value must be positive, got {self.value}", field="value"
            )


@dataclass
class NormalizingParams(BaseParams):
    name: Optional[str] = None

    def __finalize_and_validate__(self) -> None:
        if self.name is not None:
            self.name = self.name.strip().lower()


#
# Tests
#
def test_simple_params():
    simple = PositiveValueParams(42)
    simple.finalize_and_validate()  # Should not raise any exception


def test_nested_params():
    nested = NestedParams(
        simple_param=PositiveValueParams(1),
        list_param=[PositiveValueParams(2), "not a param"],
        dict_param={"a": PositiveValueParams(3), "b": "not a param"},
    )
    nested.finalize_and_validate()  # Should not raise any exception


def test_nested_params_invalid():
    nested = NestedParams(
        simple_param=PositiveValueParams(1),
        list_param=[PositiveValueParams(-2)],
        dict_param={},
    )
    with pytest.raises(ConfigurationError, match="Value must be positive"):
        nested.finalize_and_validate()


def test_validation_call_count():
    @dataclass
    class CounterParams(BaseParams):
        call_count = 0
        a: Any = None
        b: Any = None

        def __finalize_and_validate__(self):
            CounterParams.call_count += 1

    root = CounterParams(a=CounterParams(), b=[CounterParams(), "not a param"])

    assert CounterParams.call_count == 0  # before validation
    root.finalize_and_validate()
    assert CounterParams.call_count == 3  # root + 2 unique nested CounterParams


def test_cyclic_reference():
    a = NestedParams(simple_param=None, list_param=[], dict_param={})
    b = NestedParams(simple_param=a, list_param=[], dict_param={})
    a.simple_param = b

    a.finalize_and_validate()  # Should not cause infinite recursion


def test_iter():
    params = NormalizingParams(name="x")
    assert list(params) == [("name", "x")]


def test_to_dict():
    assert NormalizingParams().to_dict() == {"name": None}
    assert NormalizingParams().to_dict(exclude_none=True) == {}


def test_validated_copy_leaves_original_untouched():
    original = NormalizingParams(name="  MiXeD ")
    validated = original.validated_copy()
    assert validated.name == "mixed"
    assert original.name == "  MiXeD "


def test_validated_copy_failure_leaves_original_untouched():
    original = PositiveValueParams(-1)
    with pytest.raises(ConfigurationError):
        original.validated_copy()
    assert original.value == -1
