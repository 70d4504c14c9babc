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

import dataclasses
import logging
import re
from collections.abc import Iterator, Sequence
from io import StringIO
from pathlib import Path
from typing import Any, Optional, TypeVar, Union, cast

from omegaconf import DictConfig, OmegaConf

from gemini_chat.core.configs.params.base_params import BaseParams

T = TypeVar("T", bound="BaseConfig")

_UNESCAPED_INTERPOLATION = re.compile(r"(?<!\\)\$\{")
_SECRET_KEYS = frozenset({"api_key"})
_MASK = "***"


def _load_yaml(config_path: Union[str, Path], ignore_interpolation: bool) -> Any:
    if not ignore_interpolation:
        return OmegaConf.load(config_path)
    text = Path(config_path).read_text()
    return OmegaConf.create(_UNESCAPED_INTERPOLATION.sub(r"\\${", text))


def _mask_secrets(node: Any) -> Any:
    if isinstance(node, dict):
        return {
            key: _MASK if key in _SECRET_KEYS and value else _mask_secrets(value)
            for key, value in node.items()
        }
    return node


@dataclasses.dataclass
class BaseConfig:
    """Base class of configs that can be saved to and loaded from YAML."""

    @classmethod
    def _from_omegaconf(cls: type[T], *sources: Any) -> T:
        schema = OmegaConf.structured(cls)
        config = OmegaConf.to_object(OmegaConf.merge(schema, *sources))
        if not isinstance(config, cls):
            raise TypeError(f"Expected {cls.__name__}, got {type(config).__name__}.")
        return cast(T, config)

    @classmethod
    def from_yaml(
        cls: type[T],
        config_path: Union[str, Path],
        ignore_interpolation: bool = True,
        overrides: Optional[Sequence[str]] = None,
    ) -> T:
        """Loads a config from a YAML file.

        Args:
            config_path: The path to the YAML file.
            ignore_interpolation: If True, `${...}` sequences in the file are
                kept as literal text instead of being resolved.
            overrides: Optional dot-list overrides applied on top of the file,
                e.g. `["remote.max_retries=3", "generation.temperature=0.1"]`.

        Returns:
            The loaded config. It is not validated yet: call
            `finalize_and_validate()` or pass it to a session.
        """
        sources = [_load_yaml(config_path, ignore_interpolation)]
        if overrides:
            sources.append(OmegaConf.from_dotlist(list(overrides)))
        return cls._from_omegaconf(*sources)

    @classmethod
    def from_str(cls: type[T], config_str: str) -> T:
        """Loads a config from a YAML string."""
        return cls._from_omegaconf(OmegaConf.create(config_str))

    def to_yaml(self, config_path: Union[str, Path, StringIO]) -> None:
        """Saves the config to a YAML file, secrets included."""
        OmegaConf.save(config=self, f=config_path)

    def to_masked_dict(self) -> dict[str, Any]:
        """Returns the config as a plain dict with API keys replaced by `***`."""
        container = OmegaConf.to_container(
            cast(DictConfig, OmegaConf.structured(self)), resolve=False
        )
        return _mask_secrets(container)

    def print_config(self, logger: Optional[logging.Logger] = None) -> None:
        """Logs the config as YAML with API keys masked."""
        if logger is None:
            logger = logging.getLogger(__name__)
        config_yaml = OmegaConf.to_yaml(OmegaConf.create(self.to_masked_dict()))
        logger.info(f"Configuration:\n{config_yaml}")

    def finalize_and_validate(self) -> None:
        """Finalizes and validates every params field, then the config itself."""
        for _, attr_value in self:
            if isinstance(attr_value, BaseParams):
                attr_value.finalize_and_validate()
        self.__finalize_and_validate__()

    def __finalize_and_validate__(self) -> None:
        """Validates fields of this config that are not params objects."""

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        """Returns an iterator over field names and values."""
        for param in dataclasses.fields(self):
            yield param.name, getattr(self, param.name)
