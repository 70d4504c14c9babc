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

import copy
import dataclasses
from collections.abc import Iterator
from typing import Any, Optional, TypeVar

T = TypeVar("T", bound="BaseParams")


@dataclasses.dataclass
class BaseParams:
    """Base class for all parameter classes.

    Subclasses implement `__finalize_and_validate__` to check their own fields.
    Validation is explicit: constructing a params object never raises, so that
    a caller can build an object, inspect it, and validate it when it is
    handed to a session.
    """

    #
    # Public methods
    #
    def finalize_and_validate(self) -> None:
        """Recursively finalizes and validates the parameters."""
        self._finalize_and_validate(set())

    def __finalize_and_validate__(self) -> None:
        """Finalizes and validates the parameters of this object.

        In case of validation errors, this method should raise a
        `ConfigurationError`.
        """

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        """Returns an iterator over field names and values."""
        for param in dataclasses.fields(self):
            yield param.name, getattr(self, param.name)

    def validated_copy(self: T) -> T:
        """Returns a deep copy of this object, finalized and validated.

        The original object is left untouched, even if validation fails.
        """
        result = copy.deepcopy(self)
        result.finalize_and_validate()
        return result

    def to_dict(self, exclude_none: bool = False) -> dict[str, Any]:
        """Converts the parameters to a dictionary."""
        return {
            name: value
            for name, value in self
            if not (exclude_none and value is None)
        }

    #
    # Private methods
    #
    def _finalize_and_validate(self, validated: Optional[set[int]]) -> None:
        if validated is None:
            validated = set()

        if id(self) in validated:
            return
        validated.add(id(self))

        # Only one level of nesting is supported for containers.
        for _, attr_value in self:
            if isinstance(attr_value, BaseParams):
                attr_value._finalize_and_validate(validated)
            elif isinstance(attr_value, list):
                for item in attr_value:
                    if isinstance(item, BaseParams):
                        item._finalize_and_validate(validated)
            elif isinstance(attr_value, dict):
                for item in attr_value.values():
                    if isinstance(item, BaseParams):
                        item._finalize_and_validate(validated)

        self.__finalize_and_validate__()
