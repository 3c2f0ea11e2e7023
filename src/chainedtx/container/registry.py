# Copyright 2026 Firefly Software Solutions Inc.
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
"""Bean definition registry and bean factory ports."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from chainedtx.container.definition import BeanDefinition

T = TypeVar("T")


@runtime_checkable
class BeanDefinitionRegistry(Protocol):
    """Name-keyed table of bean definitions, mutable until instantiation."""

    def get_bean_definition_names(self) -> list[str]:
        """Return all definition names in registration order."""
        ...

    def get_bean_definition(self, name: str) -> BeanDefinition:
        """Return the definition registered under *name* (raises when missing)."""
        ...

    def register_bean_definition(self, name: str, definition: BeanDefinition) -> None: ...

    def remove_bean_definition(self, name: str) -> None:
        """Remove the definition registered under *name* (raises when missing)."""
        ...

    def contains_bean_definition(self, name: str) -> bool: ...

    def get_bean_definition_count(self) -> int: ...


@runtime_checkable
class ListableBeanFactory(Protocol):
    """Access to live beans by name and by type."""

    def get_bean(self, name: str, required_type: type[T] | None = None) -> Any: ...

    def get_type(self, name: str) -> type | None: ...

    def is_type_match(self, name: str, type_to_match: type) -> bool: ...

    def get_bean_names_for_type(self, bean_type: type, include_non_singletons: bool = True) -> list[str]: ...

    def contains_bean(self, name: str) -> bool: ...
