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
"""Name-keyed bean factory with definition inheritance and deferred references."""

from __future__ import annotations

import difflib
from typing import Any, TypeVar

import structlog

from chainedtx.container.definition import BeanDefinition, ManagedList, RuntimeBeanReference
from chainedtx.container.exceptions import (
    BeanCreationException,
    BeanCurrentlyInCreationError,
    BeanIsAbstractError,
    BeanNotOfRequiredTypeError,
    NoSuchBeanDefinitionError,
)
from chainedtx.container.types import Scope
from chainedtx.kernel.exceptions import ChainedTxException

T = TypeVar("T")

logger = structlog.get_logger("chainedtx.container.factory")


class DefaultListableBeanFactory:
    """Bean definition registry and bean factory in one object.

    Definitions are kept in registration order, which is also the order in
    which beans are enumerated by type. Definitions stay mutable until a bean
    is created from them; post-processors can rename, replace or relink them
    before instantiation.

    Features:
    - parent/child definitions (child settings layered over the parent's)
    - deferred :class:`RuntimeBeanReference` and :class:`ManagedList` values
    - singleton and prototype scopes, abstract template definitions
    - manually registered singletons
    - circular creation detection
    """

    def __init__(self) -> None:
        self._definitions: dict[str, BeanDefinition] = {}
        self._singletons: dict[str, Any] = {}
        self._manual_singleton_names: list[str] = []
        self._in_creation: dict[str, None] = {}  # insertion-ordered, O(1) lookup

    # ------------------------------------------------------------------
    # BeanDefinitionRegistry
    # ------------------------------------------------------------------

    def get_bean_definition_names(self) -> list[str]:
        return list(self._definitions)

    def get_bean_definition_count(self) -> int:
        return len(self._definitions)

    def contains_bean_definition(self, name: str) -> bool:
        return name in self._definitions

    def get_bean_definition(self, name: str) -> BeanDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            raise self._no_such_definition(name) from None

    def register_bean_definition(self, name: str, definition: BeanDefinition) -> None:
        """Register *definition* under *name*, replacing any existing one."""
        if name in self._definitions:
            logger.debug("bean_definition_overridden", bean_name=name)
        self._definitions[name] = definition
        self._singletons.pop(name, None)

    def remove_bean_definition(self, name: str) -> None:
        if name not in self._definitions:
            raise self._no_such_definition(name)
        del self._definitions[name]
        self._singletons.pop(name, None)

    def get_merged_bean_definition(self, name: str) -> BeanDefinition:
        """Return the definition for *name* with its parent chain flattened."""
        return self._merge(name, seen=[])

    def _merge(self, name: str, seen: list[str]) -> BeanDefinition:
        if name in seen:
            raise BeanCreationException(
                subsystem="registry",
                provider=name,
                reason=f"Circular parent definitions: {' -> '.join([*seen, name])}",
            )
        definition = self.get_bean_definition(name)
        if definition.parent_name is None:
            return definition.copy()
        parent = self._merge(definition.parent_name, seen=[*seen, name])
        return parent.merged_with(definition)

    # ------------------------------------------------------------------
    # Singletons
    # ------------------------------------------------------------------

    def register_singleton(self, name: str, instance: Any) -> None:
        """Register an already-built object under *name*."""
        if name in self._singletons:
            raise BeanCreationException(
                subsystem="registry",
                provider=name,
                reason=f"Could not register object under bean name '{name}': there is already an object bound",
            )
        self._singletons[name] = instance
        if name not in self._definitions:
            self._manual_singleton_names.append(name)

    def pre_instantiate_singletons(self) -> None:
        """Create every non-abstract, non-lazy singleton in registration order."""
        for name in list(self._definitions):
            merged = self.get_merged_bean_definition(name)
            if not merged.abstract and merged.scope is Scope.SINGLETON and not merged.lazy_init:
                self.get_bean(name)

    def destroy_singletons(self) -> None:
        """Call destroy methods on created singletons in reverse creation order."""
        for name in reversed(list(self._singletons)):
            instance = self._singletons[name]
            definition = self._definitions.get(name)
            if definition is None:
                continue
            destroy_method = self.get_merged_bean_definition(name).destroy_method
            if destroy_method:
                logger.debug("bean_destroy", bean_name=name, method=destroy_method)
                getattr(instance, destroy_method)()
        for name in list(self._singletons):
            if name in self._definitions:
                del self._singletons[name]

    # ------------------------------------------------------------------
    # ListableBeanFactory
    # ------------------------------------------------------------------

    def contains_bean(self, name: str) -> bool:
        return name in self._singletons or name in self._definitions

    def get_bean(self, name: str, required_type: type[T] | None = None) -> Any:
        """Return the bean named *name*, creating it if necessary."""
        bean = self._do_get_bean(name)
        if required_type is not None and not isinstance(bean, required_type):
            raise BeanNotOfRequiredTypeError(name, required_type, type(bean))
        return bean

    def get_type(self, name: str) -> type | None:
        """Return the type of the bean named *name* without creating it.

        Returns ``None`` when the type cannot be determined up front
        (a factory-backed definition without a declared class).
        """
        if name in self._singletons:
            return type(self._singletons[name])
        return self.get_merged_bean_definition(name).resolve_bean_class()

    def is_type_match(self, name: str, type_to_match: type) -> bool:
        bean_type = self.get_type(name)
        return bean_type is not None and issubclass(bean_type, type_to_match)

    def get_bean_names_for_type(
        self,
        bean_type: type,
        include_non_singletons: bool = True,
    ) -> list[str]:
        """Return the names of beans assignable to *bean_type*.

        Definitions come first, in registration order, followed by manually
        registered singletons. Abstract definitions are never matched.
        """
        names: list[str] = []
        for name in self._definitions:
            merged = self.get_merged_bean_definition(name)
            if merged.abstract:
                continue
            if not include_non_singletons and merged.scope is not Scope.SINGLETON:
                continue
            if self.is_type_match(name, bean_type):
                names.append(name)
        for name in self._manual_singleton_names:
            if name not in self._definitions and isinstance(self._singletons.get(name), bean_type):
                names.append(name)
        return names

    def get_beans_of_type(self, bean_type: type[T]) -> dict[str, T]:
        return {name: self.get_bean(name) for name in self.get_bean_names_for_type(bean_type)}

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def _do_get_bean(self, name: str) -> Any:
        if name in self._singletons:
            return self._singletons[name]

        merged = self.get_merged_bean_definition(name)
        if merged.abstract:
            raise BeanIsAbstractError(name)

        if name in self._in_creation:
            raise BeanCurrentlyInCreationError(chain=list(self._in_creation), current=name)
        self._in_creation[name] = None
        try:
            instance = self._create_bean(name, merged)
        finally:
            self._in_creation.pop(name, None)

        if merged.scope is Scope.SINGLETON:
            self._singletons[name] = instance
        return instance

    def _create_bean(self, name: str, merged: BeanDefinition) -> Any:
        args = [self._resolve_value(arg) for arg in merged.constructor_args]
        try:
            if merged.factory is not None:
                instance = merged.factory(*args)
            else:
                bean_class = merged.resolve_bean_class()
                if bean_class is None:
                    raise BeanCreationException(
                        subsystem="instantiation",
                        provider=name,
                        reason="Bean definition has neither a bean class nor a factory",
                    )
                instance = bean_class(*args)

            for prop_name, value in merged.properties.items():
                setattr(instance, prop_name, self._resolve_value(value))
        except ChainedTxException:
            raise
        except Exception as exc:
            raise BeanCreationException(
                subsystem="instantiation",
                provider=name,
                reason=str(exc),
            ) from exc

        logger.debug("bean_created", bean_name=name, bean_type=type(instance).__qualname__)
        return instance

    def _resolve_value(self, value: Any) -> Any:
        """Resolve deferred references; plain values pass through unchanged."""
        if isinstance(value, RuntimeBeanReference):
            return self.get_bean(value.bean_name)
        if isinstance(value, ManagedList):
            return [self._resolve_value(item) for item in value]
        return value

    def _no_such_definition(self, name: str) -> NoSuchBeanDefinitionError:
        return NoSuchBeanDefinitionError(
            name,
            suggestions=difflib.get_close_matches(name, list(self._definitions), n=5, cutoff=0.6),
        )
