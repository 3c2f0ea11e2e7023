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
"""Bean definition metadata, deferred references and managed collections."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from chainedtx.container.class_utils import qualified_name, resolve_class_name
from chainedtx.container.types import Scope


@dataclass(frozen=True)
class RuntimeBeanReference:
    """Named reference to another bean, resolved when the owner is instantiated.

    Holding the name rather than the object means a definition can point at a
    bean that is renamed or replaced before the container builds anything.
    """

    bean_name: str

    def __repr__(self) -> str:
        return f"<{self.bean_name}>"


class ManagedList(list):
    """List of bean values whose elements are resolved at instantiation time.

    ``element_type_name`` documents the expected element type
    (e.g. ``chainedtx.transaction.manager.PlatformTransactionManager``).
    """

    def __init__(self, items: Iterable[Any] = (), element_type_name: str | None = None) -> None:
        super().__init__(items)
        self.element_type_name = element_type_name


@dataclass
class BeanDefinition:
    """Recipe for one named bean.

    ``bean_class`` may be a class or a dotted class name resolved lazily by
    import. ``parent_name`` links a child definition to a parent whose
    settings it inherits. ``factory``, when set, is called with the resolved
    constructor arguments instead of ``bean_class``.
    """

    bean_class: type | str | None = None
    constructor_args: list[Any] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)
    parent_name: str | None = None
    scope: Scope = Scope.SINGLETON
    abstract: bool = False
    lazy_init: bool = False
    destroy_method: str | None = None
    factory: Callable[..., Any] | None = field(default=None, repr=False)

    @property
    def bean_class_name(self) -> str | None:
        """Dotted name of the bean class, or ``None`` when unset."""
        if self.bean_class is None:
            return None
        if isinstance(self.bean_class, str):
            return self.bean_class
        return qualified_name(self.bean_class)

    def resolve_bean_class(self) -> type | None:
        """Return the bean class, importing it when given by name."""
        if isinstance(self.bean_class, str):
            return resolve_class_name(self.bean_class)
        return self.bean_class

    def copy(self) -> BeanDefinition:
        return replace(
            self,
            constructor_args=list(self.constructor_args),
            properties=dict(self.properties),
        )

    def merged_with(self, child: BeanDefinition) -> BeanDefinition:
        """Return a new definition with *child* settings layered over this one.

        The child's class, constructor arguments, factory and destroy method
        win when set; properties are merged key by key. Scope, abstract and
        lazy flags are always the child's own, and the result has no parent.
        """
        merged = self.copy()
        if child.bean_class is not None:
            merged.bean_class = child.bean_class
        if child.constructor_args:
            merged.constructor_args = list(child.constructor_args)
        if child.factory is not None:
            merged.factory = child.factory
        merged.properties.update(child.properties)
        merged.scope = child.scope
        merged.abstract = child.abstract
        merged.lazy_init = child.lazy_init
        if child.destroy_method is not None:
            merged.destroy_method = child.destroy_method
        merged.parent_name = None
        return merged
