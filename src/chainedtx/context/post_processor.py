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
"""Post-processor protocols — hooks into the container startup sequence."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from chainedtx.container.factory import DefaultListableBeanFactory
from chainedtx.container.registry import BeanDefinitionRegistry


@runtime_checkable
class BeanDefinitionRegistryPostProcessor(Protocol):
    """Structural hook, called before any bean is instantiated.

    Implementations may add, remove, rename or relink bean definitions.
    """

    def post_process_bean_definition_registry(self, registry: BeanDefinitionRegistry) -> None: ...


@runtime_checkable
class BeanFactoryPostProcessor(Protocol):
    """Runtime hook, called after singletons have been instantiated.

    Implementations may look up live beans and adjust their state.
    """

    def post_process_bean_factory(self, bean_factory: DefaultListableBeanFactory) -> None: ...
