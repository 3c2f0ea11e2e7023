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
"""chainedtx Container — name-keyed bean definitions and bean factory."""

from chainedtx.container.class_utils import qualified_name, resolve_class_name
from chainedtx.container.definition import BeanDefinition, ManagedList, RuntimeBeanReference
from chainedtx.container.exceptions import (
    BeanCreationException,
    BeanCurrentlyInCreationError,
    BeanIsAbstractError,
    BeanNotOfRequiredTypeError,
    ClassResolutionError,
    NoSuchBeanDefinitionError,
)
from chainedtx.container.factory import DefaultListableBeanFactory
from chainedtx.container.ordering import HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE, get_order, order, sort_by_order
from chainedtx.container.registry import BeanDefinitionRegistry, ListableBeanFactory
from chainedtx.container.types import Scope

__all__ = [
    "BeanCreationException",
    "BeanCurrentlyInCreationError",
    "BeanDefinition",
    "BeanDefinitionRegistry",
    "BeanIsAbstractError",
    "BeanNotOfRequiredTypeError",
    "ClassResolutionError",
    "DefaultListableBeanFactory",
    "HIGHEST_PRECEDENCE",
    "LOWEST_PRECEDENCE",
    "ListableBeanFactory",
    "ManagedList",
    "NoSuchBeanDefinitionError",
    "RuntimeBeanReference",
    "Scope",
    "get_order",
    "sort_by_order",
    "order",
    "qualified_name",
    "resolve_class_name",
]
