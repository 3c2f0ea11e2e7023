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
"""Tests for class-name resolution and bean definition helpers."""

from collections import OrderedDict

import pytest

from chainedtx.container.class_utils import qualified_name, resolve_class_name
from chainedtx.container.definition import BeanDefinition, ManagedList, RuntimeBeanReference
from chainedtx.container.exceptions import ClassResolutionError
from chainedtx.container.types import Scope
from chainedtx.transaction.chained import ChainedTransactionManager


class TestResolveClassName:
    def test_dotted_name(self):
        assert resolve_class_name("collections.OrderedDict") is OrderedDict

    def test_colon_name(self):
        assert resolve_class_name("chainedtx.transaction.chained:ChainedTransactionManager") is ChainedTransactionManager

    def test_round_trip_of_qualified_name(self):
        assert resolve_class_name(qualified_name(ChainedTransactionManager)) is ChainedTransactionManager

    def test_missing_module(self):
        with pytest.raises(ClassResolutionError) as exc_info:
            resolve_class_name("chainedtx_missing_module.Thing")
        assert exc_info.value.class_name == "chainedtx_missing_module.Thing"

    def test_missing_attribute(self):
        with pytest.raises(ClassResolutionError):
            resolve_class_name("collections.NoSuchThing")

    def test_not_a_class(self):
        with pytest.raises(ClassResolutionError, match="is not a class"):
            resolve_class_name("os.path.join")

    def test_bare_name_rejected(self):
        with pytest.raises(ClassResolutionError):
            resolve_class_name("OrderedDict")


class TestBeanDefinition:
    def test_bean_class_name(self):
        assert BeanDefinition(bean_class=OrderedDict).bean_class_name == "collections.OrderedDict"
        assert BeanDefinition(bean_class="pkg.Thing").bean_class_name == "pkg.Thing"
        assert BeanDefinition().bean_class_name is None

    def test_copy_is_independent(self):
        original = BeanDefinition(bean_class=OrderedDict, constructor_args=[1], properties={"a": 1})
        clone = original.copy()
        clone.constructor_args.append(2)
        clone.properties["b"] = 2
        assert original.constructor_args == [1]
        assert original.properties == {"a": 1}

    def test_merged_with_child(self):
        parent = BeanDefinition(
            bean_class=OrderedDict,
            constructor_args=[1],
            properties={"a": 1, "b": 1},
            abstract=True,
            destroy_method="close",
        )
        child = BeanDefinition(properties={"b": 2}, parent_name="parent", scope=Scope.PROTOTYPE)
        merged = parent.merged_with(child)
        assert merged.bean_class is OrderedDict
        assert merged.constructor_args == [1]
        assert merged.properties == {"a": 1, "b": 2}
        assert merged.scope is Scope.PROTOTYPE
        assert merged.abstract is False
        assert merged.destroy_method == "close"
        assert merged.parent_name is None
        assert parent.properties == {"a": 1, "b": 1}

    def test_runtime_reference_equality(self):
        assert RuntimeBeanReference("tm") == RuntimeBeanReference("tm")
        assert repr(RuntimeBeanReference("tm")) == "<tm>"

    def test_managed_list(self):
        items = ManagedList(["x"], element_type_name="builtins.str")
        assert items == ["x"]
        assert items.element_type_name == "builtins.str"
