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
"""Tests for ApplicationContext — startup sequencing and post-processor hooks."""

import pytest

from chainedtx.container.definition import BeanDefinition
from chainedtx.container.exceptions import BeanCreationException, NoSuchBeanDefinitionError
from chainedtx.container.ordering import HIGHEST_PRECEDENCE, order
from chainedtx.context.application_context import ApplicationContext
from chainedtx.context.post_processor import (
    BeanDefinitionRegistryPostProcessor,
    BeanFactoryPostProcessor,
)
from chainedtx.core.config import Config
from chainedtx.kernel.exceptions import ConfigurationException
from chainedtx.logging.structlog_adapter import StructlogAdapter

# --- Test beans ---


class Counter:
    instances = 0

    def __init__(self) -> None:
        Counter.instances += 1
        self.value = 0


class RecordingProcessor:
    def __init__(self, label: str, events: list) -> None:
        self.label = label
        self.events = events

    def post_process_bean_definition_registry(self, registry):
        self.events.append(f"registry:{self.label}:{registry.get_bean_definition_names()}")

    def post_process_bean_factory(self, bean_factory):
        self.events.append(f"factory:{self.label}:{sorted(bean_factory._singletons)}")


@order(HIGHEST_PRECEDENCE)
class FirstProcessor(RecordingProcessor):
    pass


class FailingProcessor:
    def post_process_bean_definition_registry(self, registry):
        raise RuntimeError("boom")


class TestPostProcessorProtocols:
    def test_registry_protocol_is_structural(self):
        class MyProcessor:
            def post_process_bean_definition_registry(self, registry):
                pass

        assert isinstance(MyProcessor(), BeanDefinitionRegistryPostProcessor)
        assert not isinstance(MyProcessor(), BeanFactoryPostProcessor)

    def test_non_conforming_rejected(self):
        ctx = ApplicationContext(Config({}))
        with pytest.raises(TypeError):
            ctx.add_post_processor(object())


class TestApplicationContextBasics:
    def test_config_registered_as_bean(self):
        config = Config({"app": {"name": "orders"}})
        ctx = ApplicationContext(config)
        assert ctx.get_bean("config") is config
        assert ctx.config is config

    def test_register_and_resolve(self):
        ctx = ApplicationContext(Config({}))
        ctx.register_bean("counter", Counter, value=5)
        ctx.refresh()
        assert ctx.is_active
        assert ctx.get_bean("counter").value == 5
        assert ctx.contains_bean("counter")
        assert not ctx.contains_bean("missing")

    def test_get_beans_of_type(self):
        ctx = ApplicationContext(Config({}))
        ctx.register_bean("one", Counter)
        ctx.register_bean("two", Counter)
        ctx.refresh()
        assert list(ctx.get_beans_of_type(Counter)) == ["one", "two"]

    def test_singletons_created_on_refresh(self):
        Counter.instances = 0
        ctx = ApplicationContext(Config({}))
        ctx.register_bean_definition("counter", BeanDefinition(bean_class=Counter))
        ctx.register_bean_definition("lazy", BeanDefinition(bean_class=Counter, lazy_init=True))
        ctx.refresh()
        assert Counter.instances == 1


class TestStartupSequence:
    def test_registry_phase_then_instantiation_then_factory_phase(self):
        events: list[str] = []
        ctx = ApplicationContext(Config({}))
        ctx.register_bean("counter", Counter)
        ctx.add_post_processor(RecordingProcessor("plain", events))
        ctx.add_post_processor(FirstProcessor("first", events))
        ctx.refresh()
        assert events == [
            "registry:first:['counter']",
            "registry:plain:['counter']",
            "factory:first:['config', 'counter']",
            "factory:plain:['config', 'counter']",
        ]

    def test_container_errors_propagate_unchanged(self):
        ctx = ApplicationContext(Config({}))
        ctx.register_bean_definition("broken", BeanDefinition(parent_name="missing"))
        with pytest.raises(NoSuchBeanDefinitionError):
            ctx.refresh()
        assert not ctx.is_active

    def test_other_errors_wrapped(self):
        ctx = ApplicationContext(Config({}))
        ctx.add_post_processor(FailingProcessor())
        with pytest.raises(BeanCreationException) as exc_info:
            ctx.refresh()
        assert exc_info.value.subsystem == "startup"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_logging_port_configured_on_refresh(self):
        adapter = StructlogAdapter()
        ctx = ApplicationContext(Config({"chainedtx": {"logging": {"format": "json"}}}), logging_port=adapter)
        ctx.refresh()
        assert adapter._format == "json"

    def test_close_deactivates(self):
        ctx = ApplicationContext(Config({}))
        ctx.refresh()
        ctx.close()
        assert not ctx.is_active


class TestDefaultLoggingPort:
    def test_structlog_adapter_used_when_none_given(self):
        ctx = ApplicationContext(Config({"chainedtx": {"logging": {"format": "json"}}}))
        assert isinstance(ctx.logging_port, StructlogAdapter)
        ctx.refresh()
        assert ctx.logging_port._format == "json"

    def test_invalid_logging_config_aborts_refresh(self):
        ctx = ApplicationContext(Config({"chainedtx": {"logging": {"format": "xml"}}}))
        with pytest.raises(BeanCreationException) as exc_info:
            ctx.refresh()
        assert isinstance(exc_info.value.__cause__, ConfigurationException)
        assert not ctx.is_active
