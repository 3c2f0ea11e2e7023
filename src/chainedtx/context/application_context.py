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
"""ApplicationContext — bean registry owner and startup sequencer."""

from __future__ import annotations

import time
from typing import Any, TypeVar

import structlog

from chainedtx.container.definition import BeanDefinition
from chainedtx.container.exceptions import BeanCreationException
from chainedtx.container.factory import DefaultListableBeanFactory
from chainedtx.container.ordering import sort_by_order
from chainedtx.context.post_processor import (
    BeanDefinitionRegistryPostProcessor,
    BeanFactoryPostProcessor,
)
from chainedtx.core.config import Config
from chainedtx.logging.port import LoggingPort
from chainedtx.logging.structlog_adapter import StructlogAdapter

T = TypeVar("T")

logger = structlog.get_logger("chainedtx.context")

CONFIG_BEAN_NAME = "config"


class ApplicationContext:
    """Central bean registry and lifecycle manager.

    Wraps a :class:`DefaultListableBeanFactory` and runs the startup
    sequence on :meth:`refresh`:

    1. Configure logging (a :class:`StructlogAdapter` unless another port is given)
    2. Invoke registry post-processors (structural edits, sorted by @order)
    3. Eagerly instantiate singletons
    4. Invoke bean-factory post-processors (runtime wiring, sorted by @order)

    The configuration is registered as the singleton bean ``config``.
    """

    def __init__(self, config: Config, logging_port: LoggingPort | None = None) -> None:
        self._config = config
        self._logging: LoggingPort = logging_port if logging_port is not None else StructlogAdapter()
        self._bean_factory = DefaultListableBeanFactory()
        self._post_processors: list[Any] = []
        self._active = False

        self._bean_factory.register_singleton(CONFIG_BEAN_NAME, config)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_bean(self, name: str, bean_class: type | str, *args: Any, **properties: Any) -> BeanDefinition:
        """Register a bean definition built from a class and constructor arguments."""
        definition = BeanDefinition(
            bean_class=bean_class,
            constructor_args=list(args),
            properties=dict(properties),
        )
        self._bean_factory.register_bean_definition(name, definition)
        return definition

    def register_bean_definition(self, name: str, definition: BeanDefinition) -> None:
        self._bean_factory.register_bean_definition(name, definition)

    def add_post_processor(self, processor: Any) -> None:
        """Add a registry and/or bean-factory post-processor."""
        if not isinstance(processor, (BeanDefinitionRegistryPostProcessor, BeanFactoryPostProcessor)):
            raise TypeError(f"{type(processor).__name__} is not a bean definition registry or bean factory post-processor")
        self._post_processors.append(processor)

    # ------------------------------------------------------------------
    # Bean access
    # ------------------------------------------------------------------

    def get_bean(self, name: str, required_type: type[T] | None = None) -> Any:
        return self._bean_factory.get_bean(name, required_type)

    def get_beans_of_type(self, bean_type: type[T]) -> dict[str, T]:
        return self._bean_factory.get_beans_of_type(bean_type)

    def contains_bean(self, name: str) -> bool:
        return self._bean_factory.contains_bean(name)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def bean_factory(self) -> DefaultListableBeanFactory:
        """Escape hatch: direct access to the underlying bean factory."""
        return self._bean_factory

    @property
    def logging_port(self) -> LoggingPort:
        return self._logging

    @property
    def config(self) -> Config:
        return self._config

    @property
    def is_active(self) -> bool:
        return self._active

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Run post-processors and instantiate singletons.

        Container errors propagate as-is; anything else is wrapped in a
        startup :class:`BeanCreationException`. Either way startup aborts.
        """
        try:
            self._do_refresh()
        except BeanCreationException:
            raise
        except Exception as exc:
            raise BeanCreationException(
                subsystem="startup",
                provider=type(exc).__name__,
                reason=str(exc),
            ) from exc

    def _do_refresh(self) -> None:
        start = time.perf_counter()

        self._logging.configure(self._config)

        processors = sort_by_order(self._post_processors)

        for pp in processors:
            if isinstance(pp, BeanDefinitionRegistryPostProcessor):
                pp.post_process_bean_definition_registry(self._bean_factory)

        self._bean_factory.pre_instantiate_singletons()

        for pp in processors:
            if isinstance(pp, BeanFactoryPostProcessor):
                pp.post_process_bean_factory(self._bean_factory)

        self._active = True
        logger.info(
            "context_refreshed",
            bean_definitions=self._bean_factory.get_bean_definition_count(),
            elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
        )

    def close(self) -> None:
        """Destroy singletons in reverse creation order."""
        self._bean_factory.destroy_singletons()
        self._active = False
        logger.info("context_closed")
