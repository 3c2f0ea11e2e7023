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
"""Transaction auto-configuration — data sources, managers and the chaining post-processor.

For every ``dataSource`` / ``dataSource_<suffix>`` entry with a ``url``,
registers:

* ``dataSource[_<suffix>]``: a SQLAlchemy :class:`~sqlalchemy.Engine`
* ``transactionManager[_<suffix>]``: a :class:`SqlAlchemyTransactionManager` for it

Beans the application already registered under those names are left alone.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

import structlog
from sqlalchemy import Engine

from chainedtx.container.definition import BeanDefinition, RuntimeBeanReference
from chainedtx.container.registry import BeanDefinitionRegistry
from chainedtx.context.application_context import ApplicationContext
from chainedtx.core.config import Config, config_properties
from chainedtx.transaction.post_processor import (
    DATA_SOURCE,
    TRANSACTION_MANAGER,
    ChainedTransactionManagerPostProcessor,
    read_data_source_config,
)
from chainedtx.transaction.sqlalchemy import SqlAlchemyTransactionManager, create_data_source

logger = structlog.get_logger("chainedtx.transaction.auto_configuration")


@config_properties(prefix="chainedtx.transaction.chained")
@dataclass
class ChainedTransactionProperties:
    """Configuration for transaction chaining (chainedtx.transaction.chained.*)."""

    enabled: bool = True


def _bean_name(base: str, suffix: str) -> str:
    return f"{base}_{suffix}" if suffix else base


def register_data_sources(registry: BeanDefinitionRegistry, config: Config) -> list[str]:
    """Register an engine and a transaction manager per configured data source.

    Returns the names of the transaction manager beans that were registered.
    """
    registered: list[str] = []
    for suffix, ds_config in read_data_source_config(config).items():
        url = ds_config.get("url")
        if not url:
            logger.debug("data_source_skipped", data_source_suffix=suffix, reason="no url")
            continue

        ds_name = _bean_name(DATA_SOURCE, suffix)
        tm_name = _bean_name(TRANSACTION_MANAGER, suffix)

        if not registry.contains_bean_definition(ds_name):
            options = dict(ds_config.get("options") or {})
            registry.register_bean_definition(
                ds_name,
                BeanDefinition(
                    bean_class=Engine,
                    constructor_args=[str(url)],
                    factory=functools.partial(create_data_source, **options),
                    destroy_method="dispose",
                ),
            )

        if not registry.contains_bean_definition(tm_name):
            registry.register_bean_definition(
                tm_name,
                BeanDefinition(
                    bean_class=SqlAlchemyTransactionManager,
                    constructor_args=[RuntimeBeanReference(ds_name)],
                ),
            )
            registered.append(tm_name)

        logger.debug("data_source_registered", data_source=ds_name, transaction_manager=tm_name)
    return registered


def configure_chained_transactions(context: ApplicationContext) -> ChainedTransactionManagerPostProcessor | None:
    """Register configured data sources and install the chaining post-processor.

    Returns the installed post-processor, or ``None`` when chaining is
    disabled via ``chainedtx.transaction.chained.enabled``.
    """
    register_data_sources(context.bean_factory, context.config)

    properties = context.config.bind(ChainedTransactionProperties)
    if not properties.enabled:
        logger.info("chained_transactions_disabled")
        return None

    processor = ChainedTransactionManagerPostProcessor(context.config)
    context.add_post_processor(processor)
    return processor
