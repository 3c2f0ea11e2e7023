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
"""Post-processor that chains the transaction managers of multiple data sources.

When the context contains more than one ``transactionManager`` bean, the bean
named ``transactionManager`` is renamed to ``$primaryTransactionManager`` and a
:class:`ChainedTransactionManager` is registered as ``transactionManager`` in
its place. Once the singletons exist, every other transaction manager is
appended to the chained manager ("Best Effort 1 Phase Commit").

Nothing is changed when the existing ``transactionManager`` is a
:class:`JtaTransactionManager`, since JTA/XA already spans the data sources.

A data source can stay out of the chain by setting ``transactional: false``
in its configuration entry::

    dataSource:
      url: postgresql://localhost/app
    dataSource_audit:
      url: postgresql://localhost/audit
      transactional: false
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

import structlog

from chainedtx.container.class_utils import qualified_name
from chainedtx.container.definition import BeanDefinition, ManagedList, RuntimeBeanReference
from chainedtx.container.exceptions import ClassResolutionError
from chainedtx.container.ordering import HIGHEST_PRECEDENCE, order
from chainedtx.container.registry import BeanDefinitionRegistry, ListableBeanFactory
from chainedtx.core.config import Config
from chainedtx.transaction.chained import ChainedTransactionManager
from chainedtx.transaction.jta import JtaTransactionManager
from chainedtx.transaction.manager import PlatformTransactionManager

logger = structlog.get_logger("chainedtx.transaction.post_processor")

TRANSACTIONAL = "transactional"
TRANSACTION_MANAGER = "transactionManager"
PRIMARY_TRANSACTION_MANAGER = "$primaryTransactionManager"
DATA_SOURCE = "dataSource"
DATA_SOURCE_PREFIX = "dataSource_"

# Counting matches "transactionManager" anywhere in a name, in any case.
# Only exact "transactionManager_<suffix>" names resolve a suffix.
TRANSACTION_MANAGER_BEAN_NAME_PATTERN = re.compile(r".*transactionManager.*", re.IGNORECASE)
SUFFIX_PATTERN = re.compile(r"transactionManager_(.+)")


def read_data_source_config(config: Config | Mapping[str, Any] | None) -> dict[str, Mapping[str, Any]]:
    """Map data-source suffix to its configuration entry.

    ``dataSource`` maps to the empty suffix, ``dataSource_<suffix>`` to
    ``<suffix>``. Other keys, and entries that are not mappings, are ignored.
    """
    ds_configs: dict[str, Mapping[str, Any]] = {}
    if config is None:
        return ds_configs
    tree = config.to_dict() if isinstance(config, Config) else config
    if not isinstance(tree, Mapping):
        return ds_configs

    entries: list[tuple[str, str, Any]] = []
    if DATA_SOURCE in tree:
        entries.append((DATA_SOURCE, "", tree[DATA_SOURCE]))
    for key, value in tree.items():
        name = str(key)
        if name.startswith(DATA_SOURCE_PREFIX):
            entries.append((name, name[len(DATA_SOURCE_PREFIX):], value))

    for name, suffix, value in entries:
        if isinstance(value, Mapping):
            ds_configs[suffix] = value
        else:
            logger.debug("data_source_config_ignored", key=name, value_type=type(value).__name__)
    return ds_configs


def resolve_data_source_suffix(transaction_manager_bean_name: str) -> str | None:
    """Return the data-source suffix of a transaction manager bean name.

    ``transactionManager`` -> ``""``, ``transactionManager_foo`` -> ``"foo"``,
    anything else -> ``None``.
    """
    if transaction_manager_bean_name == TRANSACTION_MANAGER:
        return ""
    match = SUFFIX_PATTERN.fullmatch(transaction_manager_bean_name)
    if match:
        return match.group(1)
    return None


def is_not_transactional(ds_configs: Mapping[str, Mapping[str, Any]], suffix: str | None) -> bool:
    """True only for an explicit boolean ``transactional: false`` on the data source."""
    if suffix is None:
        return False
    ds_config = ds_configs.get(suffix)
    if ds_config is not None and TRANSACTIONAL in ds_config:
        value = ds_config[TRANSACTIONAL]
        if isinstance(value, bool):
            return not value
    return False


def rename_bean(old_name: str, new_name: str, registry: BeanDefinitionRegistry) -> None:
    """Move a definition to a new name, keeping child definitions linked to it."""
    previous_children: list[str] = []
    for name in registry.get_bean_definition_names():
        if name != old_name:
            definition = registry.get_bean_definition(name)
            if definition.parent_name == old_name:
                definition.parent_name = None
                previous_children.append(name)

    old_definition = registry.get_bean_definition(old_name)
    registry.remove_bean_definition(old_name)
    registry.register_bean_definition(new_name, old_definition)

    for name in previous_children:
        registry.get_bean_definition(name).parent_name = new_name


@order(HIGHEST_PRECEDENCE)
class ChainedTransactionManagerPostProcessor:
    """Registry and bean-factory post-processor for multiple data sources.

    Structural phase (:meth:`post_process_bean_definition_registry`): runs
    before instantiation and swaps in the chained manager definition.
    Runtime phase (:meth:`post_process_bean_factory`): runs after the
    singletons exist and appends the remaining managers to the chain.
    """

    def __init__(self, config: Config | Mapping[str, Any] | None = None) -> None:
        self._config = config

    @property
    def config(self) -> Config | Mapping[str, Any] | None:
        return self._config

    @config.setter
    def config(self, config: Config | Mapping[str, Any] | None) -> None:
        self._config = config

    def read_data_source_config(self) -> dict[str, Mapping[str, Any]]:
        return read_data_source_config(self._config)

    # ------------------------------------------------------------------
    # Structural phase
    # ------------------------------------------------------------------

    def post_process_bean_definition_registry(self, registry: BeanDefinitionRegistry) -> None:
        count = self.count_transaction_manager_beans(registry)
        if count > 1 and not self.has_jta_transaction_manager(registry):
            self.add_chained_transaction_manager(registry)
            logger.info(
                "chained_transaction_manager_registered",
                transaction_managers=count,
                primary=PRIMARY_TRANSACTION_MANAGER,
            )
        else:
            logger.debug("chained_transaction_manager_skipped", transaction_managers=count)

    def add_chained_transaction_manager(self, registry: BeanDefinitionRegistry) -> None:
        rename_bean(TRANSACTION_MANAGER, PRIMARY_TRANSACTION_MANAGER, registry)
        constructor_argument = ManagedList(
            [RuntimeBeanReference(PRIMARY_TRANSACTION_MANAGER)],
            element_type_name=qualified_name(PlatformTransactionManager),
        )
        definition = BeanDefinition(
            bean_class=ChainedTransactionManager,
            constructor_args=[constructor_argument],
        )
        registry.register_bean_definition(TRANSACTION_MANAGER, definition)

    def has_jta_transaction_manager(self, registry: BeanDefinitionRegistry) -> bool:
        definition = registry.get_bean_definition(TRANSACTION_MANAGER)
        if definition.bean_class is None:
            raise ClassResolutionError(TRANSACTION_MANAGER, "bean definition declares no bean class")
        bean_class = definition.resolve_bean_class()
        return issubclass(bean_class, JtaTransactionManager)

    def count_transaction_manager_beans(self, registry: BeanDefinitionRegistry) -> int:
        ds_configs = self.read_data_source_config()
        count = 0
        for name in registry.get_bean_definition_names():
            if TRANSACTION_MANAGER_BEAN_NAME_PATTERN.fullmatch(name):
                suffix = resolve_data_source_suffix(name)
                if name == TRANSACTION_MANAGER or not is_not_transactional(ds_configs, suffix):
                    count += 1
        return count

    # ------------------------------------------------------------------
    # Runtime phase
    # ------------------------------------------------------------------

    def post_process_bean_factory(self, bean_factory: ListableBeanFactory) -> None:
        if bean_factory.contains_bean(TRANSACTION_MANAGER) and bean_factory.is_type_match(
            TRANSACTION_MANAGER, ChainedTransactionManager
        ):
            self.register_additional_transaction_managers(bean_factory)

    def register_additional_transaction_managers(self, bean_factory: ListableBeanFactory) -> None:
        bean_names = bean_factory.get_bean_names_for_type(PlatformTransactionManager, include_non_singletons=False)
        ds_configs = self.read_data_source_config()
        additional: list[PlatformTransactionManager] = []
        added: list[str] = []
        for name in bean_names:
            if name in (TRANSACTION_MANAGER, PRIMARY_TRANSACTION_MANAGER):
                continue
            suffix = resolve_data_source_suffix(name)
            if is_not_transactional(ds_configs, suffix):
                logger.info("transaction_manager_excluded", bean_name=name, data_source_suffix=suffix)
                continue
            additional.append(bean_factory.get_bean(name, PlatformTransactionManager))
            added.append(name)

        chained = bean_factory.get_bean(TRANSACTION_MANAGER, ChainedTransactionManager)
        chained.transaction_managers.extend(additional)
        logger.info("transaction_managers_chained", bean_names=[PRIMARY_TRANSACTION_MANAGER, *added])
