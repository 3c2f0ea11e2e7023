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
"""chainedtx Transaction — managers and multi-data-source chaining."""

from chainedtx.transaction.chained import ChainedTransactionManager, MultiTransactionStatus
from chainedtx.transaction.exceptions import (
    CannotCreateTransactionException,
    HeuristicCompletionException,
    IllegalTransactionStateException,
    TransactionException,
    UnexpectedRollbackException,
)
from chainedtx.transaction.jta import JtaTransactionManager
from chainedtx.transaction.manager import (
    PlatformTransactionManager,
    TransactionDefinition,
    TransactionStatus,
)
from chainedtx.transaction.post_processor import (
    PRIMARY_TRANSACTION_MANAGER,
    TRANSACTION_MANAGER,
    ChainedTransactionManagerPostProcessor,
    is_not_transactional,
    read_data_source_config,
    rename_bean,
    resolve_data_source_suffix,
)

__all__ = [
    "CannotCreateTransactionException",
    "ChainedTransactionManager",
    "ChainedTransactionManagerPostProcessor",
    "HeuristicCompletionException",
    "IllegalTransactionStateException",
    "JtaTransactionManager",
    "MultiTransactionStatus",
    "PRIMARY_TRANSACTION_MANAGER",
    "PlatformTransactionManager",
    "TRANSACTION_MANAGER",
    "TransactionDefinition",
    "TransactionException",
    "TransactionStatus",
    "UnexpectedRollbackException",
    "is_not_transactional",
    "read_data_source_config",
    "rename_bean",
    "resolve_data_source_suffix",
]
