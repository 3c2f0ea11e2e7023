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
"""JTA-style transaction manager base."""

from __future__ import annotations

from abc import ABC, abstractmethod

from chainedtx.transaction.manager import TransactionDefinition, TransactionStatus


class JtaTransactionManager(ABC):
    """Base for managers that coordinate several resources with XA two-phase commit.

    A context whose ``transactionManager`` bean is a subclass of this type
    already spans every data source, so it is never wrapped in a
    :class:`~chainedtx.transaction.chained.ChainedTransactionManager`.
    """

    @abstractmethod
    def get_transaction(self, definition: TransactionDefinition | None = None) -> TransactionStatus: ...

    @abstractmethod
    def commit(self, status: TransactionStatus) -> None: ...

    @abstractmethod
    def rollback(self, status: TransactionStatus) -> None: ...
