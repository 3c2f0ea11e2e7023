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
"""Chained transaction manager — "Best Effort 1 Phase Commit" over several resources."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from chainedtx.transaction.exceptions import (
    CannotCreateTransactionException,
    HeuristicCompletionException,
    IllegalTransactionStateException,
    UnexpectedRollbackException,
)
from chainedtx.transaction.manager import (
    PlatformTransactionManager,
    TransactionDefinition,
    TransactionStatus,
)

logger = structlog.get_logger("chainedtx.transaction.chained")


class MultiTransactionStatus(TransactionStatus):
    """Status holding one underlying status per chained manager, in start order."""

    def __init__(self, definition: TransactionDefinition) -> None:
        super().__init__(transaction=[], definition=definition)

    @property
    def statuses(self) -> list[tuple[PlatformTransactionManager, TransactionStatus]]:
        return self.transaction

    def register(self, manager: PlatformTransactionManager, status: TransactionStatus) -> None:
        self.transaction.append((manager, status))


class ChainedTransactionManager:
    """Transaction manager that delegates to an ordered list of managers.

    Transactions start on every manager in list order and complete in reverse
    order, so the first manager in the list commits last. This is not XA: a
    commit failure after some resources have committed leaves them committed
    and is reported as a :class:`HeuristicCompletionException`.

    ``transaction_managers`` is a plain mutable list; managers appended after
    construction take part in transactions started afterwards.
    """

    def __init__(self, transaction_managers: Iterable[PlatformTransactionManager] = ()) -> None:
        self.transaction_managers: list[PlatformTransactionManager] = list(transaction_managers)

    def get_transaction(self, definition: TransactionDefinition | None = None) -> MultiTransactionStatus:
        definition = definition or TransactionDefinition()
        status = MultiTransactionStatus(definition)
        for manager in self.transaction_managers:
            try:
                status.register(manager, manager.get_transaction(definition))
            except Exception as exc:
                self._rollback_started(status)
                raise CannotCreateTransactionException(
                    f"Could not start transaction on {type(manager).__name__}: {exc}",
                    code="TX_CANNOT_CREATE",
                ) from exc
        return status

    def commit(self, status: TransactionStatus) -> None:
        multi = self._check(status)
        if multi.rollback_only:
            self.rollback(multi)
            return

        commit = True
        first = True
        commit_error: Exception | None = None
        first_failed = False

        for manager, inner in reversed(multi.statuses):
            if commit:
                try:
                    manager.commit(inner)
                except Exception as exc:
                    commit = False
                    commit_error = exc
                    first_failed = first
                    logger.error("chained_commit_failed", manager=type(manager).__name__, error=str(exc))
            else:
                try:
                    manager.rollback(inner)
                except Exception as exc:
                    logger.warning("chained_rollback_after_commit_failure", manager=type(manager).__name__, error=str(exc))
            first = False

        multi.completed = True
        if commit_error is not None:
            outcome = HeuristicCompletionException.ROLLED_BACK if first_failed else HeuristicCompletionException.MIXED
            raise HeuristicCompletionException(outcome, commit_error) from commit_error

    def rollback(self, status: TransactionStatus) -> None:
        multi = self._check(status)
        rollback_error: Exception | None = None
        for manager, inner in reversed(multi.statuses):
            try:
                manager.rollback(inner)
            except Exception as exc:
                if rollback_error is None:
                    rollback_error = exc
                else:
                    logger.warning("chained_rollback_failed", manager=type(manager).__name__, error=str(exc))
        multi.completed = True
        if rollback_error is not None:
            raise UnexpectedRollbackException(
                f"Rollback failed on a chained resource: {rollback_error}",
                code="TX_UNEXPECTED_ROLLBACK",
            ) from rollback_error

    @staticmethod
    def _check(status: TransactionStatus) -> MultiTransactionStatus:
        if not isinstance(status, MultiTransactionStatus):
            raise IllegalTransactionStateException(
                "Status was not created by a ChainedTransactionManager",
                code="TX_ILLEGAL_STATE",
            )
        if status.completed:
            raise IllegalTransactionStateException(
                "Transaction is already completed - do not call commit or rollback more than once",
                code="TX_ILLEGAL_STATE",
            )
        return status

    @staticmethod
    def _rollback_started(status: MultiTransactionStatus) -> None:
        for manager, inner in reversed(status.statuses):
            try:
                manager.rollback(inner)
            except Exception as exc:
                logger.warning("chained_rollback_failed", manager=type(manager).__name__, error=str(exc))
