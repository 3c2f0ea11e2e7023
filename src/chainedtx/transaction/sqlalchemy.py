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
"""Per-data-source transaction manager backed by a SQLAlchemy engine."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Connection, Engine, create_engine

from chainedtx.transaction.exceptions import (
    CannotCreateTransactionException,
    IllegalTransactionStateException,
)
from chainedtx.transaction.manager import TransactionDefinition, TransactionStatus


@dataclass
class ConnectionHolder:
    """The connection and root transaction owned by one status."""

    connection: Connection
    transaction: object


class SqlAlchemyTransactionManager:
    """Runs one connection-level transaction per status on a single engine.

    The active connection is exposed on the status as
    ``status.transaction.connection`` for the code running inside the
    transaction.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def get_transaction(self, definition: TransactionDefinition | None = None) -> TransactionStatus:
        definition = definition or TransactionDefinition()
        try:
            connection = self.engine.connect()
        except Exception as exc:
            raise CannotCreateTransactionException(
                f"Could not open connection for {self.engine.url!r}: {exc}",
                code="TX_CANNOT_CREATE",
            ) from exc
        try:
            transaction = connection.begin()
        except Exception as exc:
            connection.close()
            raise CannotCreateTransactionException(
                f"Could not begin transaction on {self.engine.url!r}: {exc}",
                code="TX_CANNOT_CREATE",
            ) from exc
        holder = ConnectionHolder(connection=connection, transaction=transaction)
        return TransactionStatus(transaction=holder, definition=definition)

    def commit(self, status: TransactionStatus) -> None:
        holder = self._holder(status)
        try:
            if status.rollback_only:
                holder.transaction.rollback()  # type: ignore[attr-defined]
            else:
                holder.transaction.commit()  # type: ignore[attr-defined]
        finally:
            status.completed = True
            holder.connection.close()

    def rollback(self, status: TransactionStatus) -> None:
        holder = self._holder(status)
        try:
            holder.transaction.rollback()  # type: ignore[attr-defined]
        finally:
            status.completed = True
            holder.connection.close()

    @staticmethod
    def _holder(status: TransactionStatus) -> ConnectionHolder:
        if status.completed:
            raise IllegalTransactionStateException(
                "Transaction is already completed - do not call commit or rollback more than once",
                code="TX_ILLEGAL_STATE",
            )
        if not isinstance(status.transaction, ConnectionHolder):
            raise IllegalTransactionStateException(
                "Status was not created by a SqlAlchemyTransactionManager",
                code="TX_ILLEGAL_STATE",
            )
        return status.transaction


def create_data_source(url: str, **options: object) -> Engine:
    """Create the engine for one data source from its configured URL and options."""
    return create_engine(url, **options)
