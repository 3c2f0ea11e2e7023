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
"""Tests for SqlAlchemyTransactionManager against SQLite."""

import pytest
from sqlalchemy import text

from chainedtx.transaction.chained import ChainedTransactionManager
from chainedtx.transaction.exceptions import CannotCreateTransactionException, IllegalTransactionStateException
from chainedtx.transaction.manager import PlatformTransactionManager, TransactionStatus
from chainedtx.transaction.sqlalchemy import SqlAlchemyTransactionManager, create_data_source


@pytest.fixture
def engine(tmp_path):
    engine = create_data_source(f"sqlite:///{tmp_path / 'orders.db'}")
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE orders (id INTEGER PRIMARY KEY, item TEXT)"))
    yield engine
    engine.dispose()


def _count(engine) -> int:
    with engine.connect() as conn:
        return conn.execute(text("SELECT COUNT(*) FROM orders")).scalar_one()


def _insert(status: TransactionStatus, item: str) -> None:
    status.transaction.connection.execute(text("INSERT INTO orders (item) VALUES (:item)"), {"item": item})


class TestSqlAlchemyTransactionManager:
    def test_implements_port(self, engine):
        assert isinstance(SqlAlchemyTransactionManager(engine), PlatformTransactionManager)

    def test_commit_persists(self, engine):
        manager = SqlAlchemyTransactionManager(engine)
        status = manager.get_transaction()
        _insert(status, "book")
        manager.commit(status)
        assert status.completed is True
        assert _count(engine) == 1

    def test_rollback_discards(self, engine):
        manager = SqlAlchemyTransactionManager(engine)
        status = manager.get_transaction()
        _insert(status, "book")
        manager.rollback(status)
        assert _count(engine) == 0

    def test_rollback_only_commit_discards(self, engine):
        manager = SqlAlchemyTransactionManager(engine)
        status = manager.get_transaction()
        _insert(status, "book")
        status.set_rollback_only()
        manager.commit(status)
        assert _count(engine) == 0

    def test_completed_status_rejected(self, engine):
        manager = SqlAlchemyTransactionManager(engine)
        status = manager.get_transaction()
        manager.commit(status)
        with pytest.raises(IllegalTransactionStateException):
            manager.rollback(status)

    def test_foreign_status_rejected(self, engine):
        with pytest.raises(IllegalTransactionStateException):
            SqlAlchemyTransactionManager(engine).commit(TransactionStatus())


class UnbeginnableConnection:
    def __init__(self) -> None:
        self.closed = False

    def begin(self):
        raise RuntimeError("database is read-only")

    def close(self) -> None:
        self.closed = True


class UnbeginnableEngine:
    url = "sqlite:///unbeginnable.db"

    def __init__(self) -> None:
        self.connection = UnbeginnableConnection()

    def connect(self) -> UnbeginnableConnection:
        return self.connection


class TestBeginFailure:
    def test_connection_closed_and_error_wrapped(self):
        engine = UnbeginnableEngine()
        with pytest.raises(CannotCreateTransactionException) as exc_info:
            SqlAlchemyTransactionManager(engine).get_transaction()
        assert engine.connection.closed is True
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestChainedOverSqlite:
    def test_rollback_spans_both_databases(self, tmp_path):
        orders = create_data_source(f"sqlite:///{tmp_path / 'a.db'}")
        audit = create_data_source(f"sqlite:///{tmp_path / 'b.db'}")
        for eng in (orders, audit):
            with eng.begin() as conn:
                conn.execute(text("CREATE TABLE orders (id INTEGER PRIMARY KEY, item TEXT)"))

        chained = ChainedTransactionManager(
            [SqlAlchemyTransactionManager(orders), SqlAlchemyTransactionManager(audit)]
        )
        status = chained.get_transaction()
        for _, inner in status.statuses:
            _insert(inner, "book")
        chained.rollback(status)

        assert _count(orders) == 0
        assert _count(audit) == 0

        status = chained.get_transaction()
        for _, inner in status.statuses:
            _insert(inner, "pen")
        chained.commit(status)

        assert _count(orders) == 1
        assert _count(audit) == 1
        orders.dispose()
        audit.dispose()
