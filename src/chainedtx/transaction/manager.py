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
"""Transaction-manager contract shared by every per-data-source manager."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class TransactionDefinition:
    """Attributes of a transaction to start."""

    name: str | None = None
    read_only: bool = False
    timeout: float | None = None


@dataclass
class TransactionStatus:
    """Handle on a started transaction, passed back to commit or rollback."""

    transaction: Any = field(default=None, repr=False)
    definition: TransactionDefinition = field(default_factory=TransactionDefinition)
    rollback_only: bool = False
    completed: bool = False

    def set_rollback_only(self) -> None:
        self.rollback_only = True


@runtime_checkable
class PlatformTransactionManager(Protocol):
    """Begin, commit and roll back transactions on one resource."""

    def get_transaction(self, definition: TransactionDefinition | None = None) -> TransactionStatus:
        """Start a new transaction and return its status."""
        ...

    def commit(self, status: TransactionStatus) -> None:
        """Commit the transaction, or roll it back when it is rollback-only."""
        ...

    def rollback(self, status: TransactionStatus) -> None: ...
