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
"""Transaction exceptions."""

from __future__ import annotations

from chainedtx.kernel.exceptions import InfrastructureException


class TransactionException(InfrastructureException):
    """Base class for transaction infrastructure failures."""


class CannotCreateTransactionException(TransactionException):
    """A transaction could not be started on one of the underlying resources."""


class IllegalTransactionStateException(TransactionException):
    """A status was committed or rolled back twice, or by the wrong manager."""


class UnexpectedRollbackException(TransactionException):
    """A rollback failed on at least one underlying resource."""


class HeuristicCompletionException(TransactionException):
    """Commit did not complete uniformly across the chained resources.

    ``outcome`` is ``"rolled_back"`` when the first commit failed and the
    remaining resources were rolled back, or ``"mixed"`` when some resources
    had already committed.
    """

    ROLLED_BACK = "rolled_back"
    MIXED = "mixed"

    def __init__(self, outcome: str, cause: BaseException) -> None:
        self.outcome = outcome
        super().__init__(
            f"Heuristic completion: outcome state is {outcome}; nested exception is {cause!r}",
            code="TX_HEURISTIC_COMPLETION",
            context={"outcome": outcome},
        )
