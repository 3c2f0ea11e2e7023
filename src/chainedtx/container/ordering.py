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
"""Post-processor ordering — @order decorator and precedence constants."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

C = TypeVar("C", bound=type)
T = TypeVar("T")

HIGHEST_PRECEDENCE: int = -(2**31)
LOWEST_PRECEDENCE: int = 2**31 - 1

_ORDER_ATTR = "__chainedtx_order__"


def order(value: int) -> Callable[[C], C]:
    """Give a post-processor class its position in the refresh sequence.

    Lower values run first; undecorated classes sit at 0. The chaining
    post-processor uses HIGHEST_PRECEDENCE so that its registry edits
    are visible to every other post-processor.
    """
    if not HIGHEST_PRECEDENCE <= value <= LOWEST_PRECEDENCE:
        raise ValueError(f"order {value} is outside [{HIGHEST_PRECEDENCE}, {LOWEST_PRECEDENCE}]")

    def decorator(cls: C) -> C:
        setattr(cls, _ORDER_ATTR, value)
        return cls

    return decorator


def get_order(target: Any) -> int:
    """Order of a class, or of an instance's class."""
    cls = target if isinstance(target, type) else type(target)
    return getattr(cls, _ORDER_ATTR, 0)


def sort_by_order(items: Iterable[T]) -> list[T]:
    """Stable sort by order: equal orders keep their registration order."""
    return sorted(items, key=get_order)
