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
"""Filter precedence for the web filter chain.

A filter with a lower order wraps every filter after it: it sees the request
first and the response last. The session filter sits innermost among the
built-in filters so the session it writes back is the one the handler left
behind, and the request logger around it can report on that session.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T", bound=type)

HIGHEST_PRECEDENCE: int = -(2**31)
LOWEST_PRECEDENCE: int = 2**31 - 1

_ORDER_ATTR = "__sessionfly_order__"


def order(value: int) -> Callable[[T], T]:
    """Class decorator that fixes a filter's position in the chain."""

    def decorator(cls: T) -> T:
        setattr(cls, _ORDER_ATTR, value)
        return cls

    return decorator


def get_order(target: Any) -> int:
    """Order of a filter class or instance; undecorated filters sort at 0."""
    cls = target if isinstance(target, type) else type(target)
    return int(getattr(cls, _ORDER_ATTR, 0))
