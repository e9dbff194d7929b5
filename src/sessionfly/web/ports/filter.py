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
"""WebFilter protocol: one link of the request pipeline around the handler."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

# Runs the rest of the chain for a request and resolves to its response.
CallNext = Callable[[Any], Awaitable[Any]]


@runtime_checkable
class WebFilter(Protocol):
    """A request filter.

    ``do_filter`` may prepare per-request state before awaiting
    ``call_next`` and may add headers to the response it gets back. By the
    time ``call_next`` returns, the handler is done with the request, so
    anything written to the response afterwards reflects its final state.
    Filters that never await ``call_next`` answer the request themselves.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...
