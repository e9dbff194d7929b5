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
"""Session store protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sessionfly.session.session import Session


@runtime_checkable
class SessionStore(Protocol):
    """Turns an inbound session cookie value into a :class:`Session` and back.

    ``load`` must never fail for bad input: an absent or invalid token
    yields a fresh session. ``persist`` returns the cookie value to send.
    """

    def load(self, token: str | None) -> Session: ...

    def persist(self, session: Session) -> str: ...
