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
"""SessionFilter — decodes the session cookie before the handler, re-signs it after."""

from __future__ import annotations

from typing import Any

from sessionfly.kernel.exceptions import SessionflyException
from sessionfly.session.cookies import CookieJar, CookiePolicy
from sessionfly.session.ports.outbound import SessionStore
from sessionfly.session.session import Session
from sessionfly.web.ordering import HIGHEST_PRECEDENCE, order
from sessionfly.web.ports.filter import CallNext

DEFAULT_COOKIE_NAME = "_session_id"


@order(HIGHEST_PRECEDENCE + 200)
class SessionFilter:
    """Exposes the session and plain cookies to handlers and writes them back.

    Before the handler runs, ``request.state.session`` holds the
    :class:`~sessionfly.session.session.Session` loaded from the session
    cookie and ``request.state.cookies`` holds a
    :class:`~sessionfly.session.cookies.CookieJar` of every other cookie.

    After the handler returns, the session is re-signed unconditionally so a
    configured ``max_age`` slides forward, and one ``Set-Cookie`` header is
    emitted for the session token plus one for each jar entry. If the handler
    raises, nothing is written.
    """

    def __init__(
        self,
        store: SessionStore,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        session_policy: CookiePolicy | None = None,
        cookie_policy: CookiePolicy | None = None,
    ) -> None:
        self._store = store
        self._cookie_name = cookie_name
        self._session_policy = session_policy or CookiePolicy(http_only=True)
        self._cookie_policy = cookie_policy or CookiePolicy()

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        cookies = getattr(request, "cookies", {})
        session = self._store.load(cookies.get(self._cookie_name))
        jar = CookieJar.from_request_cookies(cookies, exclude=(self._cookie_name,))

        request.state.session = session
        request.state.cookies = jar

        response = await call_next(request)

        self._session_policy.apply(response, self._cookie_name, self._store.persist(session))
        for name, value in jar.items():
            self._cookie_policy.apply(response, name, value)

        return response


def get_session(request: Any) -> Session:
    """Return the session a :class:`SessionFilter` attached to *request*."""
    session = getattr(request.state, "session", None)
    if session is None:
        raise SessionflyException(
            "No session on this request; is SessionFilter installed?",
            code="SESSION_FILTER_MISSING",
        )
    return session


def get_cookies(request: Any) -> CookieJar:
    """Return the plain cookie jar a :class:`SessionFilter` attached to *request*."""
    jar = getattr(request.state, "cookies", None)
    if jar is None:
        raise SessionflyException(
            "No cookie jar on this request; is SessionFilter installed?",
            code="SESSION_FILTER_MISSING",
        )
    return jar
