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
"""Tests for SessionFilter and the request-state helpers."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from starlette.responses import Response

from sessionfly.kernel.exceptions import SessionflyException
from sessionfly.session.adapters.cookie import CookieSessionStore
from sessionfly.session.codec import CookieCodec
from sessionfly.session.cookies import CookiePolicy
from sessionfly.session.filter import SessionFilter, get_cookies, get_session
from sessionfly.web.ordering import HIGHEST_PRECEDENCE, get_order

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_request(cookies: dict[str, str] | None = None, path: str = "/sessions") -> SimpleNamespace:
    return SimpleNamespace(
        method="GET",
        url=SimpleNamespace(path=path),
        cookies=cookies or {},
        headers={},
        state=SimpleNamespace(),
    )


def _set_cookies(response: Response) -> dict[str, str]:
    """Map cookie name -> full Set-Cookie header."""
    headers = [v.decode("latin-1") for k, v in response.raw_headers if k == b"set-cookie"]
    return {h.split("=", 1)[0]: h for h in headers}


@pytest.fixture
def store() -> CookieSessionStore:
    return CookieSessionStore(CookieCodec("filter-secret"))


# ---------------------------------------------------------------------------
# SessionFilter
# ---------------------------------------------------------------------------


class TestSessionFilter:
    @pytest.mark.asyncio
    async def test_attaches_session_and_jar(self, store: CookieSessionStore) -> None:
        session_filter = SessionFilter(store)
        request = _make_request(cookies={"theme": "dark"})
        call_next = AsyncMock(return_value=Response())

        await session_filter.do_filter(request, call_next)

        call_next.assert_awaited_once_with(request)
        assert request.state.session.is_new is True
        assert request.state.cookies.to_dict() == {"theme": "dark"}

    @pytest.mark.asyncio
    async def test_emits_session_and_each_cookie(self, store: CookieSessionStore) -> None:
        session_filter = SessionFilter(
            store,
            session_policy=CookiePolicy(http_only=True),
            cookie_policy=CookiePolicy(),
        )
        request = _make_request(cookies={"theme": "dark", "lang": "en"})

        result = await session_filter.do_filter(request, AsyncMock(return_value=Response()))

        emitted = _set_cookies(result)
        assert set(emitted) == {"_session_id", "theme", "lang"}
        assert "HttpOnly" in emitted["_session_id"]
        assert "HttpOnly" not in emitted["theme"]
        for header in emitted.values():
            assert "samesite=strict" in header.lower()
            assert "Path=/" in header

    @pytest.mark.asyncio
    async def test_persists_unmodified_session(self, store: CookieSessionStore) -> None:
        token = store.persist(store.load(None))
        session_id = store.load(token).id
        session_filter = SessionFilter(store)

        result = await session_filter.do_filter(
            _make_request(cookies={"_session_id": token}),
            AsyncMock(return_value=Response()),
        )

        header = _set_cookies(result)["_session_id"]
        new_token = header.split(";", 1)[0].split("=", 1)[1]
        assert store.load(new_token).id == session_id

    @pytest.mark.asyncio
    async def test_handler_changes_are_persisted(self, store: CookieSessionStore) -> None:
        session_filter = SessionFilter(store, cookie_name="sid")
        request = _make_request()

        async def handler(req):
            req.state.session["user"] = "ada"
            req.state.cookies["seen"] = "yes"
            return Response()

        result = await session_filter.do_filter(request, handler)

        emitted = _set_cookies(result)
        token = emitted["sid"].split(";", 1)[0].split("=", 1)[1]
        assert store.load(token)["user"] == "ada"
        assert emitted["seen"].startswith("seen=yes")

    @pytest.mark.asyncio
    async def test_nothing_written_when_handler_raises(self, store: CookieSessionStore) -> None:
        session_filter = SessionFilter(store)
        call_next = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await session_filter.do_filter(_make_request(), call_next)

    @pytest.mark.asyncio
    async def test_tampered_cookie_starts_fresh(self, store: CookieSessionStore) -> None:
        session_filter = SessionFilter(store)
        request = _make_request(cookies={"_session_id": "forged.token.sig"})

        await session_filter.do_filter(request, AsyncMock(return_value=Response()))

        assert request.state.session.is_new is True
        assert "_session_id" not in request.state.cookies

    @pytest.mark.asyncio
    async def test_unwritable_cookie_names_are_dropped(self, store: CookieSessionStore) -> None:
        session_filter = SessionFilter(store)
        request = _make_request(cookies={"good": "1", "a@b": "2", "path": "/x", "a b": "3"})

        result = await session_filter.do_filter(request, AsyncMock(return_value=Response()))

        assert request.state.cookies.to_dict() == {"good": "1"}
        assert set(_set_cookies(result)) == {"_session_id", "good"}

    def test_order_runs_after_request_logging(self) -> None:
        assert get_order(SessionFilter) == HIGHEST_PRECEDENCE + 200

    def test_cookie_name_property(self, store: CookieSessionStore) -> None:
        assert SessionFilter(store).cookie_name == "_session_id"


class TestRequestStateHelpers:
    def test_helpers_return_attached_state(self) -> None:
        request = _make_request()
        request.state.session = object()
        request.state.cookies = object()
        assert get_session(request) is request.state.session
        assert get_cookies(request) is request.state.cookies

    def test_get_session_without_filter(self) -> None:
        with pytest.raises(SessionflyException) as exc_info:
            get_session(_make_request())
        assert exc_info.value.code == "SESSION_FILTER_MISSING"

    def test_get_cookies_without_filter(self) -> None:
        with pytest.raises(SessionflyException):
            get_cookies(_make_request())
