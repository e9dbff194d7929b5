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
"""Tests for WebFilterChainMiddleware — ordering, late cookies, short-circuit."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, StreamingResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from sessionfly.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from sessionfly.web.ordering import HIGHEST_PRECEDENCE, order
from sessionfly.web.ports.filter import WebFilter

# ---------------------------------------------------------------------------
# Test filters
# ---------------------------------------------------------------------------


@order(HIGHEST_PRECEDENCE + 10)
class OuterFilter:
    """Starts the trail and stamps a cookie once the handler is done."""

    async def do_filter(self, request, call_next):
        request.state.trail = ["outer"]
        response = await call_next(request)
        response.set_cookie("outer", "1")
        return response


@order(HIGHEST_PRECEDENCE + 20)
class InnerFilter:
    async def do_filter(self, request, call_next):
        request.state.trail.append("inner")
        return await call_next(request)


class LateWriterFilter:
    """Writes a cookie from state the handler left behind."""

    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.set_cookie("seen", request.state.seen)
        return response


class BlockingFilter:
    async def do_filter(self, request, call_next):
        return JSONResponse({"error": "blocked"}, status_code=429)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _ok_handler(request: Request) -> PlainTextResponse:
    return PlainTextResponse("OK")


async def _trail_handler(request: Request) -> JSONResponse:
    return JSONResponse(getattr(request.state, "trail", []))


async def _seen_handler(request: Request) -> PlainTextResponse:
    request.state.seen = "by-handler"
    return PlainTextResponse("seen")


async def _stream_handler(request: Request) -> StreamingResponse:
    async def chunks():
        yield b"one,"
        yield b"two"

    return StreamingResponse(chunks(), media_type="text/plain")


def _make_app(*filters) -> Starlette:
    return Starlette(
        routes=[
            Route("/test", _ok_handler),
            Route("/trail", _trail_handler),
            Route("/seen", _seen_handler),
            Route("/stream", _stream_handler),
        ],
        middleware=[Middleware(WebFilterChainMiddleware, filters=list(filters))],
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestFilterChainOrdering:
    def test_filters_run_in_order_regardless_of_list_position(self):
        resp = TestClient(_make_app(InnerFilter(), OuterFilter())).get("/trail")
        assert resp.json() == ["outer", "inner"]

    def test_middleware_exposes_sorted_filters(self):
        inner, outer = InnerFilter(), OuterFilter()
        middleware = WebFilterChainMiddleware(_make_app(), filters=[inner, outer])
        assert middleware.filters == [outer, inner]

    def test_state_reaches_handler(self):
        resp = TestClient(_make_app(OuterFilter())).get("/trail")
        assert resp.json() == ["outer"]


class TestFilterChainLateWrites:
    def test_cookie_added_after_handler(self):
        resp = TestClient(_make_app(OuterFilter())).get("/test")
        assert resp.text == "OK"
        assert resp.headers["set-cookie"].startswith("outer=1")

    def test_filter_sees_state_written_by_handler(self):
        resp = TestClient(_make_app(LateWriterFilter())).get("/seen")
        assert resp.cookies["seen"] == "by-handler"

    def test_handler_headers_preserved(self):
        resp = TestClient(_make_app(OuterFilter())).get("/test")
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.headers["content-length"] == "2"

    def test_streamed_body_is_collected(self):
        resp = TestClient(_make_app(OuterFilter())).get("/stream")
        assert resp.text == "one,two"
        assert resp.headers["set-cookie"].startswith("outer=1")

    def test_router_404_still_passes_through_filters(self):
        resp = TestClient(_make_app(OuterFilter())).get("/missing")
        assert resp.status_code == 404
        assert resp.headers["set-cookie"].startswith("outer=1")


class TestFilterChainShortCircuit:
    def test_short_circuit_skips_handler_and_inner_filters(self):
        resp = TestClient(_make_app(BlockingFilter(), OuterFilter())).get("/test")
        assert resp.status_code == 429
        assert resp.json() == {"error": "blocked"}
        assert resp.headers["set-cookie"].startswith("outer=1")


class TestFilterChainPassThrough:
    def test_no_filters_passes_through(self):
        resp = TestClient(_make_app()).get("/test")
        assert resp.status_code == 200
        assert resp.text == "OK"

    def test_lifespan_bypasses_filters(self):
        with TestClient(_make_app(BlockingFilter())) as client:
            assert client.get("/test").status_code == 429

    def test_filters_satisfy_protocol(self):
        assert isinstance(OuterFilter(), WebFilter)
