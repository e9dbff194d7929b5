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
"""Filter chain middleware that lets filters write cookies after the handler."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from sessionfly.web.ordering import get_order
from sessionfly.web.ports.filter import CallNext, WebFilter


class WebFilterChainMiddleware:
    """Pure ASGI middleware running :class:`WebFilter` instances in ``@order``.

    Route handlers stream their response through ASGI ``send``, which would
    put the headers on the wire before a filter could add the session
    cookie. The routed application is therefore run to completion against a
    collecting ``send`` and its response is handed up the chain as a
    Starlette :class:`Response`; only the outermost call writes it out.

    Non-HTTP scopes (lifespan, websockets) bypass the chain.
    """

    def __init__(self, app: ASGIApp, filters: Sequence[WebFilter] = ()) -> None:
        self.app = app
        self._filters = sorted(filters, key=get_order)

    @property
    def filters(self) -> list[WebFilter]:
        return list(self._filters)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def route(request: Any) -> Response:
            return await _collect(self.app, scope, receive)

        handler: CallNext = route
        for web_filter in reversed(self._filters):
            handler = _link(web_filter, handler)

        response: Response = await handler(Request(scope, receive, send))
        await response(scope, receive, send)


def _link(web_filter: WebFilter, inner: CallNext) -> CallNext:
    async def call(request: Any) -> Any:
        return await web_filter.do_filter(request, inner)

    return call


async def _collect(app: ASGIApp, scope: Scope, receive: Receive) -> Response:
    """Run *app* and rebuild what it sent as an unsent :class:`Response`."""
    start: Message = {}
    chunks: list[bytes] = []

    async def capture(message: Message) -> None:
        if message["type"] == "http.response.start":
            start.update(message)
        elif message["type"] == "http.response.body":
            chunks.append(message.get("body", b""))

    await app(scope, receive, capture)

    response = Response(content=b"".join(chunks), status_code=start.get("status", 500))
    response.raw_headers[:] = list(start.get("headers", []))
    return response
