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
"""Session demonstration endpoint."""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from sessionfly.session.filter import get_cookies, get_session

SESSION_KEY = "session_hello"
COOKIE_KEY = "cookies_hello"
GREETING = "World"


async def handle_index(request: Request) -> JSONResponse:
    """Initialise one session entry and one plain cookie, then echo both.

    Both writes are assign-if-absent, so repeated requests from the same
    client keep whatever value is already there.
    """
    session = get_session(request)
    cookies = get_cookies(request)

    session.set_if_absent(SESSION_KEY, GREETING)
    cookies.set_if_absent(COOKIE_KEY, GREETING)

    return JSONResponse({"session": session.to_dict(), "cookies": cookies.to_dict()})


routes = [
    Route("/sessions", handle_index, methods=["GET"]),
]
