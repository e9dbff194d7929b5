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
"""Request logging filter: one structured event per request, with the session outcome."""

from __future__ import annotations

import time
import uuid
from typing import Any

import structlog

from sessionfly.web.ordering import HIGHEST_PRECEDENCE, order
from sessionfly.web.ports.filter import CallNext

REQUEST_ID_HEADER = "X-Request-Id"

logger = structlog.get_logger("sessionfly.web")


@order(HIGHEST_PRECEDENCE + 100)
class RequestLoggingFilter:
    """Logs ``http_request`` once the response (and its cookies) are final.

    A request id is taken from ``X-Request-Id`` or generated, stored on
    ``request.state.request_id``, echoed on the response and bound into
    structlog's context variables for the duration of the request, so the
    session layer's ``session_created`` and ``session_token_rejected`` events
    carry it too.

    Runs outside :class:`~sessionfly.session.filter.SessionFilter`, so after
    ``call_next`` the session on ``request.state`` is the one that was just
    written back.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    "http_request_failed",
                    method=request.method,
                    path=request.url.path,
                    duration_ms=_elapsed_ms(started),
                    error_type=type(exc).__name__,
                )
                raise

            session = getattr(request.state, "session", None)
            logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
                new_session=session.is_new if session is not None else None,
                session_modified=session.modified if session is not None else None,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
