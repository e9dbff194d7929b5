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
"""Global exception handler — RFC 7807 inspired error responses."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import JSONResponse

from sessionfly.kernel.exceptions import (
    ConfigurationException,
    InvalidRequestException,
    InvalidTokenException,
    SecurityException,
    SessionflyException,
)
from sessionfly.web.adapters.starlette.filters.request_logging_filter import REQUEST_ID_HEADER

logger = structlog.get_logger("sessionfly.web")

# Exception -> HTTP status code mapping (most specific first)
_STATUS_MAP: dict[type, int] = {
    InvalidRequestException: 400,
    InvalidTokenException: 401,
    SecurityException: 401,
    ConfigurationException: 500,
}


def _get_status_code(exc: Exception) -> int:
    for exc_type, status in _STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return status
    return 500


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all exceptions with structured JSON responses.

    Client errors raised as :class:`SessionflyException` (for instance an
    illegal cookie name set on the jar) keep their message and code. Messages
    of server errors are logged, never returned.
    """
    request_id = getattr(request.state, "request_id", None) or uuid.uuid4().hex
    status = _get_status_code(exc)

    error: dict[str, Any] = {
        "request_id": request_id,
        "timestamp": datetime.now(UTC).isoformat(),
        "status": status,
        "path": request.url.path,
    }
    if isinstance(exc, SessionflyException) and status < 500:
        error["message"] = str(exc)
        error["code"] = exc.code or type(exc).__name__
        if exc.context:
            error["context"] = exc.context
    else:
        logger.exception("unhandled_exception", path=request.url.path, request_id=request_id)
        error["message"] = "Internal server error"
        error["code"] = "INTERNAL_ERROR"

    return JSONResponse({"error": error}, status_code=status, headers={REQUEST_ID_HEADER: request_id})
