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
"""Client-side session store — the whole session lives in the signed cookie."""

from __future__ import annotations

import uuid

import structlog

from sessionfly.session.codec import CookieCodec
from sessionfly.session.session import SESSION_ID_KEY, Session

logger = structlog.get_logger("sessionfly.session")


class CookieSessionStore:
    """SessionStore implementation backed by :class:`CookieCodec`.

    Nothing is kept server-side; the codec's secret is the only shared state.
    """

    def __init__(self, codec: CookieCodec) -> None:
        self._codec = codec

    @property
    def codec(self) -> CookieCodec:
        return self._codec

    def load(self, token: str | None) -> Session:
        data = self._codec.decode(token)
        if data is None:
            session = Session(self._new_id(), is_new=True)
            logger.debug("session_created", reason="invalid_token" if token else "no_token")
            return session

        session_id = data.get(SESSION_ID_KEY) or self._new_id()
        return Session(session_id, data)

    def persist(self, session: Session) -> str:
        return self._codec.encode(session.to_dict())

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex
