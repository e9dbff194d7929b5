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
"""Sessionfly Session — signed client-side sessions and plain cookies.

Import the concrete store from the adapter package::

    from sessionfly.session.adapters.cookie import CookieSessionStore
"""

from sessionfly.session.codec import CookieCodec
from sessionfly.session.cookies import CookieJar, CookiePolicy
from sessionfly.session.filter import SessionFilter, get_cookies, get_session
from sessionfly.session.ports.outbound import SessionStore
from sessionfly.session.session import SESSION_ID_KEY, Session

__all__ = [
    "SESSION_ID_KEY",
    "CookieCodec",
    "CookieJar",
    "CookiePolicy",
    "Session",
    "SessionFilter",
    "SessionStore",
    "get_cookies",
    "get_session",
]
