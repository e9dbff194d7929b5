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
"""Plain cookies — the per-request cookie jar and the uniform cookie policy."""

from __future__ import annotations

import string
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sessionfly.kernel.exceptions import InvalidRequestException

if TYPE_CHECKING:
    from sessionfly.config.properties.session import SameSitePolicy, SessionProperties

# Characters http.cookies accepts in a cookie name.
_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~:")
# Cookie attribute names; http.cookies refuses them as cookie names.
_ATTRIBUTE_NAMES = frozenset(
    {"expires", "path", "comment", "domain", "max-age", "secure", "httponly", "version", "samesite", "partitioned"}
)


def is_valid_cookie_name(name: object) -> bool:
    """Whether *name* can be written back in a ``Set-Cookie`` header."""
    return (
        isinstance(name, str)
        and bool(name)
        and _NAME_CHARS.issuperset(name)
        and name.lower() not in _ATTRIBUTE_NAMES
    )


@dataclass(frozen=True)
class CookiePolicy:
    """Attributes applied to every ``Set-Cookie`` header of one kind."""

    same_site: SameSitePolicy = "strict"
    path: str = "/"
    max_age: int | None = None
    secure: bool = False
    http_only: bool = False

    @classmethod
    def for_session(cls, props: SessionProperties) -> CookiePolicy:
        """Policy for the session token: always ``HttpOnly``."""
        return cls(
            same_site=props.same_site,
            path=props.path,
            max_age=props.max_age,
            secure=props.secure,
            http_only=True,
        )

    @classmethod
    def for_plain(cls, props: SessionProperties) -> CookiePolicy:
        """Policy for plain cookies: readable by client-side scripts."""
        return cls(
            same_site=props.same_site,
            path=props.path,
            max_age=props.max_age,
            secure=props.secure,
            http_only=False,
        )

    def apply(self, response: Any, key: str, value: str) -> None:
        """Append a ``Set-Cookie`` header for *key* to *response*."""
        response.set_cookie(
            key=key,
            value=value,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=self.http_only,
            samesite=self.same_site,
        )


class CookieJar(MutableMapping[str, str]):
    """The plain cookies of one request, plus any the handler adds.

    Every entry is written back to the client when the response is emitted.
    """

    def __init__(self, cookies: Mapping[str, str] | None = None) -> None:
        self._cookies: dict[str, str] = {}
        if cookies:
            self.update(cookies)

    @classmethod
    def from_request_cookies(
        cls,
        cookies: Mapping[str, Any],
        exclude: Iterable[str] = (),
    ) -> CookieJar:
        """Build a jar from parsed request cookies.

        Entries named in *exclude* (the session cookie), entries whose name
        could not be written back in a ``Set-Cookie`` header, and entries
        without a string value are dropped one by one.
        """
        skip = set(exclude)
        kept = {
            name: value
            for name, value in cookies.items()
            if name not in skip and is_valid_cookie_name(name) and isinstance(value, str)
        }
        return cls(kept)

    def __getitem__(self, key: str) -> str:
        return self._cookies[key]

    def __setitem__(self, key: str, value: str) -> None:
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError("Cookie names and values must be strings")
        if not is_valid_cookie_name(key):
            raise InvalidRequestException(
                f"Invalid cookie name {key!r}", code="INVALID_COOKIE_NAME", context={"name": key}
            )
        try:
            value.encode("latin-1")
        except UnicodeEncodeError:
            raise InvalidRequestException(
                f"Cookie {key!r} has a value that cannot be sent in a header",
                code="INVALID_COOKIE_VALUE",
                context={"name": key},
            ) from None
        self._cookies[key] = value

    def __delitem__(self, key: str) -> None:
        del self._cookies[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cookies)

    def __len__(self) -> int:
        return len(self._cookies)

    def __repr__(self) -> str:
        return f"CookieJar({self._cookies!r})"

    def set_if_absent(self, key: str, value: str) -> str:
        """Assign *value* only when *key* is missing or empty; return the stored value."""
        current = self._cookies.get(key)
        if current:
            return current
        self[key] = value
        return value

    def to_dict(self) -> dict[str, str]:
        return dict(self._cookies)
