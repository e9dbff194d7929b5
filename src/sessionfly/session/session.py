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
"""Session — the per-request key-value view over a signed session cookie."""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping

SESSION_ID_KEY = "session_id"


def _check_item(key: object, value: object) -> None:
    if not isinstance(key, str) or not isinstance(value, str):
        raise TypeError(
            f"Session entries must map str to str, got {type(key).__name__} -> {type(value).__name__}"
        )


class Session(MutableMapping[str, str]):
    """Mutable ``str -> str`` mapping with a reserved ``session_id`` key.

    Attributes:
        id: The session identifier stored under ``session_id``.
        is_new: ``True`` when no valid session token arrived with the request.
        modified: ``True`` once any entry was written or removed.
    """

    def __init__(
        self,
        session_id: str,
        data: dict[str, str] | None = None,
        *,
        is_new: bool = False,
    ) -> None:
        self._data: dict[str, str] = dict(data) if data else {}
        self._data[SESSION_ID_KEY] = session_id
        self._is_new = is_new
        self._modified = False

    @property
    def id(self) -> str:
        return self._data[SESSION_ID_KEY]

    @property
    def is_new(self) -> bool:
        return self._is_new

    @property
    def modified(self) -> bool:
        return self._modified

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        _check_item(key, value)
        self._data[key] = value
        self._modified = True

    def __delitem__(self, key: str) -> None:
        if key == SESSION_ID_KEY:
            raise KeyError(f"'{SESSION_ID_KEY}' is reserved and cannot be removed")
        del self._data[key]
        self._modified = True

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Session(id={self.id!r}, is_new={self._is_new}, keys={sorted(self._data)})"

    def set_if_absent(self, key: str, value: str) -> str:
        """Assign *value* only when *key* is missing or holds a falsy value.

        Returns the value stored under *key* afterwards. Calling this again
        with the same arguments leaves the session unchanged.
        """
        current = self._data.get(key)
        if current:
            return current
        self[key] = value
        return value

    def to_dict(self) -> dict[str, str]:
        """Return a copy of every entry, ``session_id`` included."""
        return dict(self._data)
