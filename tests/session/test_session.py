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
"""Tests for Session — reserved id, typing, and assign-if-absent."""

from __future__ import annotations

import pytest

from sessionfly.session.session import SESSION_ID_KEY, Session


class TestSessionBasics:
    def test_session_id_is_an_entry(self) -> None:
        session = Session("abc")
        assert session.id == "abc"
        assert session[SESSION_ID_KEY] == "abc"
        assert session.to_dict() == {"session_id": "abc"}

    def test_constructor_id_wins_over_data(self) -> None:
        session = Session("new", {"session_id": "old", "k": "v"})
        assert session.id == "new"
        assert session["k"] == "v"

    def test_data_is_copied(self) -> None:
        data = {"k": "v"}
        session = Session("abc", data)
        session["k"] = "changed"
        assert data == {"k": "v"}

    def test_new_and_modified_flags(self) -> None:
        session = Session("abc", is_new=True)
        assert session.is_new is True
        assert session.modified is False
        session["k"] = "v"
        assert session.modified is True

    def test_mapping_protocol(self) -> None:
        session = Session("abc", {"a": "1"})
        assert len(session) == 2
        assert set(session) == {"session_id", "a"}
        assert session.get("missing") is None
        del session["a"]
        assert "a" not in session

    def test_session_id_cannot_be_removed(self) -> None:
        session = Session("abc")
        with pytest.raises(KeyError):
            del session[SESSION_ID_KEY]

    @pytest.mark.parametrize(("key", "value"), [(1, "v"), ("k", 1), ("k", None), ("k", ["v"])])
    def test_only_strings_accepted(self, key, value) -> None:
        session = Session("abc")
        with pytest.raises(TypeError):
            session[key] = value


class TestSessionSetIfAbsent:
    def test_assigns_missing_key(self) -> None:
        session = Session("abc")
        assert session.set_if_absent("session_hello", "World") == "World"
        assert session["session_hello"] == "World"
        assert session.modified is True

    def test_keeps_truthy_value(self) -> None:
        session = Session("abc", {"session_hello": "Earth"})
        assert session.set_if_absent("session_hello", "World") == "Earth"
        assert session["session_hello"] == "Earth"
        assert session.modified is False

    def test_replaces_falsy_value(self) -> None:
        session = Session("abc", {"session_hello": ""})
        assert session.set_if_absent("session_hello", "World") == "World"
        assert session["session_hello"] == "World"

    def test_idempotent(self) -> None:
        once = Session("abc")
        once.set_if_absent("k", "v")

        twice = Session("abc")
        twice.set_if_absent("k", "v")
        twice.set_if_absent("k", "v")

        assert once.to_dict() == twice.to_dict()

    def test_existing_session_id_is_kept(self) -> None:
        session = Session("abc")
        session.set_if_absent(SESSION_ID_KEY, "other")
        assert session.id == "abc"
