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
"""Tests for filter ordering."""

from sessionfly.session.filter import SessionFilter
from sessionfly.web.adapters.starlette.filters import RequestLoggingFilter
from sessionfly.web.ordering import HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE, get_order, order


class TestOrderDecorator:
    def test_sets_order_on_class(self):
        @order(5)
        class MyFilter:
            pass

        assert get_order(MyFilter) == 5

    def test_instances_report_class_order(self):
        @order(-3)
        class MyFilter:
            pass

        assert get_order(MyFilter()) == -3

    def test_preserves_class(self):
        @order(1)
        class MyFilter:
            """My doc."""

        assert MyFilter.__name__ == "MyFilter"
        assert MyFilter.__doc__ == "My doc."

    def test_undecorated_defaults_to_zero(self):
        class Plain:
            pass

        assert get_order(Plain) == 0
        assert get_order(Plain()) == 0

    def test_sorting_instances(self):
        @order(LOWEST_PRECEDENCE)
        class Last:
            pass

        @order(HIGHEST_PRECEDENCE)
        class First:
            pass

        class Middle:
            pass

        first, middle, last = First(), Middle(), Last()
        assert sorted([last, middle, first], key=get_order) == [first, middle, last]


class TestBuiltInOrder:
    def test_session_filter_is_innermost_builtin(self):
        assert get_order(RequestLoggingFilter) < get_order(SessionFilter) < 0
