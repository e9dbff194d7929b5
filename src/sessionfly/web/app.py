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
"""Sessionfly web application factory built on Starlette."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import Route

from sessionfly.config.properties.session import SessionProperties
from sessionfly.controllers.sessions import routes as session_routes
from sessionfly.core.config import Config
from sessionfly.kernel.exceptions import SessionflyException
from sessionfly.logging.structlog_adapter import StructlogAdapter
from sessionfly.session.adapters.cookie import CookieSessionStore
from sessionfly.session.codec import CookieCodec
from sessionfly.session.cookies import CookiePolicy
from sessionfly.session.filter import SessionFilter
from sessionfly.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from sessionfly.web.adapters.starlette.filters import RequestLoggingFilter
from sessionfly.web.errors import global_exception_handler
from sessionfly.web.ports.filter import WebFilter


def build_session_filter(props: SessionProperties) -> SessionFilter:
    """Wire codec, store and cookie policies from bound session properties."""
    store = CookieSessionStore(CookieCodec.from_properties(props))
    return SessionFilter(
        store=store,
        cookie_name=props.cookie_name,
        session_policy=CookiePolicy.for_session(props),
        cookie_policy=CookiePolicy.for_plain(props),
    )


def create_app(
    config: Config | None = None,
    debug: bool = False,
    extra_filters: list[WebFilter] | None = None,
    extra_routes: list[Route] | None = None,
    configure_logging: bool = True,
) -> Starlette:
    """Create the Starlette application.

    Includes:
    - WebFilter chain (request logging, sessions, + extra filters, in ``@order``)
    - ``GET /sessions`` demonstration endpoint
    - Global exception handler (RFC 7807 style)

    Raises:
        ConfigurationException: If the logging or session properties are
            invalid or no secret key is configured.
    """
    config = config if config is not None else Config.from_file()

    if configure_logging:
        StructlogAdapter().configure(config)

    props = config.bind(SessionProperties)
    filters: list[WebFilter] = [RequestLoggingFilter(), build_session_filter(props), *(extra_filters or [])]

    app = Starlette(
        debug=debug,
        middleware=[Middleware(WebFilterChainMiddleware, filters=filters)],
        routes=[*session_routes, *(extra_routes or [])],
    )
    app.state.session_properties = props
    # SessionflyException is answered inside the filter chain (cookies are
    # still written); anything else by the outermost ServerErrorMiddleware.
    app.add_exception_handler(SessionflyException, global_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    return app
