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
"""StructlogAdapter — routes sessionfly's structlog events through stdlib logging."""

from __future__ import annotations

import logging
import sys

import structlog

from sessionfly.config.properties.logging import ROOT_LOGGER, LoggingProperties
from sessionfly.core.config import Config


class StructlogAdapter:
    """Applies :class:`LoggingProperties` to structlog and the stdlib loggers.

    Every event carries the logger name, level and an ISO-8601 UTC timestamp,
    plus whatever is bound in structlog's context variables (the request
    logging filter binds ``request_id``). ``console`` output is for
    terminals; ``json`` emits one object per line with tracebacks rendered
    into the ``exception`` field.
    """

    def __init__(self) -> None:
        self._properties = LoggingProperties()

    @property
    def properties(self) -> LoggingProperties:
        return self._properties

    def configure(self, config: Config) -> LoggingProperties:
        """Bind ``sessionfly.logging`` from *config* and install it."""
        self._properties = config.bind(LoggingProperties)

        structlog.configure(
            processors=self._processors(),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, force=True)

        for name, level in self._properties.level.items():
            logging.getLogger(None if name == ROOT_LOGGER else name).setLevel(level)
        return self._properties

    def _processors(self) -> list[structlog.types.Processor]:
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ]
        if self._properties.format == "json":
            processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        else:
            processors.append(structlog.dev.ConsoleRenderer())
        return processors
