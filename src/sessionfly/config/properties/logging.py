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
"""Logging configuration properties."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from sessionfly.core.config import config_properties

ROOT_LOGGER = "root"


@config_properties(prefix="sessionfly.logging")
class LoggingProperties(BaseModel):
    """Log output settings (sessionfly.logging.*).

    ``level`` maps logger names to level names; the ``root`` entry sets the
    default, e.g. ``{"root": "INFO", "sessionfly.session": "DEBUG"}``.
    """

    format: Literal["console", "json"] = "console"
    level: dict[str, str] = Field(default_factory=lambda: {ROOT_LOGGER: "INFO"})

    @field_validator("format", mode="before")
    @classmethod
    def _normalise_format(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @field_validator("level")
    @classmethod
    def _known_levels(cls, value: dict[str, str]) -> dict[str, str]:
        known = logging.getLevelNamesMapping()
        levels = {name: level.upper() for name, level in value.items()}
        unknown = sorted(level for level in levels.values() if level not in known)
        if unknown:
            raise ValueError(f"Unknown log level(s): {', '.join(unknown)}")
        return levels

    @property
    def root_level(self) -> str:
        return self.level.get(ROOT_LOGGER, "INFO")
