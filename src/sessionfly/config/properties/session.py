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
"""Session subsystem configuration properties."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from sessionfly.core.config import config_properties
from sessionfly.session.cookies import is_valid_cookie_name

SameSitePolicy = Literal["strict", "lax", "none"]


@config_properties(prefix="sessionfly.session")
class SessionProperties(BaseModel):
    """Configuration for signed-cookie sessions (sessionfly.session.*).

    ``max_age`` drives both token expiry and the cookie ``Max-Age``; when
    unset, tokens never expire and cookies last for the browser session.
    Browsers reject ``SameSite=None`` without ``Secure``, so ``secure`` is
    forced on for that policy.
    """

    secret_key: str = ""
    salt: str = "sessionfly.session"
    cookie_name: str = "_session_id"
    same_site: SameSitePolicy = "strict"
    path: str = "/"
    max_age: int | None = Field(default=None, gt=0)
    secure: bool = False
    encryption_key: str | None = None

    @field_validator("cookie_name")
    @classmethod
    def _legal_cookie_name(cls, value: str) -> str:
        if not is_valid_cookie_name(value):
            raise ValueError(f"{value!r} is not a valid cookie name")
        return value

    @field_validator("same_site", mode="before")
    @classmethod
    def _normalise_same_site(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @field_validator("encryption_key", mode="before")
    @classmethod
    def _blank_encryption_key(cls, value: object) -> object:
        return value or None

    @model_validator(mode="after")
    def _secure_for_cross_site(self) -> SessionProperties:
        if self.same_site == "none":
            self.secure = True
        return self
