from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

_USERNAME_RE = re.compile(r"[A-Za-z0-9_.\-]+")


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    # Strength rules live in PasswordPolicy.
    password: str = Field(max_length=128)
    email: str | None = Field(default=None, max_length=254)
    full_name: str | None = Field(default=None, max_length=128)

    model_config = ConfigDict(extra="ignore")

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not _USERNAME_RE.fullmatch(value):
            raise PydanticCustomError(
                "username_invalid_chars",
                "Username may contain only letters, digits, '_', '.' and '-'",
                {"pattern": _USERNAME_RE.pattern},
            )
        return value

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise PydanticCustomError("email_invalid", "Email address is malformed", {})
        return value


class LoginRequestDTO(BaseModel):
    # No length floor: empty credentials take the same path as wrong ones.
    username: str = Field(max_length=64)
    password: str = Field(max_length=128)

    model_config = ConfigDict(extra="ignore")


class AccessTokenDTO(BaseModel):
    access_token: str = Field(serialization_alias="accessToken")

