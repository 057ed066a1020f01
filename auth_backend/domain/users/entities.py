# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def new_user_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True, frozen=True)
class UserProfile:
    """Public view of a user. Carries no credential material."""

    id: str
    username: str
    created_at: datetime
    email: str | None = None
    full_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "full_name": self.full_name,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class User:

    id: str
    username: str
    password_hash: str = field(repr=False)
    created_at: datetime
    email: str | None = None
    full_name: str | None = None

    def to_profile(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            username=self.username,
            created_at=self.created_at,
            email=self.email,
            full_name=self.full_name,
        )


@dataclass(slots=True, frozen=True)
class TokenPayload:

    subject: str
    username: str
    issued_at: datetime
    expires_at: datetime
