# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import TokenPayload, User, UserProfile, new_user_id
from .exceptions import (
    InvalidCredentialsError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedAccessError,
    UsernameTakenError,
    WeakPasswordError,
)
from .repositories import PasswordHasher, TokenIssuer, UserRepository

__all__ = [
    "InvalidCredentialsError",
    "PasswordHasher",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenIssuer",
    "TokenPayload",
    "UnauthorizedAccessError",
    "User",
    "UserProfile",
    "UserRepository",
    "UsernameTakenError",
    "WeakPasswordError",
    "new_user_id",
]
