# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from auth_backend.application.services.password_policy import PasswordPolicy
from auth_backend.domain.users.entities import User, UserProfile, new_user_id
from auth_backend.domain.users.exceptions import (
    InvalidCredentialsError,
    TokenInvalidError,
    UnauthorizedAccessError,
    UsernameTakenError,
    WeakPasswordError,
)
from auth_backend.domain.users.repositories import PasswordHasher, TokenIssuer, UserRepository
from auth_backend.shared.logging import logger

# Verified against when the username is unknown so that both failure paths
# perform one hash verification.
_DUMMY_PASSWORD = "dummy-password-for-timing"


class AuthService:
    """Registration, credential validation and token issuance.

    Holds only read-only collaborators, so one instance serves all requests.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        tokens: TokenIssuer,
        password_policy: PasswordPolicy | None = None,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._tokens = tokens
        self._password_policy = password_policy or PasswordPolicy()
        self._dummy_hash = password_hasher.hash(_DUMMY_PASSWORD)

    def register(
        self,
        username: str,
        password: str,
        *,
        email: str | None = None,
        full_name: str | None = None,
    ) -> UserProfile:
        if not self._password_policy.is_strong(password):
            logger.info(f"auth.register: weak password username={username}")
            raise WeakPasswordError(context={"message": self._password_policy.describe()})

        hashed = self._password_hasher.hash(password)

        if self._users.find_by_username(username) is not None:
            logger.info(f"auth.register: username taken username={username}")
            raise UsernameTakenError()

        user = User(
            id=new_user_id(),
            username=username,
            password_hash=hashed,
            created_at=datetime.now(UTC),
            email=email,
            full_name=full_name,
        )
        # The store's unique constraint settles races the lookup above cannot.
        persisted = self._users.add(user)
        logger.info(f"auth.register: ok user_id={persisted.id}")
        return persisted.to_profile()

    def validate_credentials(self, username: str, password: str) -> User | None:
        user = self._users.find_by_username(username)
        hashed = user.password_hash if user is not None else self._dummy_hash
        password_valid = self._password_hasher.verify(password, hashed)

        if user is None or not password_valid:
            logger.info(f"auth.validate: rejected username={username}")
            return None
        return user

    def validate_by_id(self, user_id: str) -> User | None:
        return self._users.find_by_id(user_id)

    def login(self, user: User) -> str:
        token = self._tokens.issue(user)
        logger.info(f"auth.login: ok user_id={user.id}")
        return token

    def authenticate(self, username: str, password: str) -> str:
        user = self.validate_credentials(username, password)
        if user is None:
            raise InvalidCredentialsError()
        return self.login(user)

    def resolve_principal(self, token: str | None) -> User:
        if not token:
            raise UnauthorizedAccessError()

        try:
            payload = self._tokens.verify(token)
        except TokenInvalidError as exc:
            logger.info(f"auth.guard: rejected token reason={exc.code}")
            raise UnauthorizedAccessError() from exc

        user = self.validate_by_id(payload.subject)
        if user is None:
            logger.info(f"auth.guard: rejected unknown subject user_id={payload.subject}")
            raise UnauthorizedAccessError()
        return user
