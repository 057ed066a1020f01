# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from auth_backend.application.services.auth_service import AuthService
from auth_backend.application.services.password_hashing import BcryptPasswordHasher
from auth_backend.application.services.password_policy import PasswordPolicy
from auth_backend.application.services.token_issuer import JwtTokenIssuer
from auth_backend.infrastructure.repositories.users.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from auth_backend.interfaces.http.controllers.auth_controller import AuthController
from auth_backend.interfaces.http.controllers.misc_controller import MiscController
from auth_backend.interfaces.http.guards import JwtAuthGuard
from auth_backend.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config

    @cached_property
    def config(self) -> AppConfig:
        return self._config or load_config()

    @cached_property
    def password_policy(self) -> PasswordPolicy:
        return PasswordPolicy(min_length=self.config.auth.password_min_length)

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(rounds=self.config.auth.password_hash_rounds)

    @cached_property
    def token_issuer(self) -> JwtTokenIssuer:
        return JwtTokenIssuer(
            self.config.auth.jwt_secret,
            ttl_seconds=self.config.auth.token_ttl_seconds,
            algorithm=self.config.auth.jwt_algorithm,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    @cached_property
    def auth_service(self) -> AuthService:
        return AuthService(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_issuer,
            password_policy=self.password_policy,
        )

    @cached_property
    def auth_guard(self) -> JwtAuthGuard:
        return JwtAuthGuard(auth_service=self.auth_service)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(auth_service=self.auth_service, guard=self.auth_guard)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(metrics_enabled=self.config.observability.metrics_enabled)
