# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from auth_backend.shared.errors.base import DomainError


class WeakPasswordError(DomainError):
    code = "weak_password"
    status = HTTPStatus.BAD_REQUEST


class UsernameTakenError(DomainError):
    code = "username_taken"
    status = HTTPStatus.CONFLICT


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class TokenInvalidError(DomainError):
    code = "token_invalid"
    status = HTTPStatus.UNAUTHORIZED


class TokenExpiredError(TokenInvalidError):
    code = "token_expired"


class UnauthorizedAccessError(DomainError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}
