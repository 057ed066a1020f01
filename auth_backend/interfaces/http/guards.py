# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, request

from auth_backend.application.services.auth_service import AuthService
from auth_backend.domain.users.entities import User
from auth_backend.domain.users.exceptions import UnauthorizedAccessError
from auth_backend.shared.logging import logger
from auth_backend.shared.utils import client_ip

F = TypeVar("F", bound=Callable[..., Any])

_BEARER_PREFIX = "Bearer "


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if auth[: len(_BEARER_PREFIX)].lower() == _BEARER_PREFIX.lower():
        return auth[len(_BEARER_PREFIX):].strip()
    return ""


def current_user() -> User:
    """Return the principal stored by ``JwtAuthGuard.require`` for this request."""
    user = getattr(g, "current_user", None)
    if user is None:
        raise UnauthorizedAccessError()
    return cast(User, user)


class JwtAuthGuard:
    def __init__(self, *, auth_service: AuthService) -> None:
        self._auth_service = auth_service

    def require(self, view: F) -> F:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            token = bearer_token()
            if not token:
                logger.warning(
                    f"No bearer token on {request.method} {request.path} "
                    f"from {client_ip()}"
                )
                raise UnauthorizedAccessError()

            user = self._auth_service.resolve_principal(token)
            g.current_user = user
            g.user_id = user.id
            logger.debug(f"Auth OK: user={user.id} {request.method} {request.path}")
            return view(*args, **kwargs)

        return cast(F, inner)
