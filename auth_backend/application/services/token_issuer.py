# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless signed access tokens.

Tokens are HMAC-signed JWTs carrying ``sub`` (user id), ``username``, ``iat``
and ``exp``. The payload is integrity-protected, not encrypted.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from auth_backend.domain.users.entities import TokenPayload, User
from auth_backend.domain.users.exceptions import TokenExpiredError, TokenInvalidError
from auth_backend.domain.users.repositories import TokenIssuer

DEFAULT_TTL_SECONDS = 24 * 60 * 60

_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenIssuer(TokenIssuer):
    def __init__(
        self,
        secret: str,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret is required")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._secret = secret
        self._ttl = timedelta(seconds=ttl_seconds)
        self._algorithm = algorithm
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, user: User) -> str:
        issued_at = self._clock().replace(microsecond=0)
        payload = {
            "sub": user.id,
            "username": user.username,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenPayload:
        """Decode ``token`` and check signature and expiry.

        Raises:
            TokenExpiredError: the token is well-formed and signed but past ``exp``.
            TokenInvalidError: anything else wrong with it.
        """
        if not isinstance(token, str) or not token:
            raise TokenInvalidError(context={"reason": "missing"})

        # Compact JWS is ASCII; PyJWT encodes the string before its own checks.
        try:
            token.encode("ascii")
        except UnicodeEncodeError as exc:
            raise TokenInvalidError(context={"reason": "encoding"}) from exc

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError(context={"reason": type(exc).__name__}) from exc

        subject = claims.get("sub")
        username = claims.get("username")
        if not isinstance(subject, str) or not subject or not isinstance(username, str):
            raise TokenInvalidError(context={"reason": "claims"})

        try:
            issued_at = datetime.fromtimestamp(claims["iat"], tz=UTC)
            expires_at = datetime.fromtimestamp(claims["exp"], tz=UTC)
        except (TypeError, ValueError, OverflowError, OSError) as exc:
            raise TokenInvalidError(context={"reason": "timestamps"}) from exc

        return TokenPayload(
            subject=subject,
            username=username,
            issued_at=issued_at,
            expires_at=expires_at,
        )
