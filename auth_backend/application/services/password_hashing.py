"""Password hashing strategies."""

from __future__ import annotations

import bcrypt

from auth_backend.domain.users.repositories import PasswordHasher

DEFAULT_ROUNDS = 10

# bcrypt ignores input past this many bytes.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class BcryptPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bool(bcrypt.checkpw(_encode(password), hashed.encode("ascii")))
        except (ValueError, UnicodeEncodeError):
            return False
