# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password strength rules applied at registration."""

from __future__ import annotations

import re

_UPPERCASE_RE = re.compile(r"[A-Z]")
_DIGIT_RE = re.compile(r"[0-9]")

DEFAULT_MIN_LENGTH = 8


class PasswordPolicy:
    def __init__(self, min_length: int = DEFAULT_MIN_LENGTH) -> None:
        if min_length < 0:
            raise ValueError("min_length must be non-negative")
        self._min_length = min_length

    @property
    def min_length(self) -> int:
        return self._min_length

    def is_strong(self, password: str) -> bool:
        # Length must strictly exceed the minimum.
        return (
            len(password) > self._min_length
            and _UPPERCASE_RE.search(password) is not None
            and _DIGIT_RE.search(password) is not None
        )

    def describe(self) -> str:
        return (
            "Password must contain at least one capital letter and one number, "
            f"and be longer than {self._min_length} characters."
        )
