# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .auth_service import AuthService
from .password_hashing import BcryptPasswordHasher
from .password_policy import PasswordPolicy
from .token_issuer import JwtTokenIssuer

__all__ = ["AuthService", "BcryptPasswordHasher", "JwtTokenIssuer", "PasswordPolicy"]
