# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .access_tokens import (
    JwtAccessTokenIssuer,
    TokenExpiredError,
    TokenInvalidError,
    TokenSettings,
)
from .password_hashing import WerkzeugPasswordHasher

__all__ = [
    "JwtAccessTokenIssuer",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenSettings",
    "WerkzeugPasswordHasher",
]
