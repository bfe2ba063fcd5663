# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import InvariantViolation
from .users import SessionClaims, TokenType, User, VerificationToken

__all__ = [
    "InvariantViolation",
    "SessionClaims",
    "TokenType",
    "User",
    "VerificationToken",
]
