# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import NO_EXPIRATION, SessionClaims, TokenType, User, VerificationToken
from .updates import (
    SetAdmin,
    SetCanPost,
    SetEmail,
    SetLastEmailChange,
    SetLastPasswordChange,
    SetLikedArticles,
    SetPasswordHash,
    SetProfilePicture,
    SetProfilePictureChangedAt,
    SetVerified,
    UserFieldUpdate,
)

__all__ = [
    "NO_EXPIRATION",
    "SessionClaims",
    "SetAdmin",
    "SetCanPost",
    "SetEmail",
    "SetLastEmailChange",
    "SetLastPasswordChange",
    "SetLikedArticles",
    "SetPasswordHash",
    "SetProfilePicture",
    "SetProfilePictureChangedAt",
    "SetVerified",
    "TokenType",
    "User",
    "UserFieldUpdate",
    "VerificationToken",
]
