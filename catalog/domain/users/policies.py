# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Account rules that do not depend on storage."""

from __future__ import annotations

import re

from .entities import SessionClaims

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8

PROFILE_PICTURE_COOLDOWN = 7 * 24 * 60 * 60
EMAIL_CHANGE_COOLDOWN = 3 * 60 * 60
PASSWORD_RESET_COOLDOWN = 15 * 60
CHANGE_TOKEN_TTL = 6 * 60 * 60

VERIFICATION_CODE_BYTES = 24
GENERATED_PASSWORD_SUFFIX_BYTES = 4

PROFILE_PICTURE_SIZE = (350, 350)
DEFAULT_PROFILE_PICTURE_ID = "pfp"

_REPLACEABLE_IMAGE = re.compile(r"images/([a-f0-9-]+)\.(?:png|jpg|jpeg|gif)$")
_STORED_IMAGE = re.compile(r"images/([^/]+)\.")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def is_valid_password(password: str) -> bool:
    return len(password or "") >= MIN_PASSWORD_LENGTH


def cooldown_active(last_action_at: int | None, window: int, now: int) -> bool:
    if last_action_at is None:
        return False
    return last_action_at + window > now


def profile_picture_change_allowed(changed_at: int | None, now: int) -> bool:
    return not cooldown_active(changed_at, PROFILE_PICTURE_COOLDOWN, now)


def profile_picture_url(base_url: str, image_id: str) -> str:
    return f"{base_url.rstrip('/')}/images/{image_id}.png"


def default_profile_picture_url(base_url: str) -> str:
    return profile_picture_url(base_url, DEFAULT_PROFILE_PICTURE_ID)


def replaceable_image_id(url: str) -> str | None:
    """Id of a previously uploaded picture, ``None`` for anything else."""

    match = _REPLACEABLE_IMAGE.search(url or "")
    return match.group(1) if match else None


def stored_image_id(url: str) -> str | None:
    match = _STORED_IMAGE.search(url or "")
    return match.group(1) if match else None


def is_default_profile_picture(url: str) -> bool:
    return stored_image_id(url) == DEFAULT_PROFILE_PICTURE_ID


def is_admin(claims: SessionClaims | None) -> bool:
    return bool(claims and claims.admin)


def can_post(claims: SessionClaims | None) -> bool:
    return bool(claims and (claims.admin or claims.can_post))


def can_act_for(claims: SessionClaims | None, username: str) -> bool:
    """Owner of the account or an admin."""

    if claims is None:
        return False
    return claims.admin or claims.username == username
