from __future__ import annotations

import jwt
import pytest

from catalog.application.services.access_tokens import (
    JwtAccessTokenIssuer,
    MissingSigningSecretError,
    TokenExpiredError,
    TokenInvalidError,
    TokenSettings,
)
from catalog.domain.users.entities import SessionClaims
from catalog.shared.config import INSECURE_DEFAULT_SECRET
from catalog.shared.config.settings import TokenConfig
from catalog.shared.utils.clock import unix_now
from catalog.tests.fakes import ACCESS_SECRET, FakeClock, token_settings

CLAIMS = SessionClaims(
    username="alice",
    email="alice@x.com",
    admin=False,
    can_post=True,
    verified=True,
    account_created_at=1_700_000_000,
)


def test_access_token_round_trip_and_payload() -> None:
    clock = FakeClock()
    issuer = JwtAccessTokenIssuer(token_settings(), clock=clock)

    token = issuer.issue_access(CLAIMS)

    assert issuer.verify(token) == CLAIMS
    assert issuer.decode(token) == CLAIMS
    payload = jwt.decode(token, ACCESS_SECRET, algorithms=["HS256"])
    assert payload["Username"] == "alice"
    assert payload["Verified"] is True
    assert payload["exp"] - payload["iat"] == 30 * 60
    assert payload["iat"] == clock.now


def test_refresh_token_uses_its_own_secret_and_lifetime() -> None:
    issuer = JwtAccessTokenIssuer(token_settings())

    refresh = issuer.issue_refresh(CLAIMS)
    access = issuer.issue_access(CLAIMS)

    assert issuer.verify_refresh(refresh) == CLAIMS
    payload = jwt.decode(refresh, options={"verify_signature": False})
    assert payload["exp"] - payload["iat"] == 3 * 24 * 60 * 60
    with pytest.raises(TokenInvalidError):
        issuer.verify(refresh)
    with pytest.raises(TokenInvalidError):
        issuer.verify_refresh(access)


def test_expired_token_maps_to_expired_error() -> None:
    clock = FakeClock(start=unix_now() - 2 * 60 * 60)
    issuer = JwtAccessTokenIssuer(token_settings(), clock=clock)

    token = issuer.issue_access(CLAIMS)

    with pytest.raises(TokenExpiredError) as excinfo:
        issuer.verify(token)
    assert excinfo.value.status == 401
    assert excinfo.value.message == "token expired"
    # Decoding does not look at the signature or the lifetime.
    assert issuer.decode(token).username == "alice"


def test_tampered_or_garbage_tokens_are_invalid() -> None:
    issuer = JwtAccessTokenIssuer(token_settings())
    forged = jwt.encode({"Username": "mallory", "exp": unix_now() + 60}, "other-secret-0123456789abcdef")

    for token in (forged, "garbage", ""):
        with pytest.raises(TokenInvalidError) as excinfo:
            issuer.verify(token)
        assert excinfo.value.status == 403


def test_token_without_username_is_invalid() -> None:
    issuer = JwtAccessTokenIssuer(token_settings())
    token = jwt.encode({"Email": "x@y.z", "exp": unix_now() + 60}, ACCESS_SECRET)

    with pytest.raises(TokenInvalidError):
        issuer.verify(token)


def test_settings_from_config_uses_configured_secrets() -> None:
    config = TokenConfig(JWT_KEY="a" * 32, JWT_REFRESH_KEY="b" * 32, JWT_ACCESS_TTL=60)

    settings = TokenSettings.from_config(config, allow_insecure=False)

    assert settings.access_secret == "a" * 32
    assert settings.refresh_secret == "b" * 32
    assert settings.access_ttl == 60


def test_insecure_default_mode_is_explicit() -> None:
    config = TokenConfig(JWT_KEY="", JWT_REFRESH_KEY="")

    with pytest.raises(MissingSigningSecretError):
        TokenSettings.from_config(config, allow_insecure=False)

    settings = TokenSettings.from_config(config, allow_insecure=True)
    assert settings.access_secret == INSECURE_DEFAULT_SECRET
    assert settings.refresh_secret == INSECURE_DEFAULT_SECRET
