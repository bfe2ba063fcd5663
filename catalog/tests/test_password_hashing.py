from __future__ import annotations

from catalog.application.services.password_hashing import WerkzeugPasswordHasher


def test_hashes_are_salted_and_verify() -> None:
    hasher = WerkzeugPasswordHasher()

    first = hasher.hash("password1")
    second = hasher.hash("password1")

    assert first != second
    assert hasher.verify("password1", first)
    assert hasher.verify("password1", second)
    assert not hasher.verify("password2", first)
    assert not hasher.verify("", first)


def test_verify_rejects_malformed_hashes() -> None:
    hasher = WerkzeugPasswordHasher()

    assert not hasher.verify("password1", "")
    assert not hasher.verify("password1", "not-a-hash")
    assert not hasher.verify("password1", "unknown-method$salt$digest")
