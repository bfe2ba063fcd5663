from __future__ import annotations

import asyncio
import io
from pathlib import Path

from PIL import Image

from catalog.infrastructure.mail import SmtpMailSender
from catalog.infrastructure.resilience import CircuitBreaker
from catalog.infrastructure.storage import LocalImageStore
from catalog.shared.config import load_config
from catalog.shared.config.settings import MailConfig


def _png(size: tuple[int, int] = (40, 20)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_image_store_renders_fixed_size_png(tmp_path: Path) -> None:
    store = LocalImageStore(tmp_path / "images")

    assert asyncio.run(store.store("abc", _png(), 350, 350)) is True

    with Image.open(store.path_for("abc")) as stored:
        assert stored.format == "PNG"
        assert stored.size == (350, 350)


def test_image_store_rejects_non_images_and_traversal(tmp_path: Path) -> None:
    store = LocalImageStore(tmp_path / "images")

    assert asyncio.run(store.store("abc", b"not an image", 350, 350)) is False
    assert asyncio.run(store.store("../escape", _png(), 350, 350)) is False
    assert not (tmp_path / "escape.png").exists()


def test_image_removal_is_idempotent(tmp_path: Path) -> None:
    store = LocalImageStore(tmp_path / "images")
    asyncio.run(store.store("abc", _png(), 10, 10))

    assert asyncio.run(store.remove("abc")) is True
    assert not store.path_for("abc").exists()
    assert asyncio.run(store.remove("abc")) is True


def test_placeholder_is_created_once(tmp_path: Path) -> None:
    store = LocalImageStore(tmp_path / "images")

    path = store.ensure_placeholder("pfp", 350, 350)
    before = path.stat().st_mtime_ns
    store.ensure_placeholder("pfp", 350, 350)

    assert path.stat().st_mtime_ns == before
    with Image.open(path) as image:
        assert image.size == (350, 350)


def _mail_config(**overrides) -> MailConfig:
    values = {
        "SMTP_HOST": "smtp.test",
        "SMTP_USERNAME": "mailer",
        "SMTP_PASSWORD": "secret",
        "SMTP_FROM_EMAIL": "noreply@catalog.test",
        "FRONTEND_BASE_URL": "https://catalog.test/",
    }
    values.update(overrides)
    return MailConfig(**values)


def test_disabled_mail_sender_reports_success_without_sending(monkeypatch) -> None:
    sender = SmtpMailSender(_mail_config(SMTP_HOST=""))

    def fail(*args, **kwargs):
        raise AssertionError("smtp must not be used")

    monkeypatch.setattr(sender, "_deliver_sync", fail)

    assert asyncio.run(sender.send_verification("a@x.com", "alice", "code")) is True


def test_mail_sender_builds_links_and_delivers(monkeypatch) -> None:
    sender = SmtpMailSender(_mail_config())
    delivered = []
    monkeypatch.setattr(sender, "_deliver_sync", delivered.append)

    assert asyncio.run(sender.send_password_reset("a@x.com", "alice", "c0de")) is True

    message = delivered[0]
    assert message["To"] == "a@x.com"
    assert message["From"] == "Project Catalog <noreply@catalog.test>"
    body = message.get_payload()[0].get_payload(decode=True).decode()
    assert "https://catalog.test/password/reset/c0de" in body


def test_mail_sender_failure_is_reported_not_raised(monkeypatch) -> None:
    breaker = CircuitBreaker(name="smtp", failure_threshold=1, reset_timeout=60)
    sender = SmtpMailSender(_mail_config(), breaker=breaker)
    monkeypatch.setenv("RESILIENCE_RETRIES", "0")
    load_config.cache_clear()

    def refuse(message):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(sender, "_deliver_sync", refuse)

    assert asyncio.run(sender.send_new_password("a@x.com", "alice", "alice1234abcd")) is False
    assert breaker.is_open
    # An open circuit fails fast without reaching SMTP.
    assert asyncio.run(sender.send_new_password("a@x.com", "alice", "alice1234abcd")) is False
    load_config.cache_clear()
