from __future__ import annotations

import io
from dataclasses import dataclass

import pytest
from flask.testing import FlaskClient

from catalog.app import create_app
from catalog.auth import REFRESH_COOKIE, TOKEN_COOKIE
from catalog.infrastructure.container import Container
from catalog.infrastructure.db import build_engine
from catalog.tests.fakes import FakeClock, InMemoryObjectStore, RecordingMailSender

USERS = "/api/v1/users"
PASSWORD = "correct-horse"


@dataclass
class Api:
    client: FlaskClient
    mail: RecordingMailSender
    objects: InMemoryObjectStore
    clock: FakeClock

    def register(self, username: str = "alice", password: str = PASSWORD):
        # Accounts are created an hour back so the short reset cooldown has passed.
        self.clock.advance(-60 * 60)
        try:
            return self.client.post(
                f"{USERS}/register",
                json={"username": username, "password": password, "email": f"{username}@x.com"},
            )
        finally:
            self.clock.advance(60 * 60)

    def login(self, username: str = "alice", password: str = PASSWORD):
        return self.client.post(
            f"{USERS}/login", json={"username": username, "password": password}
        )

    def verified_session(self, username: str = "alice") -> None:
        self.register(username)
        code = self.mail.last("verification").secret
        assert self.client.get(f"{USERS}/verify/{code}").status_code == 200
        assert self.login(username).status_code == 200


@pytest.fixture()
def api():
    engine = build_engine("sqlite://")
    mail = RecordingMailSender()
    objects = InMemoryObjectStore()
    clock = FakeClock()
    app = create_app(Container(engine=engine, mail=mail, objects=objects, clock=clock))
    app.config.update(TESTING=True)
    yield Api(app.test_client(), mail, objects, clock)
    engine.dispose()


def _message(response) -> str:
    return response.get_json()["response"]["message"]


def test_register_and_conflicts(api: Api) -> None:
    created = api.register()
    duplicate = api.register()
    weak = api.register("bob", password="short")

    assert created.status_code == 200
    assert created.get_json() == {
        "status": 200,
        "response": {"message": "user registered successfully"},
    }
    assert duplicate.status_code == 409
    assert weak.status_code == 400
    assert _message(weak) == "password must be at least 8 characters long"
    assert api.mail.last("verification").username == "alice"


def test_malformed_payload_is_rejected(api: Api) -> None:
    response = api.client.post(
        f"{USERS}/register",
        json={"username": "bad name!", "password": PASSWORD, "email": "a@x.com"},
    )

    body = response.get_json()
    assert response.status_code == 400
    assert body["response"]["message"] == "invalid request payload"
    assert body["response"]["fields"] == ["username"]


def test_login_sets_session_cookies(api: Api) -> None:
    api.register()

    wrong = api.login(password="nope-nope")
    response = api.login()

    assert wrong.status_code == 401
    assert _message(wrong) == "invalid login credentials"
    assert response.status_code == 200
    payload = response.get_json()["response"]
    assert payload["user"]["Username"] == "alice"
    assert payload["user"]["Verified"] is False
    token_cookie = api.client.get_cookie(TOKEN_COOKIE)
    assert token_cookie is not None
    assert token_cookie.value == payload["accessToken"]
    assert api.client.get_cookie(REFRESH_COOKIE).value == payload["refreshToken"]
    assert "HttpOnly" in response.headers.getlist("Set-Cookie")[0]


def test_profile_requires_a_session(api: Api) -> None:
    api.register()
    assert api.client.get(f"{USERS}/me").status_code == 400

    api.login()
    response = api.client.get(f"{USERS}/me")

    user = response.get_json()["response"]["user"]
    assert response.status_code == 200
    assert user["Username"] == "alice"
    assert user["ProfilePic"] == "http://assets.test/static/images/pfp.png"
    assert "PasswordHash" not in user


def test_refresh_and_logout(api: Api) -> None:
    api.register()
    api.login()

    refreshed = api.client.post(f"{USERS}/refresh", json={})
    logged_out = api.client.post(f"{USERS}/logout")

    assert refreshed.status_code == 200
    assert refreshed.get_json()["response"]["user"]["Username"] == "alice"
    assert logged_out.status_code == 200
    assert api.client.get_cookie(TOKEN_COOKIE) is None
    assert api.client.get_cookie(REFRESH_COOKIE) is None
    missing = api.client.post(f"{USERS}/refresh", json={})
    assert missing.status_code == 400
    assert _message(missing) == "missing refresh token"


def test_unverified_accounts_cannot_change_password(api: Api) -> None:
    api.register()
    api.login()

    response = api.client.put(
        f"{USERS}/password", json={"oldPassword": PASSWORD, "newPassword": "another-pass"}
    )

    assert response.status_code == 403
    assert _message(response) == "account not verified"


def test_verified_account_changes_password(api: Api) -> None:
    api.verified_session()

    wrong = api.client.put(
        f"{USERS}/password", json={"oldPassword": "not-mine!", "newPassword": "another-pass"}
    )
    changed = api.client.put(
        f"{USERS}/password", json={"oldPassword": PASSWORD, "newPassword": "another-pass"}
    )

    assert wrong.status_code == 401
    assert changed.status_code == 200
    assert api.login(password="another-pass").status_code == 200
    assert api.login().status_code == 401


def test_email_verification_link_is_single_use(api: Api) -> None:
    api.register()
    code = api.mail.last("verification").secret

    first = api.client.get(f"{USERS}/verify/{code}")
    second = api.client.get(f"{USERS}/verify/{code}")

    assert first.status_code == 200
    assert _message(first) == "email verified"
    assert second.status_code == 404


def test_email_change_is_cooled_down_after_registration(api: Api) -> None:
    api.verified_session()

    response = api.client.put(
        f"{USERS}/email", json={"newEmail": "alice@new.com", "password": PASSWORD}
    )

    assert response.status_code == 429


def test_password_reset_flow_keeps_the_session_private(api: Api) -> None:
    api.verified_session()
    api.client.post(f"{USERS}/logout")

    requested = api.client.post(f"{USERS}/password/reset", json={"username": "alice"})

    assert requested.status_code == 200
    assert requested.get_json() == {
        "status": 200,
        "response": {"message": "password reset email sent"},
    }
    assert api.client.get_cookie(TOKEN_COOKIE) is None

    code = api.mail.last("password_reset").secret
    reset = api.client.get(f"{USERS}/password/reset/{code}")
    new_password = api.mail.last("new_password").secret

    assert reset.status_code == 200
    assert new_password.startswith("alice")
    assert api.login(password=new_password).status_code == 200
    assert api.client.get(f"{USERS}/password/reset/{code}").status_code == 404


def test_profile_picture_upload(api: Api) -> None:
    api.verified_session()

    missing = api.client.put(
        f"{USERS}/profile-picture", data={}, content_type="multipart/form-data"
    )
    empty = api.client.put(
        f"{USERS}/profile-picture",
        data={"image": (io.BytesIO(b""), "empty.png")},
        content_type="multipart/form-data",
    )
    changed = api.client.put(
        f"{USERS}/profile-picture",
        data={"image": (io.BytesIO(b"fake image bytes"), "me.png")},
        content_type="multipart/form-data",
    )
    again = api.client.put(
        f"{USERS}/profile-picture",
        data={"image": (io.BytesIO(b"fake image bytes"), "me.png")},
        content_type="multipart/form-data",
    )

    assert _message(missing) == "missing image"
    assert _message(empty) == "empty image"
    assert changed.status_code == 200
    (object_id,) = api.objects.objects
    picture = changed.get_json()["response"]["user"]["ProfilePic"]
    assert picture == f"http://assets.test/static/images/{object_id}.png"
    assert again.status_code == 403


def test_delete_account(api: Api) -> None:
    api.verified_session()
    api.client.put(
        f"{USERS}/profile-picture",
        data={"image": (io.BytesIO(b"fake image bytes"), "me.png")},
        content_type="multipart/form-data",
    )
    (object_id,) = api.objects.objects

    wrong = api.client.delete(f"{USERS}/account", json={"password": "not-mine!"})
    deleted = api.client.delete(f"{USERS}/account", json={"password": PASSWORD})

    assert wrong.status_code == 403
    assert deleted.status_code == 200
    assert _message(deleted) == "account deleted successfully"
    assert api.objects.removed == [object_id]
    assert api.client.get_cookie(TOKEN_COOKIE) is None
    assert api.login().status_code == 401


def test_health_metrics_and_headers(api: Api) -> None:
    api.register()

    health = api.client.get("/api/health")
    metrics = api.client.get("/api/metrics")

    assert health.status_code == 200
    assert health.get_json() == {"ok": True, "database": "ok"}
    assert health.headers["X-Frame-Options"] == "DENY"
    assert metrics.status_code == 200
    assert b"catalog_account_operations_total" in metrics.data
