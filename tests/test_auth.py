import pytest

from kanban_api.app.core.config import settings

# Auth proxying, profile writes and avatar uploads.
pytestmark = pytest.mark.api


@pytest.fixture
def alice_account(fake_db, alice):
    return fake_db.auth.add_user(alice["email"], "Wonder1and", user_id=alice["id"], username="alice-old")


def bearer(fake_db, user_id):
    return {"Authorization": f"Bearer {fake_db.auth.token_for(user_id)}"}


def test_signup_returns_user_and_session(client, fake_db):
    response = client.post(
        "/auth/signup", json={"email": "new@example.com", "username": "newbie", "password": "Passw0rd"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["user_metadata"] == {"username": "newbie"}
    assert body["session"]["access_token"]


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "not-an-email", "username": "newbie", "password": "Passw0rd"},
        {"email": "a@b..c", "username": "newbie", "password": "Passw0rd"},
        {"email": "x@[y].z", "username": "newbie", "password": "Passw0rd"},
        {"email": "new@example.com", "username": "nb", "password": "Passw0rd"},
        {"email": "new@example.com", "username": "newbie", "password": "password"},
        {"email": "new@example.com", "username": "newbie", "password": "Sh0rt"},
    ],
)
def test_signup_validation(client, fake_db, payload):
    assert client.post("/auth/signup", json=payload).status_code == 422


def test_signup_with_registered_email_returns_409(client, fake_db, alice_account):
    response = client.post(
        "/auth/signup", json={"email": alice_account["email"], "username": "again", "password": "Passw0rd"}
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "User already registered"


def test_login_with_email_merges_profile(client, fake_db, alice_account):
    response = client.post("/auth/login", json={"identifier": alice_account["email"], "password": "Wonder1and"})

    assert response.status_code == 200
    metadata = response.json()["user"]["user_metadata"]
    assert metadata["username"] == "alice"
    assert metadata["full_name"] == "Alice Liddell"


def test_login_with_username(client, fake_db, alice_account):
    response = client.post("/auth/login", json={"identifier": "alice", "password": "Wonder1and"})

    assert response.status_code == 200
    assert response.json()["user"]["id"] == alice_account["id"]


def test_login_with_unknown_username_returns_401(client, fake_db):
    response = client.post("/auth/login", json={"identifier": "ghost", "password": "Wonder1and"})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_login_with_wrong_password_returns_401(client, fake_db, alice_account):
    response = client.post("/auth/login", json={"identifier": alice_account["email"], "password": "Wrong123"})

    assert response.status_code == 401


def test_me_requires_token(client, fake_db, alice_account):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Bearer bogus"}).status_code == 401

    response = client.get("/auth/me", headers=bearer(fake_db, alice_account["id"]))

    assert response.status_code == 200
    assert response.json()["email"] == alice_account["email"]
    assert "access_token" not in response.json()


def test_logout_ends_token_session(client, fake_db, alice_account):
    headers = bearer(fake_db, alice_account["id"])

    response = client.post("/auth/logout", headers=headers)

    assert response.json() == {"message": "Logged out successfully"}
    assert client.get("/auth/me", headers=headers).status_code == 401


def test_logout_without_token(client, fake_db):
    response = client.post("/auth/logout")

    assert response.status_code == 200
    assert fake_db.auth.signed_out == 1


def test_update_profile_keeps_unspecified_fields(client, fake_db, alice):
    response = client.patch(f"/auth/profile/{alice['id']}", json={"fullName": "Alice Pleasance"})

    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Alice Pleasance"
    assert body["username"] == "alice"
    assert body["updated_at"] is not None


def test_update_profile_creates_missing_profile(client, fake_db):
    response = client.patch("/auth/profile/user-new", json={"username": "fresh"})

    assert response.status_code == 200
    assert fake_db.rows("profiles", id="user-new")[0]["username"] == "fresh"


def test_update_password(client, fake_db, alice_account):
    response = client.patch(
        f"/auth/password/{alice_account['id']}",
        json={"password": "N3wSecret"},
        headers=bearer(fake_db, alice_account["id"]),
    )

    assert response.status_code == 200
    assert fake_db.auth.users[alice_account["email"]]["password"] == "N3wSecret"


def test_update_password_of_someone_else_is_forbidden(client, fake_db, alice_account, bob):
    response = client.patch(
        f"/auth/password/{bob['id']}",
        json={"password": "N3wSecret"},
        headers=bearer(fake_db, alice_account["id"]),
    )

    assert response.status_code == 403


def test_update_password_requires_token(client, fake_db, alice_account):
    response = client.patch(f"/auth/password/{alice_account['id']}", json={"password": "N3wSecret"})

    assert response.status_code == 401


def test_upload_avatar_updates_profile(client, fake_db, alice):
    response = client.post(
        f"/auth/avatar/{alice['id']}", files={"avatar": ("me.jpg", b"\xff\xd8jpeg-bytes", "image/jpeg")}
    )

    assert response.status_code == 200
    url = response.json()["avatarUrl"]
    assert url.startswith("https://example.supabase.co/storage/v1/object/public/avatars/avatars/user-alice-")
    assert url.endswith(".jpg")
    assert fake_db.rows("profiles", id=alice["id"])[0]["avatar_url"] == url


def test_upload_avatar_too_large_returns_413(client, fake_db, alice, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 8)

    response = client.post(f"/auth/avatar/{alice['id']}", files={"avatar": ("me.png", b"0123456789", "image/png")})

    assert response.status_code == 413
    assert fake_db.storage.objects == {}


def test_upload_avatar_storage_failure_returns_409(client, fake_db, alice):
    fake_db.storage.fail_uploads = True

    response = client.post(f"/auth/avatar/{alice['id']}", files={"avatar": ("me.png", b"png", "image/png")})

    assert response.status_code == 409
