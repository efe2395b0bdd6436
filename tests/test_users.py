import pytest

from kanban_api.app.core.config import settings

# User search and profile lookup.
pytestmark = pytest.mark.api


def test_search_matches_username_and_full_name(client, fake_db, alice, bob, carol):
    assert [u["username"] for u in client.get("/users/search", params={"q": "builder"}).json()] == ["bob"]
    assert [u["username"] for u in client.get("/users/search", params={"q": "CAR"}).json()] == ["carol"]


def test_search_excludes_caller(client, fake_db, alice):
    response = client.get("/users/search", params={"q": "alice", "excludeUserId": alice["id"]})

    assert response.json() == []


def test_search_is_limited(client, fake_db, monkeypatch):
    monkeypatch.setattr(settings, "search_limit", 2)
    for index in range(4):
        fake_db.add_profile(f"user-{index}", f"member{index}")

    assert len(client.get("/users/search", params={"q": "member"}).json()) == 2


def test_search_ignores_filter_syntax(client, fake_db, alice):
    response = client.get("/users/search", params={"q": "ali,username.eq.bob"})

    assert response.status_code == 200
    assert response.json() == []


def test_profile(client, fake_db, alice):
    response = client.get(f"/users/profile/{alice['id']}")

    assert response.status_code == 200
    assert response.json() == {
        "id": alice["id"],
        "username": "alice",
        "email": "alice@example.com",
        "full_name": "Alice Liddell",
        "avatar_url": None,
    }


def test_missing_profile_returns_404(client, fake_db):
    assert client.get("/users/profile/missing").status_code == 404


def test_denied_profile_read_surfaces_as_500(client, fake_db, alice):
    fake_db.deny_reads.add("profiles")

    assert client.get(f"/users/profile/{alice['id']}").status_code == 500
