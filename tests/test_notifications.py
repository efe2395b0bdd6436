import pytest

from kanban_api.app.core.config import settings
from kanban_api.app.services.notification_service import NotificationService

# Notification inbox endpoints and the shared write path.
pytestmark = pytest.mark.api


def notify(user, type_="friend_request", **data):
    return NotificationService.create(user["id"], type_, data)


def test_create_stores_unread_notification(fake_db, alice):
    created = notify(alice, request_id="r1")

    assert created.read is False
    assert created.data == {"request_id": "r1"}
    assert fake_db.rows("notifications", user_id=alice["id"])[0]["type"] == "friend_request"
    # Written with the service role client.
    assert fake_db.client_tokens[-1] == ("service-role-key", None)


def test_list_is_newest_first_and_capped(client, fake_db, alice, monkeypatch):
    monkeypatch.setattr(settings, "notification_limit", 3)
    for index in range(5):
        notify(alice, index=index)

    response = client.get(f"/notifications/{alice['id']}")

    assert [n["data"]["index"] for n in response.json()] == [4, 3, 2]


def test_unread_count_and_mark_read(client, fake_db, alice, bob):
    first = notify(alice)
    notify(alice)
    notify(bob)

    assert client.get(f"/notifications/{alice['id']}/unread-count").json() == {"count": 2}

    response = client.patch(f"/notifications/{first.id}/read")

    assert response.status_code == 200
    assert response.json()["read"] is True
    assert client.get(f"/notifications/{alice['id']}/unread-count").json() == {"count": 1}


def test_mark_read_unknown_returns_404(client, fake_db):
    assert client.patch("/notifications/missing/read").status_code == 404


def test_mark_all_read_only_touches_one_user(client, fake_db, alice, bob):
    notify(alice)
    notify(alice)
    notify(bob)

    response = client.patch(f"/notifications/{alice['id']}/read-all")

    assert response.json() == {"message": "All notifications marked as read"}
    assert client.get(f"/notifications/{alice['id']}/unread-count").json() == {"count": 0}
    assert client.get(f"/notifications/{bob['id']}/unread-count").json() == {"count": 1}


def test_delete_notification(client, fake_db, alice):
    created = notify(alice)

    response = client.delete(f"/notifications/{created.id}")

    assert response.json() == {"message": "Notification deleted"}
    assert fake_db.rows("notifications") == []
