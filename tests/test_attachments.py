import io

import pytest

from kanban_api.app.core.config import settings
from kanban_api.app.core.errors import PayloadTooLargeError
from kanban_api.app.services.card_service import read_upload

# Card attachment uploads, listing and removal.
pytestmark = pytest.mark.api


@pytest.fixture
def card(fake_db, board):
    return fake_db.rows("cards")[0]


def upload(client, card_id, name="notes.txt", content=b"hello", content_type="text/plain"):
    return client.post(f"/cards/{card_id}/attachments", files={"file": (name, content, content_type)})


def test_upload_attachment_stores_file_and_metadata(client, fake_db, card):
    response = upload(client, card["id"], name="meeting notes.txt")

    assert response.status_code == 201
    body = response.json()
    assert body["card_id"] == card["id"]
    assert body["file_name"] == "meeting notes.txt"
    assert body["file_size"] == 5
    assert body["mime_type"] == "text/plain"
    assert body["file_path"].startswith(f"{card['id']}/")
    assert body["file_path"].endswith("-meeting_notes.txt")
    assert body["file_url"].endswith(body["file_path"])
    assert body["file_path"] in fake_db.storage.objects[settings.attachment_bucket]


def test_attachments_listed_newest_first(client, fake_db, card):
    upload(client, card["id"], name="first.txt")
    upload(client, card["id"], name="second.txt")

    response = client.get(f"/cards/{card['id']}/attachments")

    assert [a["file_name"] for a in response.json()] == ["second.txt", "first.txt"]


def test_upload_to_missing_card_returns_404(client, fake_db):
    assert upload(client, "missing").status_code == 404


def test_upload_over_limit_returns_413(client, fake_db, card, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 4)

    response = upload(client, card["id"], content=b"12345")

    assert response.status_code == 413
    assert fake_db.rows("card_attachments") == []


def test_read_upload_stops_one_byte_past_limit(monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 4)
    stream = io.BytesIO(b"x" * 1000)

    with pytest.raises(PayloadTooLargeError):
        read_upload(stream)

    assert stream.tell() == 5


def test_read_upload_refuses_announced_size_without_reading(monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 4)
    stream = io.BytesIO(b"x" * 1000)

    with pytest.raises(PayloadTooLargeError):
        read_upload(stream, size=1000)

    assert stream.tell() == 0


def test_read_upload_returns_content_within_limit(monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 4)

    assert read_upload(io.BytesIO(b"abcd"), size=4) == b"abcd"



def test_empty_upload_returns_400(client, fake_db, card):
    assert upload(client, card["id"], content=b"").status_code == 400


def test_storage_failure_returns_409(client, fake_db, card):
    fake_db.storage.fail_uploads = True

    response = upload(client, card["id"])

    assert response.status_code == 409
    assert fake_db.rows("card_attachments") == []


def test_delete_attachment_removes_object_and_row(client, fake_db, card):
    attachment = upload(client, card["id"]).json()

    response = client.delete(f"/cards/attachments/{attachment['id']}")

    assert response.status_code == 204
    assert fake_db.rows("card_attachments") == []
    assert attachment["file_path"] not in fake_db.storage.objects[settings.attachment_bucket]


def test_delete_missing_attachment_returns_404(client, fake_db):
    assert client.delete("/cards/attachments/missing").status_code == 404
