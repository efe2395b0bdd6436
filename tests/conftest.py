import os

import pytest

# Settings are read at import time, so the environment must be in place
# before anything from ``kanban_api`` is imported.
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")

from fastapi.testclient import TestClient  # noqa: E402

from kanban_api.app.core import supabase as supabase_module  # noqa: E402
from kanban_api.app.main import app  # noqa: E402

from .fakes import FakeSupabase  # noqa: E402


# Every test must map to one of the documented suite categories.
ALLOWED_MARKERS = {"api", "service", "client"}


@pytest.fixture
def fake_db(monkeypatch):
    """Fresh in-memory platform shared by every client the services create."""
    db = FakeSupabase()

    def fake_create_client(self, key, access_token=None):
        db.client_tokens.append((key, access_token))
        return db

    monkeypatch.setattr(supabase_module.SupabaseService, "_create_client", fake_create_client)
    supabase_module.reset_supabase()
    yield db
    supabase_module.reset_supabase()


@pytest.fixture
def client(fake_db):
    """HTTP client for the app; unexpected errors surface as 500 responses."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def alice(fake_db):
    return fake_db.add_profile("user-alice", "alice", full_name="Alice Liddell")


@pytest.fixture
def bob(fake_db):
    return fake_db.add_profile("user-bob", "bob", full_name="Bob Builder")


@pytest.fixture
def carol(fake_db):
    return fake_db.add_profile("user-carol", "carol")


@pytest.fixture
def board(fake_db, alice):
    """A board owned by alice with two lists and a card."""
    row = fake_db.add_row("boards", user_id=alice["id"], title="Roadmap", color="#8b5cf6")
    todo = fake_db.add_row("lists", board_id=row["id"], title="To Do", position=0)
    fake_db.add_row("lists", board_id=row["id"], title="Done", position=1)
    fake_db.add_row("cards", list_id=todo["id"], title="Write docs", position=1)
    return row


def pytest_collection_modifyitems(session, config, items):
    unmarked = [item.nodeid for item in items if not ALLOWED_MARKERS.intersection(item.keywords)]
    if unmarked:
        joined = "\n".join(f"- {nodeid}" for nodeid in unmarked)
        raise pytest.UsageError(
            "Each test must include at least one approved marker "
            f"({', '.join(sorted(ALLOWED_MARKERS))}).\n"
            "Unmarked tests:\n"
            f"{joined}"
        )
