"""In-memory test doubles for the Supabase client.

``FakeSupabase`` mimics the small part of the supabase-py surface the
services use: the PostgREST query builder (``table(...).select/insert/
update/upsert/delete`` with ``eq/neq/in_/or_/order/limit/single``), the
auth API and storage buckets.  Every client handed out by the patched
``SupabaseService`` shares one ``FakeSupabase`` so a test sees the
writes of all services.
"""

import itertools
import re
import uuid
from datetime import datetime, timedelta, timezone

from supabase import AuthApiError, PostgrestAPIError, StorageException


# Columns filled with a default when an insert omits them.
TABLE_DEFAULTS = {
    "profiles": {"username": None, "email": None, "full_name": None, "avatar_url": None, "updated_at": None},
    "boards": {
        "user_id": None,
        "description": None,
        "color": None,
        "updated_at": None,
        "last_opened_at": None,
    },
    "lists": {"position": 0, "color": None, "updated_at": None},
    "cards": {"description": None, "position": 0, "label_id": None, "due_date": None, "updated_at": None},
    "labels": {},
    "card_labels": {},
    "card_members": {},
    "card_attachments": {"file_size": None, "mime_type": None},
    "board_collaborators": {"role": "editor", "status": "pending", "invited_by": None},
    "friend_requests": {"status": "pending", "updated_at": None},
    "friendships": {},
    "notifications": {"data": {}, "read": False},
}

UNIQUE_KEYS = {
    "profiles": ("id",),
    "board_collaborators": ("board_id", "user_id"),
    "friendships": ("user_id", "friend_id"),
    "card_labels": ("card_id", "label_id"),
    "card_members": ("card_id", "user_id"),
}

_NO_ID_TABLES = {"card_labels", "card_members"}


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeModel:
    """Stand-in for the pydantic models returned by the auth API."""

    def __init__(self, **fields):
        self._fields = fields
        for key, value in fields.items():
            setattr(self, key, value)

    def model_dump(self, mode="python"):
        return dict(self._fields)


def _ilike(pattern, value):
    if value is None:
        return False
    regex = ".*".join(re.escape(part) for part in pattern.split("%"))
    return re.fullmatch(regex, str(value), flags=re.IGNORECASE | re.DOTALL) is not None


class FakeQuery:
    """Chainable query builder operating on ``FakeSupabase.tables``."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.action = "select"
        self.columns = ("*",)
        self.payload = None
        self.on_conflict = None
        self.filters = []
        self.orders = []
        self.limit_value = None
        self.want_single = False
        self.count_mode = None
        self.head = False

    # -- actions -------------------------------------------------------
    def select(self, *columns, count=None, head=False):
        self.columns = columns or ("*",)
        self.count_mode = count
        self.head = head
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def upsert(self, payload, on_conflict=""):
        self.action, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def update(self, values):
        self.action, self.payload = "update", values
        return self

    def delete(self):
        self.action = "delete"
        return self

    # -- filters -------------------------------------------------------
    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def or_(self, expression):
        clauses = []
        for clause in expression.split(","):
            column, op, value = clause.split(".", 2)
            clauses.append((column, op, value))

        def match(row):
            for column, op, value in clauses:
                if op == "ilike" and _ilike(value, row.get(column)):
                    return True
                if op == "eq" and str(row.get(column)) == value:
                    return True
            return False

        self.filters.append(match)
        return self

    def order(self, column, desc=False, nullsfirst=None):
        self.orders.append((column, desc, nullsfirst))
        return self

    def limit(self, size):
        self.limit_value = size
        return self

    def single(self):
        self.want_single = True
        return self

    # -- execution -----------------------------------------------------
    def execute(self):
        self.db.executed.append((self.table, self.action))
        if self.action in ("insert", "upsert") and self.table in self.db.fail_writes:
            raise PostgrestAPIError({"message": f"insert into {self.table} failed", "code": "XX000"})
        if self.action == "select" and self.table in self.db.deny_reads:
            raise PostgrestAPIError(
                {"message": f"permission denied for table {self.table}", "code": "42501"}
            )
        handler = getattr(self, f"_execute_{self.action}")
        return handler()

    def _rows(self):
        return self.db.tables.setdefault(self.table, [])

    def _matching(self):
        return [row for row in self._rows() if all(f(row) for f in self.filters)]

    def _project(self, row):
        if "*" in self.columns:
            return dict(row)
        return {column: row.get(column) for column in self.columns}

    def _sorted(self, rows):
        for column, desc, nullsfirst in reversed(self.orders):
            if nullsfirst is None:
                nullsfirst = desc
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            rows = missing + present if nullsfirst else present + missing
        return rows

    def _execute_select(self):
        rows = self._sorted(self._matching())
        count = len(rows) if self.count_mode else None
        if self.limit_value is not None:
            rows = rows[: self.limit_value]
        data = [self._project(row) for row in rows]
        if self.head:
            return FakeResponse([], count)
        if self.want_single:
            if len(data) != 1:
                raise PostgrestAPIError(
                    {
                        "message": "JSON object requested, multiple (or no) rows returned",
                        "code": "PGRST116",
                        "details": f"The result contains {len(data)} rows",
                        "hint": None,
                    }
                )
            return FakeResponse(data[0], count)
        return FakeResponse(data, count)

    def _prepare(self, values):
        row = dict(TABLE_DEFAULTS.get(self.table, {}))
        if self.table not in _NO_ID_TABLES:
            row["id"] = str(uuid.uuid4())
        row["created_at"] = self.db.next_timestamp()
        row.update(values)
        return row

    def _conflicting(self, row, keys):
        for existing in self._rows():
            if all(existing.get(key) == row.get(key) for key in keys):
                return existing
        return None

    def _execute_insert(self):
        items = self.payload if isinstance(self.payload, list) else [self.payload]
        keys = UNIQUE_KEYS.get(self.table)
        inserted = []
        for values in items:
            row = self._prepare(values)
            if keys and self._conflicting(row, keys) is not None:
                raise PostgrestAPIError(
                    {
                        "message": f'duplicate key value violates unique constraint "{self.table}_key"',
                        "code": "23505",
                        "details": None,
                        "hint": None,
                    }
                )
            self._rows().append(row)
            inserted.append(dict(row))
        return FakeResponse(inserted)

    def _execute_upsert(self):
        items = self.payload if isinstance(self.payload, list) else [self.payload]
        keys = tuple(k.strip() for k in self.on_conflict.split(",") if k.strip()) or UNIQUE_KEYS.get(
            self.table, ("id",)
        )
        result = []
        for values in items:
            existing = self._conflicting(values, keys)
            if existing is not None:
                existing.update(values)
                result.append(dict(existing))
            else:
                row = self._prepare(values)
                self._rows().append(row)
                result.append(dict(row))
        return FakeResponse(result)

    def _execute_update(self):
        updated = []
        for row in self._matching():
            row.update(self.payload)
            updated.append(dict(row))
        return FakeResponse(updated)

    def _execute_delete(self):
        doomed = self._matching()
        doomed_ids = {id(row) for row in doomed}
        self.db.tables[self.table] = [row for row in self._rows() if id(row) not in doomed_ids]
        return FakeResponse([dict(row) for row in doomed])


class FakeAdminAuth:
    def __init__(self, auth):
        self.auth = auth

    def update_user_by_id(self, uid, attributes):
        for user in self.auth.users.values():
            if user["id"] == uid:
                user.update(attributes)
                return FakeModel(user=FakeModel(**self.auth.public(user)))
        raise AuthApiError("User not found", 404, None)

    def sign_out(self, jwt, scope="global"):
        if jwt not in self.auth.tokens:
            raise AuthApiError("invalid JWT", 401, None)
        del self.auth.tokens[jwt]


class FakeAuth:
    """Users keyed by e-mail; access tokens map to user ids."""

    def __init__(self):
        self.users = {}
        self.tokens = {}
        self.admin = FakeAdminAuth(self)
        self.signed_out = 0

    def public(self, user):
        return {
            "id": user["id"],
            "email": user["email"],
            "user_metadata": dict(user.get("user_metadata") or {}),
        }

    def _session(self, user):
        token = f"token-{uuid.uuid4()}"
        self.tokens[token] = user["id"]
        return FakeModel(access_token=token, refresh_token="refresh", token_type="bearer")

    def add_user(self, email, password, user_id=None, **metadata):
        user = {"id": user_id or str(uuid.uuid4()), "email": email, "password": password, "user_metadata": metadata}
        self.users[email] = user
        return user

    def token_for(self, user_id):
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return token

    def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.users:
            raise AuthApiError("User already registered", 422, None)
        metadata = (credentials.get("options") or {}).get("data") or {}
        user = self.add_user(email, credentials["password"], **metadata)
        return FakeModel(user=FakeModel(**self.public(user)), session=self._session(user))

    def sign_in_with_password(self, credentials):
        user = self.users.get(credentials["email"])
        if user is None or user["password"] != credentials["password"]:
            raise AuthApiError("Invalid login credentials", 400, None)
        return FakeModel(user=FakeModel(**self.public(user)), session=self._session(user))

    def sign_out(self):
        self.signed_out += 1

    def get_user(self, jwt=None):
        user_id = self.tokens.get(jwt)
        if user_id is None:
            raise AuthApiError("invalid JWT", 401, None)
        for user in self.users.values():
            if user["id"] == user_id:
                return FakeModel(user=FakeModel(**self.public(user)))
        return None


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    @property
    def objects(self):
        return self.storage.objects.setdefault(self.name, {})

    def upload(self, path, file, file_options=None):
        options = file_options or {}
        if self.storage.fail_uploads:
            raise StorageException({"statusCode": 500, "error": "upload failed", "message": "upload failed"})
        if path in self.objects and str(options.get("upsert", "false")).lower() != "true":
            raise StorageException({"statusCode": 409, "error": "Duplicate", "message": "The resource already exists"})
        self.objects[path] = (file, options.get("content-type"))
        return FakeModel(path=path, full_path=f"{self.name}/{path}")

    def get_public_url(self, path, options=None):
        return f"https://example.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.objects.pop(path, None)
        return []


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.fail_uploads = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    """Shared in-memory state standing in for the hosted platform."""

    def __init__(self):
        self.tables = {name: [] for name in TABLE_DEFAULTS}
        self.auth = FakeAuth()
        self.storage = FakeStorage()
        self.executed = []
        self.fail_writes = set()
        self.deny_reads = set()
        self.client_tokens = []
        self._clock = itertools.count()
        self._epoch = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def next_timestamp(self):
        return (self._epoch + timedelta(seconds=next(self._clock))).isoformat()

    def table(self, name):
        return FakeQuery(self, name)

    # -- seeding helpers ----------------------------------------------
    def add_row(self, table, **values):
        row = FakeQuery(self, table)._prepare(values)
        self.tables.setdefault(table, []).append(row)
        return row

    def add_profile(self, user_id, username, full_name=None, email=None):
        return self.add_row(
            "profiles",
            id=user_id,
            username=username,
            full_name=full_name,
            email=email or f"{username}@example.com",
        )

    def rows(self, table, **filters):
        return [
            row
            for row in self.tables.get(table, [])
            if all(row.get(key) == value for key, value in filters.items())
        ]
