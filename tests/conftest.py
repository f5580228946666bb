import os
from datetime import datetime, timedelta, timezone

# Use in-memory sqlite and a known signing secret. Set before any app import
# so config and the engine pick them up.
os.environ["PERSISTENCE_BACKEND"] = "sql"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["TIMEZONE"] = "UTC"

import pytest
from jose import jwt

TEST_SECRET = "test-jwt-secret"
USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"


def make_token(user_id: str = USER_ID, **claims) -> str:
    payload = {
        "sub": user_id,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    payload.update(claims)
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


@pytest.fixture(autouse=True)
def fresh_db():
    from database import Base, engine
    import models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def store():
    from store import SqlStore
    return SqlStore()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from main import app
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def other_headers():
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}


class FakeStore:
    """
    Dict-backed store with the same interface as SqlStore. `fail_on` holds
    predicates (table, data) -> bool; a matching insert raises RuntimeError.
    """

    def __init__(self):
        self.tables = {"weekly_goals": [], "tasks": [], "user_progress": []}
        self.fail_on = []
        self._next_id = 0

    def _matches(self, row, filters):
        return all(row.get(k) == v for k, v in (filters or {}).items())

    def select(self, table, filters=None, order=None):
        rows = [dict(r) for r in self.tables[table] if self._matches(r, filters)]
        if order:
            name, _, direction = order.partition(".")
            rows.sort(key=lambda r: str(r.get(name) or ""), reverse=direction == "desc")
        return rows

    def insert(self, table, data):
        for check in self.fail_on:
            if check(table, data):
                raise RuntimeError("insert rejected")
        self._next_id += 1
        row = {
            "id": f"{table}-{self._next_id}",
            "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc).isoformat(),
            "updated_at": datetime(2025, 1, 1, tzinfo=timezone.utc).isoformat(),
            **data,
        }
        self.tables[table].append(row)
        return dict(row)

    def update(self, table, filters, data):
        updated = []
        for row in self.tables[table]:
            if self._matches(row, filters):
                row.update(data)
                updated.append(dict(row))
        return updated

    def delete(self, table, filters):
        self.tables[table] = [r for r in self.tables[table] if not self._matches(r, filters)]

    def upsert(self, table, data, on_conflict):
        keys = {k: data[k] for k in on_conflict.split(",")}
        if self.select(table, keys):
            return self.update(table, keys, data)[0]
        return self.insert(table, data)


@pytest.fixture
def fake_store():
    return FakeStore()
