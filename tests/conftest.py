"""Pytest configuration: in-memory table store and an API client wired to it."""

import asyncio
import copy
import os

import pytest

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["GEMINI_API_KEY"] = ""
os.environ["FIREBASE_WEB_API_KEY"] = ""
os.environ["FIREBASE_CREDENTIALS_PATH"] = ""
os.environ["FIREBASE_PROJECT_ID"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from periodlog.api.deps import create_access_token, get_store  # noqa: E402
from periodlog.exceptions import StoreError  # noqa: E402
from periodlog.main import app  # noqa: E402
from periodlog.models.user import User, UserRole  # noqa: E402
from periodlog.services.mapping import user_to_row  # noqa: E402
from periodlog.services.store import TABLES  # noqa: E402


class InMemoryTableStore:
    """Same surface as TableStore, backed by dicts; can be told to fail writes."""

    def __init__(self):
        self.tables = {table: {} for table in TABLES}
        self.fail_writes = False

    def _matches(self, row, eq, ilike):
        for column, value in (eq or {}).items():
            if row.get(column) != value:
                return False
        for column, value in (ilike or {}).items():
            if str(row.get(column, "")).lower() != value.lower():
                return False
        return True

    async def select(self, table, *, eq=None, ilike=None):
        return [copy.deepcopy(r) for r in self.tables[table].values() if self._matches(r, eq, ilike)]

    async def select_one(self, table, *, eq=None, ilike=None):
        rows = await self.select(table, eq=eq, ilike=ilike)
        return rows[0] if rows else None

    async def insert(self, table, row):
        if self.fail_writes:
            raise StoreError(f"Could not save to {table}")
        self.tables[table][row["id"]] = copy.deepcopy(row)

    async def update(self, table, row_id, values):
        if self.fail_writes:
            raise StoreError(f"Could not update {table}")
        if row_id not in self.tables[table]:
            return False
        self.tables[table][row_id].update(copy.deepcopy(values))
        return True

    async def ensure_indexes(self):
        return None


def run(coro):
    return asyncio.run(coro)


def make_user(user_id, name, role, email=None):
    return User(id=user_id, name=name, role=role, email=email or f"{user_id}@school.edu")


@pytest.fixture
def store():
    return InMemoryTableStore()


@pytest.fixture
def teacher(store):
    user = make_user("u1", "Asha Rao", UserRole.TEACHER)
    store.tables["users"][user.id] = user_to_row(user)
    return user


@pytest.fixture
def other_teacher(store):
    user = make_user("u2", "Ben Mathew", UserRole.OFFICIAL)
    store.tables["users"][user.id] = user_to_row(user)
    return user


@pytest.fixture
def principal(store):
    user = make_user("p1", "Principal Iyer", UserRole.PRINCIPAL)
    store.tables["users"][user.id] = user_to_row(user)
    return user


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role.value)}"}
