"""
Pytest configuration file.

Puts the repo root on sys.path so the flat modules (data_integrator, domain,
services, utils) import the same way the Streamlit page imports them, and
provides an in-memory stand-in for the Supabase query builder.
"""
import sys
import uuid
from pathlib import Path
from types import SimpleNamespace

import pytest

repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


class FakeQuery:
    """Records one select/insert/update/delete chain against a FakeSupabase table."""

    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = None
        self.payload = None
        self.filters = []

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, row):
        self.op = "insert"
        self.payload = row
        return self

    def update(self, row):
        self.op = "update"
        self.payload = row
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def _matches(self, row):
        return all(row.get(col) == val for col, val in self.filters)

    def execute(self):
        if self.backend.fail_with is not None:
            raise self.backend.fail_with

        rows = self.backend.tables.setdefault(self.table, [])
        self.backend.calls.append((self.op, self.table, self.payload, list(self.filters)))

        if self.op == "select":
            return SimpleNamespace(data=[dict(r) for r in rows if self._matches(r)])

        if self.op == "insert":
            row = dict(self.payload, id=str(uuid.uuid4()))
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)

        if self.op == "delete":
            removed = [dict(r) for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed)

        raise AssertionError(f"unexpected operation {self.op}")


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.schemas = []
        self.fail_with = None

    def schema(self, name):
        self.schemas.append(name)
        return self

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def store(fake_supabase):
    from data_integrator import OrderStore

    return OrderStore(client=fake_supabase, schema="public", table="orders")
