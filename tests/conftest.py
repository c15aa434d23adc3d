"""
Shared test fixtures.
"""

import os
import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# Settings are loaded at import time; make them loadable without a .env
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import patch
from typing import Generator, Optional

from postgrest.exceptions import APIError

# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """
    Mock Supabase query builder with chainable methods.

    Filters, ordering and limits are applied to the table's rows on
    execute(), so queries behave like PostgREST would.
    """

    def __init__(self, client: "MockSupabaseClient", table_name: str):
        self._client = client
        self._table_name = table_name
        self._operation = "select"
        self._payload: list = []
        self._filters: list = []
        self._order: Optional[tuple] = None
        self._limit: Optional[int] = None

    def select(self, *args, **kwargs):
        self._operation = "select"
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = [dict(item) for item in (data if isinstance(data, list) else [data])]
        return self

    def eq(self, column, value):
        self._filters.append(("eq", column, value))
        return self

    def overlaps(self, column, values):
        self._filters.append(("ov", column, list(values)))
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row: dict) -> bool:
        for op, column, value in self._filters:
            if op == "eq" and row.get(column) != value:
                return False
            if op == "ov" and not set(row.get(column) or []) & set(value):
                return False
        return True

    def execute(self) -> MockSupabaseResponse:
        self._client.queries.append({
            "table": self._table_name,
            "operation": self._operation,
            "filters": list(self._filters),
        })

        error = self._client._errors.pop(self._table_name, None)
        if error is not None:
            raise error

        table = self._client._table(self._table_name)

        if self._operation == "insert":
            key = table["primary_key"]
            for item in self._payload:
                if key and any(
                    all(row.get(col) == item.get(col) for col in key)
                    for row in table["data"]
                ):
                    raise APIError({
                        "message": f'duplicate key value violates unique constraint "{self._table_name}_pkey"',
                        "code": "23505",
                        "hint": None,
                        "details": f"Key ({', '.join(key)}) already exists.",
                    })
            table["data"].extend(self._payload)
            return MockSupabaseResponse(data=[dict(item) for item in self._payload])

        rows = [dict(row) for row in table["data"] if self._matches(row)]
        total = table["count"] if table["count"] is not None else len(rows)
        if self._order:
            column, desc = self._order
            rows.sort(key=lambda row: row.get(column), reverse=desc)
        if self._limit is not None:
            rows = rows[:self._limit]
        return MockSupabaseResponse(data=rows, count=total)


class MockSupabaseRPC:
    """Mock RPC call."""

    def __init__(self, client: "MockSupabaseClient", fn: str, params: dict):
        self._client = client
        self._fn = fn
        self._params = params

    def execute(self) -> MockSupabaseResponse:
        self._client.rpc_calls.append((self._fn, self._params))
        if self._client.rpc_error is not None:
            raise self._client.rpc_error
        return MockSupabaseResponse(data=[])


class MockSupabaseClient:
    """Mock Supabase client with in-memory tables."""

    def __init__(self):
        self._tables = {}
        self._errors = {}
        self.queries: list[dict] = []
        self.rpc_calls: list[tuple] = []
        self.rpc_error: Optional[Exception] = None

    def _table(self, name: str) -> dict:
        return self._tables.setdefault(
            name, {"data": [], "count": None, "primary_key": None}
        )

    def set_table_data(
        self,
        table_name: str,
        data: list,
        count: int = None,
        primary_key: Optional[tuple] = None
    ):
        """Configure mock data for a table. The primary key is kept unless given."""
        self._tables[table_name] = {
            "data": [dict(row) for row in data],
            "count": count,
            "primary_key": primary_key or self._table(table_name)["primary_key"],
        }

    def fail_next(self, table_name: str, error: Exception):
        """Make the next execute() against a table raise error."""
        self._errors[table_name] = error

    def rows(self, table_name: str) -> list:
        """Rows currently stored in a table."""
        return self._table(table_name)["data"]

    def table(self, name: str) -> MockSupabaseQuery:
        """Get mock query builder for a table."""
        return MockSupabaseQuery(self, name)

    def rpc(self, fn: str, params: dict = None) -> MockSupabaseRPC:
        return MockSupabaseRPC(self, fn, params or {})


# ===================
# FIXTURES
# ===================

MAPPINGS_TABLE = "sample_mappings"
MAPPINGS_PRIMARY_KEY = ("item_id", "sample_item_id")


@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client with an empty sample_mappings table.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("sample_mappings", [...])
    """
    client = MockSupabaseClient()
    client.set_table_data(MAPPINGS_TABLE, [], primary_key=MAPPINGS_PRIMARY_KEY)
    return client


@pytest.fixture(autouse=True)
def reset_sample_mapping_service():
    """Reset the singleton service between tests."""
    import services.sample_mapping_service as sample_mapping_service_module

    sample_mapping_service_module._sample_mapping_service = None
    yield
    sample_mapping_service_module._sample_mapping_service = None


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("sample_mappings", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.sample_mapping_service.get_supabase_client", return_value=mock_supabase):
            yield mock_supabase


@pytest.fixture
def sample_mapping_data() -> dict:
    """A stored mapping row."""
    return {
        "item_id": "item_id",
        "sample_item_id": "sample_item_id",
        "clm_segments": ["segment1", "segment2", "segment3"],
    }


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_db):
    """
    Create FastAPI test client with mocked database.

    Not entered as a context manager, so lifespan (schema bootstrap) does
    not run. tests/test_startup.py covers startup.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("sample_mappings", [...])
            response = test_client_with_mock_db.post("/api/sample-mappings/resolve", json={...})
    """
    from fastapi.testclient import TestClient
    from main import app

    yield TestClient(app)
