"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest
from unittest.mock import patch
from datetime import datetime
from typing import Generator

# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, data: list = None, count: int = None):
        self._data = data or []
        self._count = count

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        # Simulate insert - add id and timestamps
        if isinstance(data, dict):
            data = [data]
        for item in data:
            item["id"] = "test-uuid-123"
            item["created_at"] = datetime.utcnow().isoformat() + "Z"
        self._data = data
        return self

    def update(self, data):
        # Simulate update - merge with existing data
        self._data = [{**item, **data} for item in self._data]
        return self

    def eq(self, column, value):
        self._data = [item for item in self._data if item.get(column) == value]
        return self

    def or_(self, filters: str):
        # Supports "col.ilike.%term%,col.ilike.%term%"
        clauses = []
        for clause in filters.split(","):
            column, _, pattern = clause.split(".", 2)
            clauses.append((column, pattern.strip("%").lower()))
        self._data = [
            item for item in self._data
            if any(term in str(item.get(column) or "").lower() for column, term in clauses)
        ]
        return self

    def gte(self, column, value):
        return self

    def lte(self, column, value):
        return self

    def order(self, column, **kwargs):
        return self

    def execute(self) -> MockSupabaseResponse:
        return MockSupabaseResponse(
            data=self._data,
            count=self._count if self._count is not None else len(self._data)
        )


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, data: list = None, count: int = None):
        self._data = data or []
        self._count = count

    def select(self, *args, **kwargs):
        return MockSupabaseQuery([dict(row) for row in self._data], self._count)

    def insert(self, data):
        return MockSupabaseQuery([], self._count).insert(data)

    def update(self, data):
        return MockSupabaseQuery([dict(row) for row in self._data], self._count).update(data)


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count}

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        config = self._tables.get(name, {"data": [], "count": None})
        return MockSupabaseTable(config["data"], config["count"])


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("inventory", [
                {"id": "1", "product_id": "p1", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def reset_singletons():
    """Drop cached service instances so each test builds fresh ones."""
    import services.product_service as product_module
    import services.inventory_service as inventory_module
    import services.inventory_optimizer_service as optimizer_module
    import services.production_schedule_service as schedule_module
    import services.insights_service as insights_module

    for module, name in (
        (product_module, "_product_service"),
        (inventory_module, "_inventory_service"),
        (optimizer_module, "_inventory_optimizer_service"),
        (schedule_module, "_production_schedule_service"),
        (insights_module, "_insights_service"),
    ):
        setattr(module, name, None)
    yield
    for module, name in (
        (product_module, "_product_service"),
        (inventory_module, "_inventory_service"),
        (optimizer_module, "_inventory_optimizer_service"),
        (schedule_module, "_production_schedule_service"),
        (insights_module, "_insights_service"),
    ):
        setattr(module, name, None)


@pytest.fixture
def mock_db(mock_supabase, reset_singletons) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("inventory", [...])
            # Any service built now gets the mock
    """
    with patch("services.product_service.get_supabase_client", return_value=mock_supabase):
        with patch("services.inventory_service.get_supabase_client", return_value=mock_supabase):
            with patch("services.production_schedule_service.get_supabase_client", return_value=mock_supabase):
                yield mock_supabase


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(reset_singletons):
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/currencies")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)


@pytest.fixture
def test_client_with_mock_db(mock_db):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("inventory", [...])
            response = test_client_with_mock_db.get("/api/inventory")
    """
    from fastapi.testclient import TestClient
    from main import app

    yield TestClient(app)
