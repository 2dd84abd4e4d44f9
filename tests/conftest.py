# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

The app is built with an in-memory DocumentStore so every route runs
its real guards and services without a Supabase project.
"""

import uuid
from collections import defaultdict
from copy import deepcopy
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from core.errors import Conflict, StoreUnavailable
from core.store import DocumentStore
from core.tokens import create_access_token
from main import create_app


ADMIN_EMAIL = "admin@example.com"
TENANT_EMAIL = "x@y.com"
OTHER_EMAIL = "other@example.com"


class MemoryStore(DocumentStore):
    """DocumentStore double keeping each collection in a dict."""

    # mirrors the unique indexes of the Supabase schema
    UNIQUE = {"users": "email"}

    def __init__(self):
        super().__init__(client=None)
        self.collections = defaultdict(dict)
        self.failing = set()
        self.closed = False

    # lifecycle
    @property
    def is_open(self) -> bool:
        return not self.closed

    def close(self):
        self.closed = True

    # helpers
    def seed(self, collection: str, **doc) -> dict:
        doc.setdefault("id", uuid.uuid4().hex)
        self.collections[collection][doc["id"]] = doc
        return deepcopy(doc)

    def get(self, collection: str, doc_id: str) -> dict:
        return self.collections[collection].get(doc_id)

    def fail(self, op: str, collection: str):
        self.failing.add((op, collection))

    def _check(self, op: str, collection: str):
        if (op, collection) in self.failing:
            raise StoreUnavailable(f"simulated {op} failure on {collection}")

    @staticmethod
    def _matches(doc: dict, filters, ranges) -> bool:
        for key, val in (filters or {}).items():
            if doc.get(key) != val:
                return False
        for key, (low, high) in (ranges or {}).items():
            value = doc.get(key)
            if value is None:
                return False
            if low is not None and value < low:
                return False
            if high is not None and value > high:
                return False
        return True

    # reads
    def find(self, collection, filters=None, *, ranges=None, order_by=None,
             descending=False, offset=0, limit=None):
        self._check("find", collection)
        rows = [d for d in self.collections[collection].values() if self._matches(d, filters, ranges)]
        if order_by:
            rows.sort(key=lambda d: (d.get(order_by) is None, d.get(order_by)), reverse=descending)
        if limit is not None:
            rows = rows[offset:offset + limit]
        return deepcopy(rows)

    def count(self, collection, filters=None, *, ranges=None):
        self._check("count", collection)
        return len([d for d in self.collections[collection].values() if self._matches(d, filters, ranges)])

    # writes
    def insert_one(self, collection, data):
        self._check("insert", collection)
        key = self.UNIQUE.get(collection)
        if key and any(d.get(key) == data.get(key) for d in self.collections[collection].values()):
            raise Conflict(f"duplicate {key} in {collection}")
        return self.seed(collection, **deepcopy(data))

    def update_one(self, collection, filters, data):
        self._check("update", collection)
        for doc in self.collections[collection].values():
            if self._matches(doc, filters, None):
                doc.update(deepcopy(data))
                return deepcopy(doc)
        return None

    def ping(self):
        return {"service": "Supabase", "status": "ok", "tables": {}}


def auth_headers(email: str, **claims) -> dict:
    token = create_access_token({"email": email, **claims})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def store() -> MemoryStore:
    store = MemoryStore()
    store.seed("users", id="u-admin", email=ADMIN_EMAIL, name="Admin", role="admin",
               rentedApartmentId=None, agreementId=None, timestamp="2026-01-01T00:00:00+00:00")
    store.seed("users", id="u-tenant", email=TENANT_EMAIL, name="Tenant", role="user",
               rentedApartmentId=None, agreementId=None, timestamp="2026-01-02T00:00:00+00:00")
    store.seed("users", id="u-other", email=OTHER_EMAIL, name="Other", role="user",
               rentedApartmentId=None, agreementId=None, timestamp="2026-01-03T00:00:00+00:00")
    store.seed("apartments", id="P1", floorNo=1, blockName="A", apartmentNo="A-101",
               rent=800, isRented=False)
    store.seed("apartments", id="P2", floorNo=2, blockName="A", apartmentNo="A-201",
               rent=1200, isRented=False)
    return store


@pytest.fixture
def app(store):
    """Create a test FastAPI application instance."""
    return create_app(store=store)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> dict:
    return auth_headers(ADMIN_EMAIL)


@pytest.fixture
def tenant_headers() -> dict:
    return auth_headers(TENANT_EMAIL, name="Tenant")


@pytest.fixture
def other_headers() -> dict:
    return auth_headers(OTHER_EMAIL)


@pytest.fixture
def pending_agreement(store) -> dict:
    return store.seed("agreements", id="A", userEmail=TENANT_EMAIL, userName="Tenant",
                      apartmentId="P1", rent=800, status="pending",
                      submittedAt="2026-02-01T00:00:00+00:00", checkedDate=None)
