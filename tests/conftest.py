"""Shared fixtures.

Every test gets its own in-memory database from ``mongomock_motor`` so no
MongoDB server is needed and tests never see each other's data.
"""

import asyncio
import uuid

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.config.mongodb import ensure_indexes
from app.domains.customers.service import CustomerService
from app.domains.entries.service import EntryService
from app.domains.records.services import RecordService


def _fresh_db():
    return AsyncMongoMockClient()[f"dairy_test_{uuid.uuid4().hex}"]


@pytest.fixture
async def db():
    database = _fresh_db()
    await ensure_indexes(database)
    return database


@pytest.fixture
def record_service(db) -> RecordService:
    return RecordService(db)


@pytest.fixture
def customer_service(db) -> CustomerService:
    return CustomerService(db)


@pytest.fixture
def entry_service(record_service, customer_service) -> EntryService:
    return EntryService(record_service, customer_service)


@pytest.fixture
def client():
    """A TestClient wired to a fresh database without running startup.

    Startup would connect to a real MongoDB and run the legacy migration;
    both are covered by their own tests.
    """
    from main import app, register_services

    database = _fresh_db()
    asyncio.run(ensure_indexes(database))
    register_services(app, database)
    return TestClient(app)
