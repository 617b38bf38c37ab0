"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Sample job payloads
"""

import pytest
from fastapi.testclient import TestClient

from job_tracker.core.database import Base, Storage, get_db
from main import create_app


# Use in-memory SQLite for testing (fast, isolated)
test_storage = Storage("sqlite:///:memory:")


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    test_storage.init_schema()
    db = test_storage.session()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_storage.engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    app = create_app(storage=test_storage)

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_job_data():
    """Sample job data for testing, in the import (camelCase) shape"""
    return {
        "title": "Backend Engineer",
        "companyName": "Acme",
        "location": "Berlin (Hybrid)",
        "via": "LinkedIn",
        "description": "Build and run Python services on PostgreSQL and Kubernetes.",
        "postedAt": "3 days ago",
        "scheduleType": "Full-time",
        "salary": "70k-85k EUR",
        "applyLink": [
            {"title": "Apply", "link": "https://acme.example/apply"}
        ]
    }


@pytest.fixture
def import_jobs(client):
    """Import jobs through the bulk endpoint and return their ids"""
    def _import(jobs):
        response = client.post("/api/jobs/bulk", json=jobs)
        assert response.status_code == 200, response.text
        return [job["id"] for job in response.json()["jobs"]]

    return _import
