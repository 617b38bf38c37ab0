"""
Tests for database.py - storage handle and schema initialisation.
"""

import pytest
from sqlalchemy import inspect, text
from fastapi.testclient import TestClient

from job_tracker.core import database
from job_tracker.core.config import settings
from job_tracker.core.database import Storage, get_storage, reset_storage
from job_tracker.crud import job as job_crud
from job_tracker.schemas.job import JobCreateRequest


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the settings at a temporary data directory"""
    target = tmp_path / "nested" / "data"
    monkeypatch.setattr(settings, "DATA_DIR", str(target))
    reset_storage()
    yield target
    reset_storage()


class TestStorageInit:
    """Test database initialization."""

    def test_init_creates_database_file(self, tmp_path):
        """Test that init_schema creates the database file."""
        db_path = tmp_path / "jobs.db"
        assert not db_path.exists()

        storage = Storage.from_path(db_path)
        storage.init_schema()

        assert db_path.exists()
        storage.dispose()

    def test_init_creates_parent_directories(self, tmp_path):
        """Test that from_path creates parent directories if missing."""
        db_path = tmp_path / "nested" / "dir" / "jobs.db"
        assert not db_path.parent.exists()

        storage = Storage.from_path(db_path)
        storage.init_schema()

        assert db_path.exists()
        storage.dispose()

    def test_init_creates_tables_and_indexes(self, tmp_path):
        """Test the schema has both tables and both indexes."""
        storage = Storage.from_path(tmp_path / "jobs.db")
        storage.init_schema()

        inspector = inspect(storage.engine)
        assert {"jobs", "apply_links"} <= set(inspector.get_table_names())
        index_names = {index["name"] for index in inspector.get_indexes("jobs")}
        assert {"idx_jobs_status", "idx_jobs_company"} <= index_names

        columns = {column["name"] for column in inspector.get_columns("jobs")}
        assert {"companyName", "postedAt", "scheduleType", "createdAt", "updatedAt"} <= columns
        storage.dispose()

    def test_init_is_idempotent(self, tmp_path):
        """Test that initialising twice keeps existing data."""
        db_path = tmp_path / "jobs.db"
        storage = Storage.from_path(db_path)
        storage.init_schema()

        db = storage.session()
        job_crud.create(db, JobCreateRequest(title="Persisted"))
        db.close()

        storage.init_schema()
        storage.dispose()

        reopened = Storage.from_path(db_path)
        reopened.init_schema()
        db = reopened.session()
        assert [job.title for job in job_crud.get_multi(db)] == ["Persisted"]
        db.close()
        reopened.dispose()

    def test_foreign_keys_enabled(self, tmp_path):
        """Test every connection enforces foreign keys (needed for cascades)."""
        storage = Storage.from_path(tmp_path / "jobs.db")

        with storage.engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
        storage.dispose()


class TestGetStorage:
    """Test the lazily created process-wide handle."""

    def test_get_storage_is_singleton(self, data_dir):
        first = get_storage()
        second = get_storage()

        assert first is second
        assert (data_dir / "jobs.db").exists()

    def test_reset_storage_forgets_handle(self, data_dir):
        first = get_storage()
        reset_storage()

        assert database._storage is None
        assert get_storage() is not first

    def test_app_opens_default_storage_on_startup(self, data_dir):
        """Test an app built without a handle uses get_storage()."""
        from main import create_app

        app = create_app()
        with TestClient(app) as client:
            response = client.get("/api/jobs")

        assert response.status_code == 200
        assert response.json() == []
        assert app.state.storage is get_storage()
        assert (data_dir / "jobs.db").exists()
