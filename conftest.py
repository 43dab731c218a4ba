import os
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

# --- Alembic Imports ---
from alembic.config import Config
from alembic import command
# --- End Alembic Imports ---

# Import app and DB dependency function first
from main import app, get_db

# Import database components needed for setup
from auth import create_token
from database import Base, make_engine
import models

PROJECT_ROOT = Path(__file__).resolve().parent
TEST_DATABASE_URL = "sqlite:///./jobly-test.db"

test_engine = make_engine(TEST_DATABASE_URL)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create the test database from models and stamp with Alembic head."""
    db_path = TEST_DATABASE_URL.split("///")[-1]
    if os.path.exists(db_path):
        os.unlink(db_path)

    Base.metadata.create_all(bind=test_engine)

    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", TEST_DATABASE_URL)
    command.stamp(alembic_cfg, "head")

    yield  # Tests run here

    test_engine.dispose()
    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.unlink(db_path + suffix)


@pytest.fixture(scope="function")
def db_session(setup_test_database):
    """Yields a SQLAlchemy session directly from the test factory."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function", autouse=True)
def job_ids(db_session):
    """Reset tables to three companies and three jobs; returns the job ids.

    Tables are recreated first because some tests drop them.
    """
    Base.metadata.create_all(bind=test_engine)
    db_session.query(models.Job).delete()
    db_session.query(models.Company).delete()

    for handle, name, num_employees in [("c1", "C1", 1), ("c2", "C2", 2), ("c3", "C3", 3)]:
        db_session.add(
            models.Company(
                handle=handle,
                name=name,
                num_employees=num_employees,
                description=f"Desc{num_employees}",
                logo_url=f"http://{handle}.img",
            )
        )
    db_session.flush()

    jobs = [
        models.Job(title="j1", salary=10000, equity=None, company_handle="c1"),
        models.Job(title="j2", salary=20000, equity=Decimal("0.2"), company_handle="c2"),
        models.Job(title="j3", salary=30000, equity=Decimal("0.3"), company_handle="c3"),
    ]
    db_session.add_all(jobs)
    db_session.commit()
    return [job.id for job in jobs]


# Override the get_db dependency for tests
@pytest.fixture(scope="function")
def override_get_db():
    """Point the get_db dependency at the test database, one session per request."""

    def _override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    original = app.dependency_overrides.get(get_db)
    app.dependency_overrides[get_db] = _override_get_db

    yield

    if original:
        app.dependency_overrides[get_db] = original
    else:
        del app.dependency_overrides[get_db]


@pytest.fixture(scope="function")
def test_client(override_get_db):
    """Provides a test client configured with our test database session."""
    return TestClient(app)


@pytest.fixture(scope="session")
def admin_token():
    return create_token("admin", is_admin=True)


@pytest.fixture(scope="session")
def u1_token():
    return create_token("u1", is_admin=False)
