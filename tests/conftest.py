"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring PostgreSQL (deselect with '-m \"not db\"')"
    )


@pytest.fixture(scope="session")
def test_database():
    """
    Session-scoped PostgreSQL URL with the schema created.

    Skips when TEST_DATABASE_URL does not point at a reachable server.
    """
    from tests import TEST_DB_URL, check_db_available

    if not check_db_available():
        pytest.skip("PostgreSQL test database not available")

    from database.database import create_db_engine
    from database.models import Base

    engine = create_db_engine(TEST_DB_URL)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    engine.dispose()

    yield TEST_DB_URL

    engine = create_db_engine(TEST_DB_URL)
    Base.metadata.drop_all(engine)
    engine.dispose()
