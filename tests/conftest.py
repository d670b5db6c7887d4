"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at an in-memory SQLite database before anything imports settings.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ["AUTH_JWT_KEY"] = "test-signing-key"
os.environ["AUTH_JWT_ALGORITHMS"] = '["HS256"]'
os.environ["SPOONACULAR_API_KEY"] = "test-api-key"
os.environ["LOG_LEVEL"] = "WARNING"

from domain.models import Base, engine  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Every test starts with empty tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
