import json
import os
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch
import pytest
from dotenv import load_dotenv
load_dotenv()

# Handlers import database.database, which builds an engine at import time.
os.environ["DATABASE_URL"] = "sqlite://"
for _var in ("DB_USERNAME", "DB_PASSWORD", "DB_HOST"):
    os.environ.pop(_var, None)

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from database.database import build_engine
from models import Base, House, Vote


# -----------------
# ENVIRONMENT MOCKS
# -----------------
@pytest.fixture(scope="session", autouse=True)
def mock_env():
    """Set required environment variables for testing."""
    original_env = os.environ.copy()

    os.environ["S3_BUCKET_NAME"] = "test-bucket"
    os.environ["AWS_REGION"] = "us-east-1"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ["ENVIRONMENT"] = "test"

    yield

    os.environ.clear()
    os.environ.update(original_env)

# -----------------
# DATABASE FIXTURE
# -----------------
@pytest.fixture(scope="function")
def test_db():
    """Provides a fresh in-memory database for each test function."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(engine)
        engine.dispose()

# -----------------
# API GATEWAY MOCKS
# -----------------
@pytest.fixture
def api_gateway_event():
    """Creates a mock API Gateway event for testing"""

    def _event(http_method="GET", path="/houses", path_params=None, body=None, browser_id=None, headers=None):
        """Generate an API event; browser_id sets the X-Browser-Id header when given"""
        event_headers = {"Content-Type": "application/json"}
        if browser_id is not None:
            event_headers["X-Browser-Id"] = browser_id
        event_headers.update(headers or {})

        return {
            "httpMethod": http_method,
            "path": path,
            "pathParameters": path_params or {},
            "queryStringParameters": {},
            "headers": event_headers,
            "requestContext": {},
            "body": json.dumps(body) if isinstance(body, dict) else body,
        }

    return _event

# -----------------
# MOCK S3
# -----------------
@pytest.fixture
def mock_s3():
    """Mock the S3 client used by the upload handler"""
    with patch("files.upload_file.get_s3_client") as mock_client:
        mock_s3 = MagicMock()
        mock_client.return_value = mock_s3
        yield mock_s3

# -----------------
# TEST DATA FIXTURES
# -----------------
@pytest.fixture
def seed_house(test_db):
    """
    Returns a function that inserts a house.

    Houses get increasing ``created_at`` values in insertion order so that
    listing order is deterministic.
    """
    base_time = datetime(2024, 12, 1, 18, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _seed(name="Test House", created_by=None, **fields):
        counter["n"] += 1
        house = House(
            id=fields.pop("id", uuid.uuid4()),
            name=name,
            latitude=fields.pop("latitude", 29.9511),
            longitude=fields.pop("longitude", -90.0715),
            created_by=created_by,
            created_at=fields.pop("created_at", base_time + timedelta(minutes=counter["n"])),
            **fields,
        )
        test_db.add(house)
        test_db.commit()
        return house

    return _seed

@pytest.fixture
def seed_votes(test_db):
    """Returns a function that records one vote per value, each from a different browser."""

    def _seed(house, values, prefix="voter"):
        votes = [
            Vote(house_id=house.id, browser_id=f"{prefix}-{i}", value=value)
            for i, value in enumerate(values)
        ]
        test_db.add_all(votes)
        test_db.commit()
        return votes

    return _seed
