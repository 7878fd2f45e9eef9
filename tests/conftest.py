"""Shared test fixtures for Angkot Ledger."""

import os
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Unset AWS_PROFILE for local testing (DynamoDB Local doesn't need it)
if "AWS_PROFILE" in os.environ:
    del os.environ["AWS_PROFILE"]

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from core.config import Config  # noqa: E402

# 10:00 in Asia/Jakarta
MONDAY_MORNING = datetime(2026, 10, 19, 3, 0, tzinfo=UTC)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = MONDAY_MORNING):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeDynamo:
    """Minimal in-memory stand-in for the DynamoDB client calls ChatSessionStore makes."""

    def __init__(self):
        self.items: dict[str, dict] = {}

    def put_item(self, TableName, Item):
        self.items[Item["chatId"]["S"]] = Item

    def get_item(self, TableName, Key, ConsistentRead=False):
        item = self.items.get(Key["chatId"]["S"])
        return {"Item": item} if item else {}

    def delete_item(self, TableName, Key, ReturnValues="NONE"):
        item = self.items.pop(Key["chatId"]["S"], None)
        if ReturnValues == "ALL_OLD" and item:
            return {"Attributes": item}
        return {}


def make_config(**overrides) -> Config:
    values = dict(
        aws_region="us-east-1",
        database_url=None,
        db_host="localhost",
        db_port=5432,
        db_name="angkot",
        db_user="angkot",
        db_password="localdev",
        sessions_table="ChatSessions",
        single_trip_price=10000,
        round_trip_price=18000,
        trip_timezone="Asia/Jakarta",
        lock_timeout_ms=5000,
        environment="test",
    )
    values.update(overrides)
    return Config(**values)


# SQLite fixtures
@pytest.fixture
def database(tmp_path):
    """Provide a connected file-backed SQLite ledger database."""
    from core.db import LedgerDatabase

    config = make_config(database_url=f"sqlite:///{tmp_path / 'angkot.db'}")
    db = LedgerDatabase(config)
    db.connect()
    db.create_schema()
    yield db
    db.disconnect()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def fare_policy():
    from core.services.pricing import FarePolicy

    return FarePolicy(single_trip_price=10000, round_trip_price=18000)


@pytest.fixture
def roster(database, clock):
    from core.services.roster import RosterService

    return RosterService(database.session, timezone="Asia/Jakarta", clock=clock)


@pytest.fixture
def ledger(database, fare_policy, clock):
    from core.services.ledger import TripLedger

    return TripLedger(database.session, fare_policy, timezone="Asia/Jakarta", clock=clock)


@pytest.fixture
def reports(database, clock):
    from core.services.report import ReportBuilder

    return ReportBuilder(database.session, timezone="Asia/Jakarta", clock=clock)


@pytest.fixture
def fake_dynamo():
    return FakeDynamo()


# PostgreSQL fixtures
@pytest.fixture
def pg_database():
    """Provide a PostgreSQL ledger database for integration tests."""
    from core.config import get_config
    from core.db import LedgerDatabase

    db = LedgerDatabase(get_config())
    db.connect()
    db.create_schema()
    yield db

    with db.session() as session:
        from sqlalchemy import text

        session.execute(
            text("TRUNCATE return_passengers, returns, departure_passengers, departures, passengers, drivers CASCADE")
        )
        session.commit()
    db.disconnect()


# DynamoDB fixtures
@pytest.fixture
def dynamodb_client():
    """Provide a DynamoDB client for integration tests."""
    import boto3
    from core.config import get_config

    config = get_config()

    return boto3.client(
        "dynamodb",
        endpoint_url=config.dynamodb_endpoint,
        region_name=config.aws_region,
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )


@pytest.fixture
def sessions_table(dynamodb_client):
    """Provide the ChatSessions table name, emptied after the test."""
    from core.config import get_config

    table_name = get_config().sessions_table
    yield table_name

    # Cleanup: scan and delete all items created during test
    response = dynamodb_client.scan(TableName=table_name)
    for item in response.get("Items", []):
        dynamodb_client.delete_item(TableName=table_name, Key={"chatId": item["chatId"]})


@pytest.fixture
def config_factory():
    return make_config
