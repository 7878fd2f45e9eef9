#!/usr/bin/env python3
"""Create tables for local development.

Creates the ChatSessions DynamoDB table against DynamoDB Local and the
ledger tables in the configured SQL database (use DATABASE_URL=sqlite:///...
for a file database, or run Alembic against PostgreSQL instead).

Usage:
    python scripts/create_local_tables.py
"""

import sys
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

# Add src to path for config import
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import get_config
from core.db import LedgerDatabase


def create_sessions_table(dynamodb, table_name: str):
    """Create the chat session table with TTL on ``ttl``."""
    try:
        dynamodb.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": "chatId", "KeyType": "HASH"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "chatId", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        dynamodb.update_time_to_live(
            TableName=table_name,
            TimeToLiveSpecification={"Enabled": True, "AttributeName": "ttl"},
        )
        print(f"✓ Created {table_name} table")
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            print(f"✓ {table_name} table already exists")
        else:
            raise


def create_ledger_tables(config):
    """Create drivers, passengers and leg tables if missing."""
    with LedgerDatabase(config) as database:
        database.create_schema()
    print("✓ Ledger tables ready")


def main():
    """Create all local tables."""
    config = get_config()

    endpoint_url = config.dynamodb_endpoint or "http://localhost:8000"

    print(f"Creating DynamoDB tables at {endpoint_url}...")
    print()

    # For DynamoDB Local, use dummy credentials
    dynamodb = boto3.client(
        "dynamodb",
        endpoint_url=endpoint_url,
        region_name=config.aws_region,
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )

    create_sessions_table(dynamodb, config.sessions_table)
    create_ledger_tables(config)

    print()
    print("✅ All local tables ready")


if __name__ == "__main__":
    main()
