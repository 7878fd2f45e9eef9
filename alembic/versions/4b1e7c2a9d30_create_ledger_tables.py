"""create_ledger_tables

Revision ID: 4b1e7c2a9d30
Revises: 
Create Date: 2026-10-19 09:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1e7c2a9d30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE drivers (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_drivers_name UNIQUE (name)
        )
    """)

    op.execute("""
        CREATE TABLE passengers (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_passengers_name UNIQUE (name)
        )
    """)

    # One leg per driver per calendar day, for each kind
    for legs, items, parent in (
        ("departures", "departure_passengers", "departure_id"),
        ("returns", "return_passengers", "return_id"),
    ):
        op.execute(f"""
            CREATE TABLE {legs} (
                id SERIAL PRIMARY KEY,
                driver_id INTEGER NOT NULL REFERENCES drivers(id),
                trip_date DATE NOT NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                CONSTRAINT uq_{legs}_driver_day UNIQUE (driver_id, trip_date)
            )
        """)
        op.execute(f"CREATE INDEX idx_{legs}_trip_date ON {legs} (trip_date)")

        # passenger_name is free text, deliberately not a foreign key
        op.execute(f"""
            CREATE TABLE {items} (
                id SERIAL PRIMARY KEY,
                {parent} INTEGER NOT NULL REFERENCES {legs}(id) ON DELETE CASCADE,
                passenger_name VARCHAR(255) NOT NULL,
                price INTEGER NOT NULL
            )
        """)
        op.execute(f"CREATE INDEX idx_{items}_{parent} ON {items} ({parent})")
        op.execute(f"CREATE INDEX idx_{items}_name ON {items} (passenger_name)")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TABLE IF EXISTS return_passengers")
    op.execute("DROP TABLE IF EXISTS returns")
    op.execute("DROP TABLE IF EXISTS departure_passengers")
    op.execute("DROP TABLE IF EXISTS departures")
    op.execute("DROP TABLE IF EXISTS passengers")
    op.execute("DROP TABLE IF EXISTS drivers")
