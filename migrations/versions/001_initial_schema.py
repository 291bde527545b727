"""Initial schema: listings, availability calendar, orders (SQL-only).

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op


# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS listings (
    id            text PRIMARY KEY,
    listing_type  text NOT NULL CHECK (listing_type IN ('STAY', 'EXPR')),
    host_id       text NOT NULL,
    city          text,
    image         text,
    created_at    timestamptz NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS ix_listings_host_id ON listings (host_id);

CREATE TABLE IF NOT EXISTS availability_days (
    listing_id    text NOT NULL,
    listing_type  text NOT NULL CHECK (listing_type IN ('STAY', 'EXPR')),
    date          date NOT NULL,
    is_available  boolean NOT NULL DEFAULT false,
    price         numeric(12, 2) NOT NULL CHECK (price >= 0),
    updated_at    timestamptz NOT NULL DEFAULT now(),
    PRIMARY KEY (listing_id, date)
);

-- Search path: window by date, band by price
CREATE INDEX IF NOT EXISTS ix_availability_days_date_price
    ON availability_days (date, price)
    WHERE is_available;

CREATE TABLE IF NOT EXISTS orders (
    id            text PRIMARY KEY,
    user_id       text NOT NULL,
    host_id       text NOT NULL,
    listing_id    text NOT NULL,
    start_date    date NOT NULL,
    end_date      date NOT NULL,
    total_amount  numeric(12, 2) NOT NULL,
    created_at    timestamptz NOT NULL,
    updated_at    timestamptz,
    CHECK (start_date <= end_date)
);

CREATE INDEX IF NOT EXISTS ix_orders_user_id ON orders (user_id);
CREATE INDEX IF NOT EXISTS ix_orders_listing_id ON orders (listing_id);
"""


def upgrade() -> None:
    op.execute(SCHEMA_SQL)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders")
    op.execute("DROP TABLE IF EXISTS availability_days")
    op.execute("DROP TABLE IF EXISTS listings")
