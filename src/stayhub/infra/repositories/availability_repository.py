"""Availability repository - per (listing, date) calendar records.

Uses raw SQL with psycopg2 (no ORM). Each method runs in its own short
transaction. The listing type column is filled from the id prefix on write,
so range queries filter on the column instead of parsing ids.
"""

from datetime import date
from decimal import Decimal

from stayhub.domain.models import AvailabilityRecord, ListingRef, ListingType
from stayhub.infra.db import fetchall, fetchone, txn

_COLUMNS = "listing_id, date, is_available, price"


def _to_record(row: tuple) -> AvailabilityRecord:
    return AvailabilityRecord(
        listing_id=row[0],
        day=row[1],
        is_available=row[2],
        price=Decimal(row[3]),
    )


class PgAvailabilityStore:
    """AvailabilityStore backed by the availability_days table."""

    def get_day(self, listing_id: str, day: date) -> AvailabilityRecord | None:
        with txn() as cur:
            row = fetchone(
                cur,
                f"SELECT {_COLUMNS} FROM availability_days "
                "WHERE listing_id = %s AND date = %s",
                (listing_id, day),
            )
        return _to_record(row) if row else None

    def get_range(
        self, listing_id: str, start: date, end: date
    ) -> dict[date, AvailabilityRecord]:
        with txn() as cur:
            rows = fetchall(
                cur,
                f"""
                SELECT {_COLUMNS}
                FROM availability_days
                WHERE listing_id = %s
                  AND date >= %s
                  AND date <= %s
                ORDER BY date
                """,
                (listing_id, start, end),
            )
        return {row[1]: _to_record(row) for row in rows}

    def put_day(
        self, listing_id: str, day: date, *, is_available: bool, price: Decimal
    ) -> AvailabilityRecord:
        ref = ListingRef.parse(listing_id)
        with txn() as cur:
            row = fetchone(
                cur,
                f"""
                INSERT INTO availability_days (listing_id, listing_type, date, is_available, price)
                VALUES (%s, %s, %s, %s, %s)
                ON CONFLICT (listing_id, date) DO UPDATE
                SET is_available = EXCLUDED.is_available,
                    price = EXCLUDED.price,
                    updated_at = now()
                RETURNING {_COLUMNS}
                """,
                (listing_id, ref.listing_type.value, day, is_available, price),
            )
        return _to_record(row)

    def reserve_day(self, listing_id: str, day: date) -> bool:
        """Flip a day to unavailable with a guard on its current value.

        The WHERE guard makes this a conditional write: of two concurrent
        callers only one sees a returned row.
        """
        with txn() as cur:
            row = fetchone(
                cur,
                """
                UPDATE availability_days
                SET is_available = false, updated_at = now()
                WHERE listing_id = %s
                  AND date = %s
                  AND is_available = true
                RETURNING date
                """,
                (listing_id, day),
            )
        return row is not None

    def release_day(self, listing_id: str, day: date) -> None:
        with txn() as cur:
            cur.execute(
                """
                UPDATE availability_days
                SET is_available = true, updated_at = now()
                WHERE listing_id = %s AND date = %s
                """,
                (listing_id, day),
            )

    def query_window(
        self,
        listing_type: ListingType,
        start: date,
        end: date,
        *,
        min_price: Decimal,
        max_price: Decimal | None,
    ) -> list[AvailabilityRecord]:
        conditions = [
            "date >= %s",
            "date <= %s",
            "is_available = true",
            "listing_type = %s",
            "price >= %s",
        ]
        params: list = [start, end, listing_type.value, min_price]

        if max_price is not None:
            conditions.append("price <= %s")
            params.append(max_price)

        where = " AND ".join(conditions)

        with txn() as cur:
            rows = fetchall(
                cur,
                f"""
                SELECT {_COLUMNS}
                FROM availability_days
                WHERE {where}
                ORDER BY date, price
                """,
                params,
            )
        return [_to_record(row) for row in rows]
