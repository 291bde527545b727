"""Orders repository - the order ledger.

Uses raw SQL with psycopg2 (no ORM). Lookups by user and by listing use
secondary indexes on user_id and listing_id.
"""

from decimal import Decimal

from stayhub.domain.errors import NotFoundError
from stayhub.domain.models import Order
from stayhub.infra.db import fetchall, fetchone, txn

_COLUMNS = (
    "id, user_id, host_id, listing_id, start_date, end_date, "
    "total_amount, created_at, updated_at"
)


def _to_order(row: tuple) -> Order:
    return Order(
        id=str(row[0]),
        user_id=row[1],
        host_id=row[2],
        listing_id=row[3],
        start_date=row[4],
        end_date=row[5],
        total_amount=Decimal(row[6]),
        created_at=row[7],
        updated_at=row[8],
    )


class PgOrderLedger:
    """OrderLedger backed by the orders table."""

    def get(self, order_id: str) -> Order | None:
        with txn() as cur:
            row = fetchone(
                cur,
                f"SELECT {_COLUMNS} FROM orders WHERE id = %s",
                (order_id,),
            )
        return _to_order(row) if row else None

    def insert(self, order: Order) -> None:
        with txn() as cur:
            cur.execute(
                """
                INSERT INTO orders (
                    id, user_id, host_id, listing_id, start_date, end_date,
                    total_amount, created_at, updated_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    order.id,
                    order.user_id,
                    order.host_id,
                    order.listing_id,
                    order.start_date,
                    order.end_date,
                    order.total_amount,
                    order.created_at,
                    order.updated_at,
                ),
            )

    def replace(self, order: Order) -> None:
        with txn() as cur:
            row = fetchone(
                cur,
                """
                UPDATE orders
                SET listing_id = %s,
                    start_date = %s,
                    end_date = %s,
                    total_amount = %s,
                    updated_at = %s
                WHERE id = %s
                RETURNING id
                """,
                (
                    order.listing_id,
                    order.start_date,
                    order.end_date,
                    order.total_amount,
                    order.updated_at,
                    order.id,
                ),
            )
        if row is None:
            raise NotFoundError("Order not found", {"order_id": order.id})

    def delete(self, order_id: str) -> None:
        with txn() as cur:
            cur.execute("DELETE FROM orders WHERE id = %s", (order_id,))

    def list_by_user(self, user_id: str) -> list[Order]:
        with txn() as cur:
            rows = fetchall(
                cur,
                f"SELECT {_COLUMNS} FROM orders WHERE user_id = %s ORDER BY start_date, id",
                (user_id,),
            )
        return [_to_order(row) for row in rows]

    def list_by_listing(self, listing_id: str) -> list[Order]:
        with txn() as cur:
            rows = fetchall(
                cur,
                f"SELECT {_COLUMNS} FROM orders WHERE listing_id = %s ORDER BY start_date, id",
                (listing_id,),
            )
        return [_to_order(row) for row in rows]
