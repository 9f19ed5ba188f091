"""
Customer persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database

CUSTOMER_COLUMNS = "customer_id, name, address, email, phone"


async def get_customer_with_orders(db: Database, customer_id: int) -> list[dict[str, Any]]:
    """
    One row per order line: customer contact data, order, shipping method and
    product flattened together. Customers without order lines yield no rows.
    """
    return await db.fetch_all(
        """
        SELECT
          cu.customer_id,
          cu.name AS customer_name,
          cu.address,
          cu.email,
          cu.phone,
          o.order_id,
          o.order_date,
          o.shipping_method_id,
          sm.name AS shipping_method,
          p.product_id,
          p.name AS product_name,
          od.quantity,
          od.status
        FROM customers cu
        JOIN orders o ON o.customer_id = cu.customer_id
        JOIN order_details od ON od.order_id = o.order_id
        JOIN products p ON p.product_id = od.product_id
        LEFT JOIN shipping_methods sm ON sm.shipping_method_id = o.shipping_method_id
        WHERE cu.customer_id = $1
        ORDER BY o.order_date, o.order_id, p.product_id
        """,
        customer_id,
    )


async def update_customer(
    db: Database,
    customer_id: int,
    *,
    name: str | None,
    address: str,
    email: str,
    phone: str,
) -> dict[str, Any] | None:
    """
    Update contact data. Returns the updated row, or None for an unknown id.
    """
    return await db.fetch_one(
        f"""
        UPDATE customers
        SET name = COALESCE($2, name),
            address = $3,
            email = $4,
            phone = $5
        WHERE customer_id = $1
        RETURNING {CUSTOMER_COLUMNS}
        """,
        customer_id,
        name,
        address,
        email,
        phone,
    )


async def get_customer_orders(db: Database, customer_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT order_id, customer_id, order_date, shipping_method_id
        FROM orders
        WHERE customer_id = $1
        ORDER BY order_date, order_id
        """,
        customer_id,
    )
