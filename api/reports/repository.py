"""
Reporting queries (raw SQL aggregates).
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def get_product_stats(db: Database) -> list[dict[str, Any]]:
    """
    Per category: number of products and their average price (2 decimals).
    """
    return await db.fetch_all(
        """
        SELECT
          c.name AS category,
          count(p.product_id) AS total_products,
          round(avg(p.price)::numeric, 2) AS average_price
        FROM products p
        JOIN products_categories pc ON pc.product_id = p.product_id
        JOIN categories c ON c.category_id = pc.category_id
        GROUP BY c.category_id, c.name
        ORDER BY c.name
        """
    )


async def get_review_stats(db: Database) -> list[dict[str, Any]]:
    """
    Per reviewed product: average rating (2 decimals).
    """
    return await db.fetch_all(
        """
        SELECT
          p.product_id,
          p.name AS product_name,
          round(avg(r.rating)::numeric, 2) AS average_rating
        FROM reviews r
        JOIN products p ON p.product_id = r.product_id
        GROUP BY p.product_id, p.name
        ORDER BY p.name
        """
    )
