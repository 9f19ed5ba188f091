"""
Product persistence (raw SQL).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from core.db import Database, DatabaseError
from core.query import QueryBuilder, like_pattern

PRODUCT_COLUMNS = "product_id, manufacturer_id, name, description, price, stock"


async def list_products(db: Database) -> list[dict[str, Any]]:
    """
    Products with manufacturer and category names joined flat.

    A product in several categories yields one row per category; a product
    without a category still appears (category_name is NULL).
    """
    return await db.fetch_all(
        """
        SELECT
          p.product_id,
          p.name AS product_name,
          p.description,
          p.price,
          p.stock,
          c.name AS category_name,
          m.name AS manufacturer_name
        FROM products p
        LEFT JOIN manufacturers m ON m.manufacturer_id = p.manufacturer_id
        LEFT JOIN products_categories pc ON pc.product_id = p.product_id
        LEFT JOIN categories c ON c.category_id = pc.category_id
        ORDER BY p.product_id, c.category_id
        """
    )


async def get_product_by_id(db: Database, product_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products
        WHERE product_id = $1
        """,
        product_id,
    )


async def search_products_by_name(db: Database, term: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products
        WHERE name LIKE $1
        ORDER BY product_id
        """,
        like_pattern(term),
    )


async def get_products_by_category(db: Database, category_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT
          p.product_id,
          p.name AS product_name,
          c.category_id,
          c.name AS category_name
        FROM products_categories pc
        JOIN products p ON p.product_id = pc.product_id
        JOIN categories c ON c.category_id = pc.category_id
        WHERE c.category_id = $1
        ORDER BY p.product_id
        """,
        category_id,
    )


async def search_products_by_name_and_category(
    db: Database,
    *,
    name: str | None = None,
    category: str | None = None,
) -> list[dict[str, Any]]:
    """
    Substring search on product name and/or category name.

    Only the filters that are supplied are applied. With neither supplied
    every categorized product matches.
    """
    qb = QueryBuilder(
        """
        SELECT
          p.product_id,
          p.name AS product_name,
          c.name AS category_name
        FROM products p
        JOIN products_categories pc ON pc.product_id = p.product_id
        JOIN categories c ON c.category_id = pc.category_id
        """
    )
    qb.where_if("p.name LIKE {}", like_pattern(name) if name else None)
    qb.where_if("c.name LIKE {}", like_pattern(category) if category else None)
    sql, args = qb.build("ORDER BY p.product_id, c.category_id")
    return await db.fetch_all(sql, *args)


async def add_product(
    db: Database,
    *,
    manufacturer_id: int | None,
    name: str,
    description: str | None,
    price: Decimal,
    stock: int,
    category_id: int | None = None,
) -> int:
    """
    Insert a product (and its category link, when given) in one transaction.

    Returns the new product id.
    """
    async with db.transaction() as tx:
        row = await tx.fetch_one(
            """
            INSERT INTO products (manufacturer_id, name, description, price, stock)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING product_id
            """,
            manufacturer_id,
            name,
            description,
            price,
            stock,
        )
        if row is None or "product_id" not in row:
            raise DatabaseError("Failed to insert product.")

        product_id = int(row["product_id"])
        if category_id is not None:
            await tx.execute(
                "INSERT INTO products_categories (product_id, category_id) VALUES ($1, $2)",
                product_id,
                category_id,
            )
        return product_id


async def update_product_price(db: Database, product_id: int, price: Decimal) -> dict[str, Any] | None:
    """
    Set a new price. Returns {product_id, name, price}, or None for an unknown id.
    """
    return await db.fetch_one(
        """
        UPDATE products
        SET price = $2
        WHERE product_id = $1
        RETURNING product_id, name, price
        """,
        product_id,
        price,
    )


async def delete_product(db: Database, product_id: int) -> int:
    """
    Delete a product. Category links and reviews go with it through the
    schema's ON DELETE CASCADE rules. Returns the number of deleted rows.
    """
    return await db.execute(
        "DELETE FROM products WHERE product_id = $1",
        product_id,
    )
