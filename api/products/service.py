"""
Product business logic.

Scope:
- input validation (400 with a message naming the rule)
- not-found mapping (404)
- mutation logging

Storage faults (`DatabaseError`) are not caught here; the app-level handler
turns them into a 500.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from fastapi import HTTPException, status

from core.db import MAX_INT4, Database

from . import repository, schemas

logger = logging.getLogger(__name__)

# products.price is numeric(10, 2).
MAX_PRICE = Decimal("100000000")


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_decimal(value: Any, field: str) -> Decimal:
    # bool is an int subclass; True must not pass as 1.
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise _bad_request(f"{field} must be a number.")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise _bad_request(f"{field} must be a number.") from exc
    if not number.is_finite():
        raise _bad_request(f"{field} must be a number.")
    return number


def parse_price(value: Any) -> Decimal:
    if _is_missing(value):
        raise _bad_request("Price is required.")
    price = _to_decimal(value, "Price")
    if price <= 0:
        raise _bad_request("Price must be greater than 0.")
    if price >= MAX_PRICE:
        raise _bad_request(f"Price must be less than {MAX_PRICE}.")
    return price


def parse_stock(value: Any) -> int:
    if _is_missing(value):
        raise _bad_request("Stock is required.")
    stock = _to_decimal(value, "Stock")
    if stock != stock.to_integral_value():
        raise _bad_request("Stock must be a whole number.")
    if stock < 0:
        raise _bad_request("Stock must be 0 or greater.")
    if stock > MAX_INT4:
        raise _bad_request(f"Stock must be at most {MAX_INT4}.")
    return int(stock)


async def list_products(db: Database) -> list[dict]:
    rows = await repository.list_products(db)
    if not rows:
        raise _not_found("No products found.")
    return rows


async def get_product(db: Database, product_id: int) -> dict:
    row = await repository.get_product_by_id(db, product_id)
    if row is None:
        raise _not_found(f"Product {product_id} not found.")
    return row


async def search_by_name(db: Database, term: str) -> list[dict]:
    term = (term or "").strip()
    if not term:
        raise _bad_request("Search term 'name' is required.")
    rows = await repository.search_products_by_name(db, term)
    if not rows:
        raise _not_found(f"No products match '{term}'.")
    return rows


async def products_in_category(db: Database, category_id: int) -> list[dict]:
    rows = await repository.get_products_by_category(db, category_id)
    if not rows:
        raise _not_found(f"No products found in category {category_id}.")
    return rows


async def search(db: Database, *, name: str | None, category: str | None) -> list[dict]:
    name = (name or "").strip() or None
    category = (category or "").strip() or None
    if name is None and category is None:
        raise _bad_request("Provide at least one of 'name' or 'category' to search.")

    rows = await repository.search_products_by_name_and_category(db, name=name, category=category)
    if not rows:
        raise _not_found("No products match the provided name and category.")
    return rows


async def create_product(db: Database, payload: schemas.CreateProductRequest) -> dict:
    missing = [
        field
        for field, value in (("name", payload.name), ("price", payload.price), ("stock", payload.stock))
        if _is_missing(value)
    ]
    if missing:
        raise _bad_request(f"Name, price and stock are required. Missing: {', '.join(missing)}.")

    name = (payload.name or "").strip()
    price = parse_price(payload.price)
    stock = parse_stock(payload.stock)

    product_id = await repository.add_product(
        db,
        manufacturer_id=payload.manufacturer_id,
        name=name,
        description=payload.description,
        price=price,
        stock=stock,
        category_id=payload.category_id,
    )
    logger.info("product_created product_id=%s category_id=%s", product_id, payload.category_id)

    return {
        "product_id": product_id,
        "manufacturer_id": payload.manufacturer_id,
        "name": name,
        "description": payload.description,
        "price": float(price),
        "stock": stock,
        "category_id": payload.category_id,
    }


async def update_price(db: Database, product_id: int, payload: schemas.UpdatePriceRequest) -> dict:
    price = parse_price(payload.price)

    row = await repository.update_product_price(db, product_id, price)
    if row is None:
        raise _not_found(f"Product {product_id} not found.")

    logger.info("product_price_updated product_id=%s price=%s", product_id, price)
    return {
        "message": "Product price has been updated.",
        "product_id": int(row["product_id"]),
        "name": str(row["name"]),
        "price": row["price"],
    }


async def delete_product(db: Database, product_id: int) -> dict:
    existing = await repository.get_product_by_id(db, product_id)
    if existing is None:
        raise _not_found(f"Product {product_id} not found.")

    deleted = await repository.delete_product(db, product_id)
    if deleted == 0:
        # Removed by a concurrent request between the check and the delete.
        raise _not_found(f"Product {product_id} not found.")

    logger.info("product_deleted product_id=%s", product_id)
    return {
        "ok": True,
        "product_id": product_id,
        "message": "Product has been deleted.",
    }
