"""
Customer business logic.
"""

from __future__ import annotations

import logging
import re

from fastapi import HTTPException, status

from core.db import Database

from . import repository, schemas

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,6}$")


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email or "") is not None


async def customer_with_orders(db: Database, customer_id: int) -> list[dict]:
    rows = await repository.get_customer_with_orders(db, customer_id)
    if not rows:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No customer with orders found for id {customer_id}.",
        )
    return rows


async def update_customer(db: Database, customer_id: int, payload: schemas.UpdateCustomerRequest) -> dict:
    address = (payload.address or "").strip()
    email = (payload.email or "").strip()
    phone = (payload.phone or "").strip()
    if not address or not email or not phone:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Address, email and phone are required to proceed.",
        )

    if not is_valid_email(email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The email address must be valid and correctly formatted.",
        )

    name = (payload.name or "").strip() or None
    row = await repository.update_customer(
        db,
        customer_id,
        name=name,
        address=address,
        email=email,
        phone=phone,
    )
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer {customer_id} not found.",
        )

    logger.info("customer_updated customer_id=%s", customer_id)
    return row


async def customer_orders(db: Database, customer_id: int) -> list[dict]:
    rows = await repository.get_customer_orders(db, customer_id)
    if not rows:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No orders found for customer {customer_id}.",
        )
    return rows
