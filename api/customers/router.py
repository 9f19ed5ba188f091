"""
Customer API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.db import Database, RowId, get_db

from . import schemas, service

router = APIRouter()


@router.get("/customers/{customer_id}")
async def get_customer(customer_id: RowId, db: Database = Depends(get_db)) -> dict:
    rows = await service.customer_with_orders(db, customer_id)
    return {"customer_id": customer_id, "order_lines": rows, "count": len(rows)}


@router.put("/customers/{customer_id}")
async def update_customer(
    customer_id: RowId,
    request: schemas.UpdateCustomerRequest,
    db: Database = Depends(get_db),
) -> dict:
    customer = await service.update_customer(db, customer_id, request)
    return {"message": "The customer has been updated.", "customer": customer}


@router.get("/customers/{customer_id}/orders")
async def get_customer_orders(customer_id: RowId, db: Database = Depends(get_db)) -> dict:
    rows = await service.customer_orders(db, customer_id)
    return {"customer_id": customer_id, "orders": rows, "count": len(rows)}
