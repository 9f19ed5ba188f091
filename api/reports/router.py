"""
Reporting API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.db import Database, get_db

from . import service

router = APIRouter()


@router.get("/product/stats")
async def product_stats(db: Database = Depends(get_db)) -> dict:
    rows = await service.product_stats(db)
    return {"stats": rows, "count": len(rows)}


@router.get("/reviews/stats")
async def review_stats(db: Database = Depends(get_db)) -> dict:
    rows = await service.review_stats(db)
    return {"stats": rows, "count": len(rows)}
