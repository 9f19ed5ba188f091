"""
Reporting logic.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from core.db import Database

from . import repository


async def product_stats(db: Database) -> list[dict]:
    # An empty catalog is a valid (empty) report.
    return await repository.get_product_stats(db)


async def review_stats(db: Database) -> list[dict]:
    rows = await repository.get_review_stats(db)
    if not rows:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No reviews found.")
    return rows
