"""
Product API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from core.db import Database, RowId, get_db

from . import schemas, service

router = APIRouter()


@router.get("/products")
async def list_products(db: Database = Depends(get_db)) -> dict:
    rows = await service.list_products(db)
    return {"products": rows, "count": len(rows)}


@router.post("/products", status_code=status.HTTP_201_CREATED)
async def create_product(
    request: schemas.CreateProductRequest,
    db: Database = Depends(get_db),
) -> dict:
    return await service.create_product(db, request)


@router.get("/products/category/{category_id}")
async def products_by_category(category_id: RowId, db: Database = Depends(get_db)) -> dict:
    rows = await service.products_in_category(db, category_id)
    return {"category_id": category_id, "products": rows, "count": len(rows)}


@router.get("/products/{product_id}")
async def get_product(product_id: RowId, db: Database = Depends(get_db)) -> dict:
    return await service.get_product(db, product_id)


@router.put("/products/{product_id}")
async def update_product_price(
    product_id: RowId,
    request: schemas.UpdatePriceRequest,
    db: Database = Depends(get_db),
) -> dict:
    return await service.update_price(db, product_id, request)


@router.delete("/products/{product_id}")
async def delete_product(product_id: RowId, db: Database = Depends(get_db)) -> dict:
    return await service.delete_product(db, product_id)


# ?name=searchterm
@router.get("/product/search")
async def search_by_name(
    name: str = Query(..., min_length=1, max_length=200),
    db: Database = Depends(get_db),
) -> dict:
    rows = await service.search_by_name(db, name)
    return {"query": name, "products": rows, "count": len(rows)}


# ?name=gaming&category=electronics (either one alone is accepted)
@router.get("/search/products")
async def search_products(
    name: str | None = Query(default=None, max_length=200),
    category: str | None = Query(default=None, max_length=200),
    db: Database = Depends(get_db),
) -> dict:
    rows = await service.search(db, name=name, category=category)
    return {
        "filters": {"name": name, "category": category},
        "products": rows,
        "count": len(rows),
    }
