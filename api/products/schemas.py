"""
Pydantic schemas for product endpoints.

`price` and `stock` are accepted as raw JSON values; the service layer
validates them so clients get a message naming the broken rule.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from core.db import MAX_INT4


class CreateProductRequest(BaseModel):
    manufacturer_id: int | None = Field(default=None, ge=1, le=MAX_INT4)
    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: Any = None
    stock: Any = None
    category_id: int | None = Field(default=None, ge=1, le=MAX_INT4)


class UpdatePriceRequest(BaseModel):
    price: Any = None
