"""
Pydantic schemas for customer endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UpdateCustomerRequest(BaseModel):
    # Omitted name keeps the stored one.
    name: str | None = Field(default=None, max_length=200)
    address: str | None = Field(default=None, max_length=500)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=50)
