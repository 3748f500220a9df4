"""
Product catalog schemas.

Cornices and mouldings sold by the plant. Categories are stored as free
text; the catalog uses EPS, BR and LED.
"""

from pydantic import Field, field_validator
from typing import Any, Optional
from decimal import Decimal
from datetime import datetime

from models.base import BaseSchema, camel_field


class ProductCreate(BaseSchema):
    """
    Create a new product.

    Required: sku, name, category, base_price, cost_price
    """

    sku: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Product SKU (unique identifier)",
        examples=["EPS-CC-100"]
    )
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=50, examples=["EPS", "BR", "LED"])
    subcategory: Optional[str] = Field(None, examples=["Premium", "Budget", "Ready"])
    dimensions: Optional[str] = None
    pack_size: Optional[int] = camel_field("pack_size", None, gt=0)
    packs_per_box: Optional[int] = camel_field("packs_per_box", None, gt=0)
    base_price: Decimal = camel_field("base_price", ge=0)
    cost_price: Decimal = camel_field("cost_price", ge=0)
    weight: Optional[Decimal] = Field(None, ge=0)
    specifications: Optional[dict[str, Any]] = None

    @field_validator("sku", "category")
    @classmethod
    def uppercase(cls, v: str) -> str:
        """SKU and category are stored uppercase."""
        return v.upper().strip()


class ProductUpdate(BaseSchema):
    """
    Update existing product.

    All fields optional - only provided fields are updated.
    """

    sku: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    subcategory: Optional[str] = None
    dimensions: Optional[str] = None
    pack_size: Optional[int] = camel_field("pack_size", None, gt=0)
    packs_per_box: Optional[int] = camel_field("packs_per_box", None, gt=0)
    base_price: Optional[Decimal] = camel_field("base_price", None, ge=0)
    cost_price: Optional[Decimal] = camel_field("cost_price", None, ge=0)
    weight: Optional[Decimal] = Field(None, ge=0)
    specifications: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = camel_field("is_active", None)

    @field_validator("sku", "category")
    @classmethod
    def uppercase(cls, v: Optional[str]) -> Optional[str]:
        """SKU and category are stored uppercase if provided."""
        if v is None:
            return v
        return v.upper().strip()


class ProductResponse(BaseSchema):
    """Product row as stored."""

    id: str
    sku: str
    name: str
    description: Optional[str] = None
    category: str
    subcategory: Optional[str] = None
    dimensions: Optional[str] = None
    pack_size: Optional[int] = camel_field("pack_size", None)
    packs_per_box: Optional[int] = camel_field("packs_per_box", None)
    base_price: Decimal = camel_field("base_price", Decimal("0"))
    cost_price: Decimal = camel_field("cost_price", Decimal("0"))
    weight: Optional[Decimal] = None
    specifications: Optional[dict[str, Any]] = None
    is_active: bool = camel_field("is_active", True)
    created_at: Optional[datetime] = camel_field("created_at", None)
