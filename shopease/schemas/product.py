from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from shopease.schemas.validation import MAX_INTEGER, validate_fields


class ProductIn(BaseModel):
    """
    Schema for creating or replacing a product.

    `description` and `stock_quantity` are optional; on update they are only
    replaced when present in the payload.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    product_name: str = Field(..., min_length=1, max_length=100, description="Product name")
    price: Decimal = Field(
        ..., ge=0, max_digits=10, decimal_places=2, description="Unit price (must be non-negative)"
    )
    category: str = Field(..., min_length=1, max_length=50, description="Product category")
    description: Optional[str] = Field(None, description="Optional product description")
    stock_quantity: int = Field(
        default=0, ge=0, le=MAX_INTEGER, strict=True,
        description="Available stock (must be non-negative)"
    )


class ProductResponse(BaseModel):
    """Schema for product response including all fields."""
    product_id: int
    product_name: str
    price: Decimal
    category: str
    description: Optional[str] = None
    stock_quantity: int

    model_config = ConfigDict(from_attributes=True)


def validate_product(fields: Any) -> ProductIn:
    """Check product shape: non-empty name/category, non-negative price and stock."""
    return validate_fields(ProductIn, fields)
