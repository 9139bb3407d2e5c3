from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from shopease.schemas.validation import MAX_INTEGER, validate_fields


class SaleIn(BaseModel):
    """Schema for creating or replacing a sale."""
    customer_id: int = Field(..., le=MAX_INTEGER, strict=True, description="ID of the buying customer")
    product_id: int = Field(..., le=MAX_INTEGER, strict=True, description="ID of the product sold")
    quantity: int = Field(
        ..., gt=0, le=MAX_INTEGER, strict=True, description="Quantity sold (must be positive)"
    )


class SaleResponse(BaseModel):
    """Schema for sale response."""
    sale_id: int
    customer_id: int
    product_id: int
    quantity: int
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


def validate_sale_input(fields: Any) -> SaleIn:
    """
    Check sale shape only: a positive integer quantity plus customer and
    product ids. Whether the referenced rows exist is the service's job.
    """
    return validate_fields(SaleIn, fields)
