import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shopease.api.deps import request_deadline
from shopease.database import get_db
from shopease.services.sale_service import SaleService
from shopease.schemas.sale import SaleIn, SaleResponse
from shopease.tasks.inventory_tasks import check_stock_level

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get(
    "",
    response_model=List[SaleResponse],
    summary="Retrieve all sales",
    description="Get every sale in insertion order."
)
def list_sales(
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """Get all sales."""
    return SaleService(db).list_sales(deadline=deadline)


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    summary="Retrieve a sale by ID",
    responses={404: {"description": "Sale not found"}}
)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """Get a sale by ID."""
    return SaleService(db).get_sale(sale_id, deadline=deadline)


@router.post(
    "",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new sale",
    description="""
    Record a sale and consume the product's stock.

    **Race Condition Handling:**
    Stock is decremented with a conditional UPDATE in the same transaction
    as the sale insert. When concurrent sales compete for the last units:
    - Only the sales that fit in the remaining stock succeed
    - Others receive a 409 error with an 'Insufficient stock' message

    After the sale commits, a background Celery task checks for low stock.
    """,
    responses={
        400: {"description": "Invalid sale fields"},
        404: {"description": "Product or customer not found"},
        409: {"description": "Insufficient stock"},
    }
)
def create_sale(
    sale_data: SaleIn,
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """
    Create a sale.

    - **customer_id**: ID of an existing customer (required)
    - **product_id**: ID of an existing product (required)
    - **quantity**: Units sold, must be positive (required)
    """
    sale = SaleService(db).create_sale(sale_data, deadline=deadline)

    # The sale is committed; a broker outage must not turn it into an error
    try:
        check_stock_level.delay(sale.product_id)
    except Exception as e:
        logger.error(f"Could not enqueue stock check for product #{sale.product_id}: {e}")

    return sale


@router.put(
    "/{sale_id}",
    response_model=SaleResponse,
    summary="Update an existing sale",
    description="Replace customer_id, product_id and quantity. Inventory is not re-adjusted.",
    responses={
        400: {"description": "Invalid sale fields"},
        404: {"description": "Sale, product or customer not found"},
    }
)
def update_sale(
    sale_id: int,
    sale_data: SaleIn,
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """Replace a sale."""
    return SaleService(db).update_sale(sale_id, sale_data, deadline=deadline)


@router.delete(
    "/{sale_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a sale by ID",
    description="Delete a sale. Stock is not restored.",
    responses={404: {"description": "Sale not found"}}
)
def delete_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """Delete a sale."""
    SaleService(db).delete_sale(sale_id, deadline=deadline)
    return None
