from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shopease.api.deps import request_deadline
from shopease.database import get_db
from shopease.services.product_service import ProductService
from shopease.schemas.product import ProductIn, ProductResponse

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="Retrieve all products",
    description="Get every product in insertion order."
)
def list_products(
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """Get all products."""
    return ProductService(db).list_products(deadline=deadline)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Retrieve a product by ID",
    responses={404: {"description": "Product not found"}}
)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """Get a product by ID."""
    return ProductService(db).get_product(product_id, deadline=deadline)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    responses={400: {"description": "Invalid product fields"}}
)
def create_product(
    product_data: ProductIn,
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """
    Create a new product.

    - **product_name**: Product name (required)
    - **price**: Unit price, must be non-negative (required)
    - **category**: Product category (required)
    - **description**: Free-form description (optional)
    - **stock_quantity**: Initial stock, must be non-negative (default 0)
    """
    return ProductService(db).create_product(product_data, deadline=deadline)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update an existing product",
    responses={
        400: {"description": "Invalid product fields"},
        404: {"description": "Product not found"},
    }
)
def update_product(
    product_id: int,
    product_data: ProductIn,
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """
    Replace a product.

    product_name, price and category are always replaced. description and
    stock_quantity are only replaced when included in the body.
    """
    return ProductService(db).update_product(product_id, product_data, deadline=deadline)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product by ID",
    responses={
        404: {"description": "Product not found"},
        409: {"description": "Product is still referenced by sales"},
    }
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    deadline: float = Depends(request_deadline)
):
    """Delete a product. Rejected while any sale references it."""
    ProductService(db).delete_product(product_id, deadline=deadline)
    return None
