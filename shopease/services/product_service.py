import logging
from typing import Any, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from shopease.exceptions import Conflict, NotFound
from shopease.models.product import Product
from shopease.models.sale import Sale
from shopease.schemas.product import validate_product
from shopease.services.base import BaseService

logger = logging.getLogger(__name__)


class ProductService(BaseService):
    """
    Service class for Product CRUD operations.

    Updates and deletes lock the product row (SELECT ... FOR UPDATE) so they
    serialize with the conditional stock decrement done by `SaleService`.
    Deleting a product that is still referenced by a sale is rejected with
    `Conflict`; sales are never left pointing at a missing product.
    """

    # Fields replaced on update only when the caller supplies them
    OPTIONAL_FIELDS = ("description", "stock_quantity")

    def list_products(self, deadline: Optional[float] = None) -> List[Product]:
        """Return every product in insertion order."""
        with self.reading(deadline):
            return self.db.query(Product).order_by(Product.product_id).all()

    def get_product(self, product_id: int, deadline: Optional[float] = None) -> Product:
        """
        Get a product by ID.

        Raises:
            NotFound: If no product has this ID
        """
        with self.reading(deadline):
            product = self.db.query(Product).filter(Product.product_id == product_id).first()

        if not product:
            raise NotFound("product", product_id)
        return product

    def create_product(self, fields: Any, deadline: Optional[float] = None) -> Product:
        """
        Create a new product.

        Args:
            fields: Mapping (or ProductIn) with product_name, price, category
                and optionally description and stock_quantity

        Returns:
            Created product including its assigned product_id

        Raises:
            ValidationError: If the fields fail validation
        """
        data = validate_product(fields)

        with self.unit_of_work(deadline):
            product = Product(**data.model_dump())
            self.db.add(product)
            self.db.flush()
            self.db.refresh(product)

        return product

    def update_product(
        self,
        product_id: int,
        fields: Any,
        deadline: Optional[float] = None,
    ) -> Product:
        """
        Replace a product's fields.

        product_name, price and category are always replaced; description and
        stock_quantity only when supplied. Validation happens before anything
        is read, so an invalid payload never causes a partial update.

        Raises:
            ValidationError: If the fields fail validation
            NotFound: If no product has this ID
        """
        data = validate_product(fields)
        supplied = data.model_fields_set
        update_data = {
            field: value
            for field, value in data.model_dump().items()
            if field not in self.OPTIONAL_FIELDS or field in supplied
        }

        with self.unit_of_work(deadline):
            product = self._lock(product_id)
            for field, value in update_data.items():
                setattr(product, field, value)
            self.db.flush()
            self.db.refresh(product)

        return product

    def delete_product(self, product_id: int, deadline: Optional[float] = None) -> None:
        """
        Delete a product.

        Raises:
            NotFound: If no product has this ID
            Conflict: If sales (or other rows) still reference the product
        """
        with self.unit_of_work(deadline):
            product = self._lock(product_id)

            sale_count = (
                self.db.query(func.count(Sale.sale_id))
                .filter(Sale.product_id == product_id)
                .scalar()
            )
            if sale_count:
                logger.warning(
                    f"Refusing to delete product #{product_id}: referenced by {sale_count} sale(s)"
                )
                raise Conflict(
                    f"Product {product_id} is referenced by {sale_count} sale(s) and cannot be deleted"
                )

            try:
                self.db.delete(product)
                self.db.flush()
            except IntegrityError as e:
                # Orders/order items, or a sale inserted after the check above
                logger.warning(f"Foreign key violation deleting product #{product_id}: {e.orig}")
                raise Conflict(
                    f"Product {product_id} is still referenced by other records and cannot be deleted"
                ) from e

        logger.info(f"Product #{product_id} deleted")

    def _lock(self, product_id: int) -> Product:
        product = (
            self.db.query(Product)
            .filter(Product.product_id == product_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not product:
            raise NotFound("product", product_id)
        return product
