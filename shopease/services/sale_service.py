import logging
from typing import Any, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from shopease.exceptions import Conflict, InsufficientStockError, NotFound
from shopease.models.customer import Customer
from shopease.models.product import Product
from shopease.models.sale import Sale
from shopease.schemas.sale import validate_sale_input
from shopease.services.base import BaseService

logger = logging.getLogger(__name__)


class SaleService(BaseService):
    """
    Service class for Sale operations with race-free stock consumption.

    RACE CONDITION HANDLING STRATEGY:
    =================================
    Creating a sale decrements stock with a single conditional UPDATE:

        UPDATE products
        SET stock_quantity = stock_quantity - :quantity
        WHERE product_id = :product_id AND stock_quantity >= :quantity

    The database evaluates the check and the decrement atomically on the
    locked row, so two concurrent sales can never both pass the check
    against the same units. An affected-row count of 0 means the stock was
    insufficient (or the product vanished). The sale row is inserted in the
    same transaction, so stock and sales are committed or rolled back
    together.

    INVENTORY POLICY:
    =================
    Stock is only consumed when a sale is created. Updating a sale does not
    re-adjust inventory and deleting a sale does not restock.
    """

    def list_sales(self, deadline: Optional[float] = None) -> List[Sale]:
        """Return every sale in insertion order."""
        with self.reading(deadline):
            return self.db.query(Sale).order_by(Sale.sale_id).all()

    def get_sale(self, sale_id: int, deadline: Optional[float] = None) -> Sale:
        """
        Get a sale by ID.

        Raises:
            NotFound: If no sale has this ID
        """
        with self.reading(deadline):
            sale = self.db.query(Sale).filter(Sale.sale_id == sale_id).first()

        if not sale:
            raise NotFound("sale", sale_id)
        return sale

    def create_sale(self, fields: Any, deadline: Optional[float] = None) -> Sale:
        """
        Record a sale and consume its stock atomically.

        Algorithm:
        1. Validate the input shape
        2. Confirm the product and the customer exist
        3. Conditionally decrement stock; insert the sale in the same transaction
        4. Commit (or roll back both on any failure)

        Args:
            fields: Mapping (or SaleIn) with customer_id, product_id and quantity

        Returns:
            Created sale with its sale_id and server-assigned timestamp

        Raises:
            ValidationError: If the fields fail validation
            NotFound: If the product or the customer doesn't exist
            InsufficientStockError: If not enough stock is available
        """
        data = validate_sale_input(fields)
        product_id = data.product_id
        quantity = data.quantity

        with self.reading(deadline):
            self._require(Product.product_id, product_id, "product")
            self._require(Customer.customer_id, data.customer_id, "customer")

        with self.unit_of_work(deadline):
            result = self.db.execute(
                update(Product)
                .where(
                    Product.product_id == product_id,
                    Product.stock_quantity >= quantity,
                )
                .values(stock_quantity=Product.stock_quantity - quantity)
                .execution_options(synchronize_session=False)
            )

            if result.rowcount == 0:
                available = (
                    self.db.query(Product.stock_quantity)
                    .filter(Product.product_id == product_id)
                    .scalar()
                )
                if available is None:
                    raise NotFound("product", product_id)
                logger.info(
                    f"Sale rejected for product #{product_id}: "
                    f"requested {quantity}, available {available}"
                )
                raise InsufficientStockError(product_id, quantity, available)

            sale = Sale(**data.model_dump())
            self.db.add(sale)
            self._flush("Sale references a product or customer that no longer exists")
            # Load the server-assigned timestamp before commit
            self.db.refresh(sale)

        logger.info(f"Sale #{sale.sale_id} created: {quantity} x product #{product_id}")
        return sale

    def update_sale(self, sale_id: int, fields: Any, deadline: Optional[float] = None) -> Sale:
        """
        Replace a sale's customer_id, product_id and quantity.

        Inventory is not re-adjusted; see the class docstring.

        Raises:
            ValidationError: If the fields fail validation
            NotFound: If the sale, or the new product or customer, doesn't exist
        """
        data = validate_sale_input(fields)

        with self.unit_of_work(deadline):
            sale = (
                self.db.query(Sale)
                .filter(Sale.sale_id == sale_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if not sale:
                raise NotFound("sale", sale_id)

            self._require(Product.product_id, data.product_id, "product")
            self._require(Customer.customer_id, data.customer_id, "customer")

            for field, value in data.model_dump().items():
                setattr(sale, field, value)
            self._flush("Sale references a product or customer that no longer exists")
            self.db.refresh(sale)

        return sale

    def delete_sale(self, sale_id: int, deadline: Optional[float] = None) -> None:
        """
        Delete a sale. Stock is not restored.

        Raises:
            NotFound: If no sale has this ID
        """
        with self.unit_of_work(deadline):
            sale = self.db.query(Sale).filter(Sale.sale_id == sale_id).first()
            if not sale:
                raise NotFound("sale", sale_id)
            self.db.delete(sale)

        logger.info(f"Sale #{sale_id} deleted")

    def _require(self, key_column, entity_id: int, entity: str) -> None:
        exists = self.db.query(key_column).filter(key_column == entity_id).first()
        if exists is None:
            raise NotFound(entity, entity_id)

    def _flush(self, conflict_reason: str) -> None:
        try:
            self.db.flush()
        except IntegrityError as e:
            logger.warning(f"Integrity error writing sale: {e.orig}")
            raise Conflict(conflict_reason) from e
