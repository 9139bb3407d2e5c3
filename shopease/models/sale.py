from sqlalchemy import Column, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import backref, relationship
from sqlalchemy.sql import func

from shopease.database import Base
from shopease.models.customer import Customer  # noqa: F401  (relationship target)


class Sale(Base):
    """
    Sale model recording a quantity of a product sold to a customer.

    Attributes:
        sale_id: Unique identifier for the sale
        customer_id: Reference to the buying customer
        product_id: Reference to the sold product
        quantity: Number of items sold (must be positive)
        timestamp: Server-assigned creation time
    """
    __tablename__ = "sales"

    sale_id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.customer_id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_sale_quantity_positive"),
    )

    # No cascades: a product or customer with sales cannot be removed underneath them
    product = relationship("Product", backref=backref("sales", passive_deletes="all"))
    customer = relationship("Customer", backref=backref("sales", passive_deletes="all"))

    def __repr__(self):
        return f"<Sale(sale_id={self.sale_id}, product_id={self.product_id}, quantity={self.quantity})>"
