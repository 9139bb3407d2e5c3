from sqlalchemy import Column, Integer, String, Numeric, Text, CheckConstraint

from shopease.database import Base


class Product(Base):
    """
    Product model representing items available for sale.

    Attributes:
        product_id: Unique identifier for the product
        product_name: Product name
        price: Unit price (must be non-negative)
        category: Product category
        description: Optional free-form description
        stock_quantity: Available quantity (must be non-negative)
    """
    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, index=True)
    product_name = Column(String(100), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)

    # Database-level constraints back up the service-level validation
    __table_args__ = (
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        CheckConstraint("stock_quantity >= 0", name="check_stock_non_negative"),
    )

    def __repr__(self):
        return (
            f"<Product(product_id={self.product_id}, name='{self.product_name}', "
            f"stock_quantity={self.stock_quantity})>"
        )
