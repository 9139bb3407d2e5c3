from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey

from shopease.database import Base


# Orders, order items and payments are persisted by other systems; they are
# declared here so the schema and its foreign keys exist alongside sales.


class Order(Base):
    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.customer_id"))
    product_id = Column(Integer, ForeignKey("products.product_id"))
    quantity = Column(Integer)
    total_amount = Column(Numeric(10, 2))
    order_status = Column(String(20))
    timestamp = Column(DateTime)


class OrderItem(Base):
    __tablename__ = "order_items"

    order_item_id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.order_id"))
    product_id = Column(Integer, ForeignKey("products.product_id"))
    quantity = Column(Integer)
    unit_price = Column(Numeric(10, 2))


class Payment(Base):
    __tablename__ = "payments"

    payment_id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.customer_id"))
    amount = Column(Numeric(10, 2))
    payment_method = Column(String(50))
    timestamp = Column(DateTime)
