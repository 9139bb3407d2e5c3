from sqlalchemy import Column, Integer, String, Text

from shopease.database import Base


class Customer(Base):
    """Customer record. Only referenced by sales, orders and payments."""
    __tablename__ = "customers"

    customer_id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50))
    last_name = Column(String(50))
    email = Column(String(100))
    phone_number = Column(String(20))
    address = Column(Text)

    def __repr__(self):
        return f"<Customer(customer_id={self.customer_id}, email='{self.email}')>"
