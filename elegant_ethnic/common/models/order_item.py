from sqlalchemy import Column, ForeignKey, Integer, String
from .base import Base


class OrderItem(Base):
    __tablename__ = "order_item"

    id = Column(String(36), primary_key=True)
    position = Column(Integer, nullable=False)
    order_id = Column(String(36), ForeignKey("order.id"), nullable=False, index=True)
    # snapshot of the product at checkout time, not a live reference
    product_id = Column(String(36), nullable=False)
    product_name = Column(String(255), nullable=False)
    product_image = Column(String(1024), nullable=False)
    quantity = Column(Integer, nullable=False)
    size = Column(String(64), nullable=False)
    color = Column(String(64), nullable=False)
    price = Column(String(32), nullable=False)
