from sqlalchemy import Column, Integer, String, UniqueConstraint
from .base import Base


class CartItem(Base):
    __tablename__ = "cart_item"
    __table_args__ = (
        UniqueConstraint("session_id", "product_id", "size", "color", name="uq_cart_line"),
    )

    id = Column(String(36), primary_key=True)
    position = Column(Integer, nullable=False)
    session_id = Column(String(128), nullable=False, index=True)
    product_id = Column(String(36), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    size = Column(String(64), nullable=False)
    color = Column(String(64), nullable=False)
