from sqlalchemy import Boolean, Column, Integer, JSON, String, Text
from .base import Base


class Product(Base):
    __tablename__ = "product"

    id = Column(String(36), primary_key=True)
    position = Column(Integer, nullable=False, index=True)  # insertion order
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(64), nullable=False, index=True)
    # decimal strings, kept verbatim so that listings echo what was stored
    price = Column(String(32), nullable=False)
    original_price = Column(String(32), nullable=True)
    images = Column(JSON, nullable=False)
    sizes = Column(JSON, nullable=False)
    colors = Column(JSON, nullable=False)
    fabric = Column(String(64), nullable=False)
    in_stock = Column(Boolean, nullable=False, default=True)
    featured = Column(Boolean, nullable=False, default=False)
    new_arrival = Column(Boolean, nullable=False, default=False)
    rating = Column(String(8), nullable=True, default="0")
    review_count = Column(Integer, nullable=False, default=0)
