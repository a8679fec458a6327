from sqlalchemy import Column, DateTime, Integer, String, Text
from .base import Base


class Review(Base):
    __tablename__ = "review"

    id = Column(String(36), primary_key=True)
    position = Column(Integer, nullable=False)
    product_id = Column(String(36), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False)
