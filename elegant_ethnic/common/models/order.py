from sqlalchemy import Column, DateTime, Integer, String, Text
from .base import Base


class Order(Base):
    __tablename__ = "order"

    id = Column(String(36), primary_key=True)
    position = Column(Integer, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(64), nullable=False)
    shipping_address = Column(Text, nullable=False)
    city = Column(String(128), nullable=False)
    state = Column(String(128), nullable=False)
    zip_code = Column(String(32), nullable=False)
    total_amount = Column(String(32), nullable=False)
    status = Column(String(32), nullable=False, default="pending")
    tracking_number = Column(String(32), nullable=True)
    payment_intent_id = Column(String(128), nullable=True)
    created_at = Column(DateTime, nullable=False)
