import enum
from core.database import Base
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy import (Column, Integer, ForeignKey, Numeric, Enum, String, Text, DateTime)
from .mixins import UpdatedAtMixin


class OrderStatus(str, enum.Enum):
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURN_REQUESTED = "RETURN_REQUESTED"


class Order(Base, UpdatedAtMixin):
    """
    A fulfilled purchase.

    Purchased items and the shipping address are stored as text snapshots,
    so editing or deleting a product never rewrites order history. Orders
    hold no foreign key to products.
    """
    __tablename__ = "orders"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="orders")

    order_date = Column(DateTime(timezone=True), default=func.now(), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(Enum(OrderStatus, name="order_status"), default=OrderStatus.PROCESSING, nullable=False)
    items_snapshot = Column(Text, nullable=False)
    shipping_snapshot = Column(Text, nullable=False)
    # Payment gateway session that paid for this order; one order per session
    gateway_session_id = Column(String(255), unique=True, nullable=True)
