from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean, DateTime)
from .mixins import CreatedAtMixin

class Coupon(Base, CreatedAtMixin):
    __tablename__ = "coupons"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    code = Column(String(50), unique=True, nullable=False)
    description = Column(String(255), nullable=False)
    discount_percent = Column(Integer, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
