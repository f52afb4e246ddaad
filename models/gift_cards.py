from core.database import Base
from sqlalchemy import (Column, Integer, String, Numeric, DateTime, ForeignKey)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class GiftCard(Base, CreatedAtMixin):
    __tablename__ = "gift_cards"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="gift_cards")

    code = Column(String(50), unique=True, nullable=False)
    balance = Column(Numeric(10, 2), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
