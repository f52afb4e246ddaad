from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean, ForeignKey)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class Address(Base, CreatedAtMixin):
    __tablename__ = "addresses"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="addresses")

    full_name = Column(String(200), nullable=False)
    line1 = Column(String(255), nullable=False)
    line2 = Column(String(255))
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    postal_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False, default="India")
    phone_number = Column(String(20))
    is_default = Column(Boolean, default=False, nullable=False)

    def as_snapshot(self) -> str:
        parts = [self.full_name, self.line1, self.line2, self.city,
                 f"{self.state} {self.postal_code}", self.country]
        text = ", ".join(p for p in parts if p)
        if self.phone_number:
            text += f" (Phone: {self.phone_number})"
        return f"Shipping Address: {text}"
