from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean, Date, ForeignKey)
from sqlalchemy.orm import relationship

class Customer(Base):
    """Profile attached 1:1 to a customer User. The phone number doubles as a login identifier."""
    __tablename__ = "customers"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    #relationships
    user = relationship("User", back_populates="customer")

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(20), unique=True, nullable=False, index=True)
    preferred_size = Column(String(10))
    gender = Column(String(20))
    date_of_birth = Column(Date)
    newsletter_opt_in = Column(Boolean, default=False, nullable=False)
    terms_accepted = Column(Boolean, default=False, nullable=False)
