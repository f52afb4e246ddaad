from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class User(Base, CreatedAtMixin):
    __tablename__ = "users"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    customer = relationship("Customer", back_populates="user", uselist=False,
                            cascade="all, delete-orphan")
    verification_tokens = relationship("VerificationToken", back_populates="user",
                                       cascade="all, delete-orphan")
    refresh_tokens = relationship("RefreshToken", back_populates="user",
                                  cascade="all, delete-orphan")
    cart_items = relationship("CartItem", back_populates="user")
    wishlist_items = relationship("WishlistItem", back_populates="user")
    orders = relationship("Order", back_populates="user")
    addresses = relationship("Address", back_populates="user")
    gift_cards = relationship("GiftCard", back_populates="user")

    # Login identifier: an email for customers, free-form for the seeded admin
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), default="customer", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    # Set on the bootstrap admin until its default credentials are replaced
    must_change_password = Column(Boolean, default=False, nullable=False)
    # Embedded in access tokens; bumping it logs the user out everywhere
    session_version = Column(Integer, default=0, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
