from core.database import Base
from sqlalchemy import (Column, Integer, String, Text, Boolean, Numeric)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin, UpdatedAtMixin

class Product(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "products"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    cart_items = relationship("CartItem", back_populates="product")
    wishlist_items = relationship("WishlistItem", back_populates="product")

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    image_url = Column(String(500))
    color = Column(String(50))
    stock_quantity = Column(Integer, default=0, nullable=False)
    sku = Column(String(64), unique=True, nullable=True)
    size_options = Column(String(255))   # comma separated, e.g. "S,M,L"
    is_available = Column(Boolean, default=True, nullable=False)
