from models.users import User
from models.customers import Customer
from models.verification_tokens import VerificationToken, TokenType
from models.refresh_tokens import RefreshToken
from models.products import Product
from models.cart_items import CartItem
from models.wishlist_items import WishlistItem
from models.orders import Order, OrderStatus
from models.addresses import Address
from models.coupons import Coupon
from models.gift_cards import GiftCard
from models.contact_messages import ContactMessage

__all__ = ["User", "Customer", "VerificationToken", "TokenType", "RefreshToken", "Product",
           "CartItem", "WishlistItem", "Order", "OrderStatus", "Address", "Coupon", "GiftCard",
           "ContactMessage"]
