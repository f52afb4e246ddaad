from sqlalchemy.orm import Session
from core.exceptions import NotFoundError, OutOfStockError
from models.cart_items import CartItem
from models.products import Product
from services.product_service import ProductService
from utils.pricing import line_total, order_total
from utils.logger import get_logger

logger = get_logger(__name__)


class CartService:

    @staticmethod
    def get_items(user_id: int, db: Session) -> list[CartItem]:
        return (
            db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.id.asc())
            .all()
        )

    @staticmethod
    def get_cart(user_id: int, db: Session) -> dict:
        items = CartService.get_items(user_id, db)

        lines = [
            {
                "product_id": item.product_id,
                "name": item.product.name,
                "image_url": item.product.image_url,
                "unit_price": item.product.price,
                "quantity": item.quantity,
                "line_total": line_total(item.product.price, item.quantity),
            }
            for item in items
        ]

        return {
            "items": lines,
            "item_count": sum(item.quantity for item in items),
            "subtotal": order_total((item.product.price, item.quantity) for item in items),
        }

    @staticmethod
    def _check_stock(product: Product, quantity: int):
        if quantity > product.stock_quantity:
            raise OutOfStockError(f"Only {product.stock_quantity} of '{product.name}' available")

    @staticmethod
    def add_item(user_id: int, product_id: int, quantity: int, db: Session) -> CartItem:
        product = ProductService.get_product(db, product_id)

        item = db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        ).first()

        new_quantity = quantity + (item.quantity if item else 0)
        CartService._check_stock(product, new_quantity)

        if item:
            item.quantity = new_quantity
        else:
            item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
            db.add(item)

        db.commit()
        db.refresh(item)

        logger.info(
            "Cart item added",
            extra={"user_id": user_id, "product_id": product_id, "quantity": item.quantity}
        )
        return item

    @staticmethod
    def update_quantity(user_id: int, product_id: int, quantity: int, db: Session):
        """Sets the line quantity. Zero or less removes the line."""
        item = db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        ).first()

        if not item:
            raise NotFoundError("Item not in cart")

        if quantity <= 0:
            db.delete(item)
            db.commit()
            return None

        CartService._check_stock(item.product, quantity)
        item.quantity = quantity
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def remove_item(user_id: int, product_id: int, db: Session):
        deleted = db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        ).delete(synchronize_session="fetch")

        if not deleted:
            raise NotFoundError("Item not in cart")

        db.commit()

    @staticmethod
    def clear_cart(user_id: int, db: Session, commit: bool = True) -> int:
        deleted = db.query(CartItem).filter(
            CartItem.user_id == user_id
        ).delete(synchronize_session="fetch")

        if commit:
            db.commit()
        return deleted
