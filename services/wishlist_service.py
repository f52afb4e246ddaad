from sqlalchemy.orm import Session
from core.exceptions import NotFoundError
from models.wishlist_items import WishlistItem
from services.product_service import ProductService
from utils.logger import get_logger

logger = get_logger(__name__)


class WishlistService:

    @staticmethod
    def list_items(user_id: int, db: Session) -> list[dict]:
        items = (
            db.query(WishlistItem)
            .filter(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.id.desc())
            .all()
        )
        return [
            {
                "product_id": item.product_id,
                "name": item.product.name,
                "price": item.product.price,
                "image_url": item.product.image_url,
                "is_available": item.product.is_available,
            }
            for item in items
        ]

    @staticmethod
    def add(user_id: int, product_id: int, db: Session) -> bool:
        """Returns False when the product was already on the wishlist."""
        ProductService.get_product(db, product_id)

        exists = db.query(WishlistItem).filter(
            WishlistItem.user_id == user_id,
            WishlistItem.product_id == product_id
        ).first()
        if exists:
            return False

        db.add(WishlistItem(user_id=user_id, product_id=product_id))
        db.commit()

        logger.info("Wishlist item added", extra={"user_id": user_id, "product_id": product_id})
        return True

    @staticmethod
    def remove(user_id: int, product_id: int, db: Session):
        deleted = db.query(WishlistItem).filter(
            WishlistItem.user_id == user_id,
            WishlistItem.product_id == product_id
        ).delete(synchronize_session="fetch")

        if not deleted:
            raise NotFoundError("Item not in wishlist")

        db.commit()
