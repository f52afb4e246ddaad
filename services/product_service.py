from decimal import Decimal
from typing import Optional
from sqlalchemy import false
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from core.exceptions import NotFoundError, DuplicateIdentityError
from models.products import Product
from models.cart_items import CartItem
from models.wishlist_items import WishlistItem
from schemas.product_schemas import ProductCreateRequest, ProductUpdateRequest
from utils.logger import get_logger

logger = get_logger(__name__)

# Navigation and admin filter list
CATEGORIES = [
    "Sarees", "Lehengas", "Kurtis", "Long Frocks", "Mom & Me", "Crop Top – Skirts",
    "Handlooms", "Casual Frocks", "Ready To Wear", "Dupattas", "Kids wear",
    "Dress Material", "Blouses", "Fabrics",
]

LOW_STOCK_THRESHOLD = 5

SORT_ORDERS = {
    "priceAsc": (Product.price.asc(), Product.id.asc()),
    "priceDesc": (Product.price.desc(), Product.id.desc()),
    "oldest": (Product.created_at.asc(), Product.id.asc()),
    "latest": (Product.created_at.desc(), Product.id.desc()),
}


def _status_clauses(status: Optional[str]) -> list:
    if status == "inStock":
        return [Product.stock_quantity > 0]
    if status == "lowStock":
        return [Product.stock_quantity > 0, Product.stock_quantity <= LOW_STOCK_THRESHOLD]
    if status == "onSale":
        # No sale pricing is modelled, so nothing is on sale
        return [false()]
    return []


class ProductService:

    @staticmethod
    def filter_products(db: Session, category: Optional[str] = None, sort_by: Optional[str] = None,
                        min_price: Optional[Decimal] = None, max_price: Optional[Decimal] = None,
                        status: Optional[str] = None, color: Optional[str] = None) -> list[Product]:
        """
        Storefront catalog query. Every filter is a WHERE clause; only
        available products are ever returned.
        """
        clauses = [Product.is_available == True]

        if category and category.strip():
            clauses.append(Product.category == category.strip())
        if min_price is not None:
            clauses.append(Product.price >= min_price)
        if max_price is not None:
            clauses.append(Product.price <= max_price)
        if color and color.strip():
            clauses.append(Product.color.ilike(f"%{color.strip()}%"))
        clauses.extend(_status_clauses(status))

        order_by = SORT_ORDERS.get(sort_by or "latest", SORT_ORDERS["latest"])

        return db.query(Product).filter(*clauses).order_by(*order_by).all()

    @staticmethod
    def new_arrivals(db: Session, limit: int = 8) -> list[Product]:
        return (
            db.query(Product)
            .filter(Product.is_available == True)
            .order_by(*SORT_ORDERS["latest"])
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_product(db: Session, product_id: int, include_unavailable: bool = False) -> Product:
        query = db.query(Product).filter(Product.id == product_id)
        if not include_unavailable:
            query = query.filter(Product.is_available == True)

        product = query.one_or_none()
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def related_products(db: Session, product: Product, limit: int = 4) -> list[Product]:
        """Other available products from the same category."""
        return (
            db.query(Product)
            .filter(
                Product.category == product.category,
                Product.id != product.id,
                Product.is_available == True
            )
            .order_by(Product.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def categories() -> list[str]:
        return list(CATEGORIES)

    @staticmethod
    def list_products(db: Session, category: Optional[str] = None) -> list[Product]:
        """Admin listing: includes unavailable products."""
        query = db.query(Product)
        if category and category.strip():
            query = query.filter(Product.category == category.strip())
        return query.order_by(Product.id.asc()).all()

    @staticmethod
    def create_product(body: ProductCreateRequest, db: Session) -> Product:
        product = Product(**body.model_dump())
        db.add(product)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateIdentityError("A product with this SKU already exists")
        db.refresh(product)

        logger.info("Product created", extra={"product_id": product.id})
        return product

    @staticmethod
    def update_product(product_id: int, body: ProductUpdateRequest, db: Session) -> Product:
        product = ProductService.get_product(db, product_id, include_unavailable=True)

        for field, value in body.model_dump(exclude_unset=True).items():
            setattr(product, field, value)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateIdentityError("A product with this SKU already exists")
        db.refresh(product)

        logger.info("Product updated", extra={"product_id": product.id})
        return product

    @staticmethod
    def delete_product(product_id: int, db: Session):
        """
        Removes the product and every cart and wishlist row pointing at it,
        in one transaction. Order snapshots are plain text and stay as they
        were.
        """
        product = ProductService.get_product(db, product_id, include_unavailable=True)

        try:
            carts = db.query(CartItem).filter(CartItem.product_id == product_id).delete(
                synchronize_session="fetch")
            wishlists = db.query(WishlistItem).filter(WishlistItem.product_id == product_id).delete(
                synchronize_session="fetch")
            db.delete(product)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            "Product deleted",
            extra={"product_id": product_id, "cart_rows": carts, "wishlist_rows": wishlists}
        )
