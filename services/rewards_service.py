import secrets
from datetime import datetime, timezone
from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from core.exceptions import DuplicateIdentityError, NotFoundError
from models.coupons import Coupon
from models.gift_cards import GiftCard
from models.users import User
from schemas.admin_schemas import CouponCreateRequest, GiftCardIssueRequest
from utils.logger import get_logger

logger = get_logger(__name__)


def generate_gift_card_code() -> str:
    return "GC-" + secrets.token_hex(6).upper()


class RewardsService:
    """Coupons (store-wide) and gift cards (per customer)."""

    @staticmethod
    def active_coupons(db: Session) -> list[Coupon]:
        now = datetime.now(timezone.utc)
        return (
            db.query(Coupon)
            .filter(
                Coupon.is_active == True,
                or_(Coupon.expires_at.is_(None), Coupon.expires_at > now)
            )
            .order_by(Coupon.id.asc())
            .all()
        )

    @staticmethod
    def create_coupon(body: CouponCreateRequest, db: Session) -> Coupon:
        coupon = Coupon(**body.model_dump())
        db.add(coupon)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateIdentityError("Coupon code already exists")
        db.refresh(coupon)

        logger.info("Coupon created", extra={"coupon_id": coupon.id})
        return coupon

    @staticmethod
    def gift_cards_for(user_id: int, db: Session) -> list[GiftCard]:
        return (
            db.query(GiftCard)
            .filter(GiftCard.user_id == user_id)
            .order_by(GiftCard.id.asc())
            .all()
        )

    @staticmethod
    def issue_gift_card(body: GiftCardIssueRequest, db: Session) -> GiftCard:
        if not db.query(User).filter(User.id == body.user_id).first():
            raise NotFoundError("User not found")

        card = GiftCard(
            user_id=body.user_id,
            code=generate_gift_card_code(),
            balance=body.balance,
            expires_at=body.expires_at
        )
        db.add(card)
        db.commit()
        db.refresh(card)

        logger.info("Gift card issued", extra={"user_id": body.user_id, "gift_card_id": card.id})
        return card
