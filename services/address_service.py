from sqlalchemy.orm import Session
from core.exceptions import NotFoundError
from models.addresses import Address
from schemas.user_schemas import AddressRequest
from utils.logger import get_logger

logger = get_logger(__name__)


class AddressService:

    @staticmethod
    def list_addresses(user_id: int, db: Session) -> list[Address]:
        return (
            db.query(Address)
            .filter(Address.user_id == user_id)
            .order_by(Address.is_default.desc(), Address.id.asc())
            .all()
        )

    @staticmethod
    def save_address(user_id: int, body: AddressRequest, db: Session) -> Address:
        """
        Creates an address, or updates it when body.id is set. The first
        address a user saves becomes the default; marking another default
        clears the flag on the rest.
        """
        data = body.model_dump(exclude={"id"})

        if body.id is not None:
            address = db.query(Address).filter(
                Address.id == body.id,
                Address.user_id == user_id
            ).one_or_none()
            if not address:
                raise NotFoundError("Address not found")
            for field, value in data.items():
                setattr(address, field, value)
        else:
            has_any = db.query(Address).filter(Address.user_id == user_id).first() is not None
            address = Address(user_id=user_id, **data)
            if not has_any:
                address.is_default = True
            db.add(address)

        db.flush()

        if address.is_default:
            db.query(Address).filter(
                Address.user_id == user_id,
                Address.id != address.id
            ).update({"is_default": False}, synchronize_session="fetch")

        db.commit()
        db.refresh(address)

        logger.info("Address saved", extra={"user_id": user_id, "address_id": address.id})
        return address

    @staticmethod
    def delete_address(user_id: int, address_id: int, db: Session):
        """
        Removing the default hands the flag to the oldest remaining address.
        """
        address = db.query(Address).filter(
            Address.id == address_id,
            Address.user_id == user_id
        ).one_or_none()

        if not address:
            raise NotFoundError("Address not found")

        was_default = address.is_default
        db.delete(address)
        db.flush()

        if was_default:
            oldest = (
                db.query(Address)
                .filter(Address.user_id == user_id)
                .order_by(Address.id.asc())
                .first()
            )
            if oldest:
                oldest.is_default = True

        db.commit()
        logger.info("Address deleted", extra={"user_id": user_id, "address_id": address_id})
