from sqlalchemy.orm import Session
from core.exceptions import NotFoundError
from models.contact_messages import ContactMessage
from schemas.contact_schemas import ContactMessageRequest
from utils.logger import get_logger

logger = get_logger(__name__)


class ContactService:

    @staticmethod
    def save_message(body: ContactMessageRequest, db: Session) -> ContactMessage:
        message = ContactMessage(**body.model_dump())
        db.add(message)
        db.commit()
        db.refresh(message)

        logger.info("Contact message received", extra={"message_id": message.id})
        return message

    @staticmethod
    def list_messages(db: Session) -> list[ContactMessage]:
        """Newest first."""
        return (
            db.query(ContactMessage)
            .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
            .all()
        )

    @staticmethod
    def delete_message(message_id: int, db: Session):
        deleted = db.query(ContactMessage).filter(
            ContactMessage.id == message_id
        ).delete(synchronize_session="fetch")

        if not deleted:
            raise NotFoundError("Message not found")

        db.commit()
        logger.info("Contact message deleted", extra={"message_id": message_id})
