import enum
from core.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin


class TokenType(str, enum.Enum):
    REGISTRATION = "REGISTRATION"
    PASSWORD_RESET = "PASSWORD_RESET"
    NEW_EMAIL_VERIFICATION = "NEW_EMAIL_VERIFICATION"


class VerificationToken(Base, CreatedAtMixin):
    """
    One-time code proving control of an email address.

    At most one token lives per (user, token_type); issuing a new one
    deletes the previous one. Tokens are deleted on first successful use
    or when found expired. created_at is the issue time.
    """
    __tablename__ = "verification_tokens"
    __table_args__ = (
        UniqueConstraint("user_id", "token_type", name="uq_verification_tokens_user_type"),
    )

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="verification_tokens")

    code = Column(String(6), nullable=False)
    token_type = Column(Enum(TokenType, name="token_type"), nullable=False)
    # Only for NEW_EMAIL_VERIFICATION: the address the code was sent to
    target_email = Column(String(255), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
