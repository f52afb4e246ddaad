from core.database import Base
from sqlalchemy import Column, Integer, String, Text
from .mixins import CreatedAtMixin

class ContactMessage(Base, CreatedAtMixin):
    __tablename__ = "contact_messages"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
