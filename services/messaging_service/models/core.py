import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class Message(Base):
    """Direct message between two users, addressed by auth user id."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_recipient_read", "recipient_id", "read"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    sender_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    recipient_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    subject: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, default=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True
    )

    def involves(self, user_id: str) -> bool:
        return user_id in (self.sender_id, self.recipient_id)

    def other_party(self, user_id: str) -> str:
        return self.recipient_id if self.sender_id == user_id else self.sender_id

    def __repr__(self) -> str:
        return f"<Message {self.sender_id} -> {self.recipient_id}>"
