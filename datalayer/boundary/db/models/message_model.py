"""
Message ORM model.

Direct message between two users.

Dependencies: sqlalchemy, datalayer.boundary.db.base
System role: Chat message persistence
"""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from datalayer.boundary.db.base import Base, TimestampMixin, UUIDMixin


class MessageModel(Base, UUIDMixin, TimestampMixin):
    """
    Message ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        sender_id: Author of the message
        receiver_id: Recipient of the message
        content: Message body
        is_read: Whether the receiver has read the message
        created_at: Send timestamp (UTC), used for conversation ordering

    Relationships:
        sender: Many-to-one with UserModel
        receiver: Many-to-one with UserModel
    """

    __tablename__ = "messages"

    sender_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    receiver_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    sender = relationship(
        "UserModel",
        back_populates="sent_messages",
        foreign_keys=[sender_id],
    )
    receiver = relationship(
        "UserModel",
        back_populates="received_messages",
        foreign_keys=[receiver_id],
    )
