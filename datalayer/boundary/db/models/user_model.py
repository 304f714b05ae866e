"""
User ORM model.

Represents an account with login identity, interests and an optional
embedded profile.

Dependencies: sqlalchemy, datalayer.boundary.db.base
System role: User persistence
"""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from datalayer.boundary.db.base import Base, TimestampMixin, UUIDMixin


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    User ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        email: Unique login email
        username: Unique public handle
        password: Password hash (hidden from profile reads)
        interests: List of interest tags
        profile: Free-form profile document (name, birthday, height, weight)
        created_at: Account creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        sent_messages: One-to-many with MessageModel via sender_id (cascade delete on user removal)
        received_messages: One-to-many with MessageModel via receiver_id (cascade delete on user removal)
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    interests: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    profile: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)

    sent_messages = relationship(
        "MessageModel",
        back_populates="sender",
        foreign_keys="MessageModel.sender_id",
        cascade="all, delete-orphan",
    )
    received_messages = relationship(
        "MessageModel",
        back_populates="receiver",
        foreign_keys="MessageModel.receiver_id",
        cascade="all, delete-orphan",
    )
