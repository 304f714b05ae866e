"""
Message repository.

Extends BaseRepository with conversation queries and bulk read-marking.

Dependencies: sqlalchemy, datalayer.boundary.db.repositories.base_repository
System role: Chat message persistence operations
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy import and_, or_, update

from datalayer.boundary.db.models.message_model import MessageModel
from datalayer.boundary.db.repositories.base_repository import BaseRepository
from datalayer.boundary.db.session_manager import SessionFactory

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[MessageModel]):
    """Repository for MessageModel."""

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        """Initialize MessageRepository with MessageModel."""
        super().__init__(MessageModel, session_factory)

    async def send_message(self, sender_id: UUID, receiver_id: UUID, content: str) -> MessageModel:
        """
        Store a new unread message.

        Args:
            sender_id: Author UUID
            receiver_id: Recipient UUID
            content: Message body

        Returns:
            Persisted MessageModel
        """
        return await self.create(
            {"sender_id": sender_id, "receiver_id": receiver_id, "content": content}
        )

    async def get_conversation(
        self,
        user_id: UUID,
        target_id: UUID,
        populate: str | None = None,
    ) -> Sequence[MessageModel]:
        """
        Retrieve every message exchanged between two users, oldest first.

        Args:
            user_id: One participant
            target_id: The other participant
            populate: Optional populate string, e.g. "sender:username receiver:username"

        Returns:
            Messages in both directions ordered by created_at ascending
        """
        between = or_(
            and_(MessageModel.sender_id == user_id, MessageModel.receiver_id == target_id),
            and_(MessageModel.sender_id == target_id, MessageModel.receiver_id == user_id),
        )
        stmt = self.query.build_select([between], populate=populate).order_by(
            MessageModel.created_at.asc()
        )
        async with self.sessions.scope() as session:
            return await self.query.fetch_all(session, stmt)

    async def mark_as_read(self, sender_id: UUID, receiver_id: UUID) -> int:
        """
        Mark all unread messages from sender to receiver as read.

        Args:
            sender_id: Author UUID
            receiver_id: Recipient UUID

        Returns:
            int: Number of messages updated
        """
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.sender_id == sender_id,
                MessageModel.receiver_id == receiver_id,
                MessageModel.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        async with self.sessions.scope() as session:
            result = await session.execute(stmt)
            updated = result.rowcount
        logger.debug(f"{__name__}:mark_as_read - {updated} messages marked read")
        return updated
