"""
Messages DAO

Purpose
-------
Data-access layer for the `Message` ORM entity. Provides:
- Message creation
- Retrieval by conversation (chronological) and of the latest message
- Bulk read-marking

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- Keeps business rules (participant checks, non-empty text) in higher layers.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from linkme.database.entities.messages import Message

logger = logging.getLogger(__name__)


class MessageDao:
    """
    Data Access Object (DAO) for managing Messages.
    Provides methods to create, fetch, and mark messages within conversations.
    """

    def createMessage(self, session: Session, message: Message) -> Message:
        """
        Create a new message record.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        message : Message
            Message entity instance to be added.

        Returns
        -------
        Message
            The message object that was added.
        """
        try:
            session.add(message)
            session.flush()
            return message
        except Exception:
            logger.exception("Error in MessageDao.createMessage")
            raise

    def fetchMessagesByConversationId(self, session: Session, conversation_id: UUID) -> List[Message]:
        """
        Fetch all messages in a conversation, oldest first.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        conversation_id : UUID
            Unique identifier of the conversation.

        Returns
        -------
        list[Message]
            Messages belonging to the specified conversation.
        """
        try:
            return (
                session.query(Message)
                .filter(Message.conversation_id == conversation_id)
                .order_by(asc(Message.created_at))
                .all()
            )
        except Exception:
            logger.exception("Error in MessageDao.fetchMessagesByConversationId (id=%s)", conversation_id)
            raise

    def fetchLastMessage(self, session: Session, conversation_id: UUID) -> Message | None:
        try:
            return (
                session.query(Message)
                .filter(Message.conversation_id == conversation_id)
                .order_by(desc(Message.created_at))
                .first()
            )
        except Exception:
            logger.exception("Error in MessageDao.fetchLastMessage (id=%s)", conversation_id)
            raise

    def markMessagesAsRead(self, session: Session, conversation_id: UUID, reader_id: UUID) -> int:
        """
        Mark every unread message in a conversation that was *not* sent by
        ``reader_id`` as read.

        Returns
        -------
        int
            Number of messages updated.
        """
        try:
            return (
                session.query(Message)
                .filter(
                    Message.conversation_id == conversation_id,
                    Message.sender_id != reader_id,
                    Message.read.is_(False),
                )
                .update({Message.read: True}, synchronize_session=False)
            )
        except Exception:
            logger.exception("Error in MessageDao.markMessagesAsRead (id=%s)", conversation_id)
            raise
