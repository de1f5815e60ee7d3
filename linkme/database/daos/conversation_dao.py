"""
Conversation DAO

Purpose
-------
Provides a thin data-access layer for the `Conversation` ORM entity:
- Create conversations
- Query by id, by participant pair (order-insensitive), or by user
- Bump `updated_at`

Design
------
- Requires an active SQLAlchemy `Session` supplied by the caller (no session
  creation inside the DAO).
- Participant-pair lookups go through the normalized `pair_key` column, so the
  lookup is symmetric and backed by the unique index.

Error Handling
--------------
- Methods log the error with its traceback and re-raise. `createConversation`
  re-raises `IntegrityError` unlogged so the registry can detect a lost race.
"""

import logging
from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import desc, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkme.database.entities.conversations import Conversation, make_pair_key

logger = logging.getLogger(__name__)


class ConversationDao:
    """
    Data Access Object (DAO) for managing Conversation entities.
    """

    def createConversation(self, session: Session, conversation: Conversation) -> Conversation:
        """
        Add and flush a new conversation.

        Raises
        ------
        sqlalchemy.exc.IntegrityError
            If a conversation already exists for the same participant pair.
        """
        try:
            session.add(conversation)
            session.flush()
            return conversation
        except IntegrityError:
            raise
        except Exception:
            logger.exception("Error in ConversationDao.createConversation")
            raise

    def fetchConversationById(self, session: Session, conversation_id: UUID) -> Conversation | None:
        try:
            return session.get(Conversation, conversation_id)
        except Exception:
            logger.exception("Error in ConversationDao.fetchConversationById (id=%s)", conversation_id)
            raise

    def fetchConversationByParticipants(self, session: Session, user_id_1: UUID, user_id_2: UUID) -> Conversation | None:
        """
        Fetch the conversation between two users regardless of argument order.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_id_1, user_id_2 : UUID
            The two participants.

        Returns
        -------
        Conversation | None
            The unique conversation for the pair, if it exists.
        """
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.pair_key == make_pair_key(user_id_1, user_id_2))
                .one_or_none()
            )
        except Exception:
            logger.exception("Error in ConversationDao.fetchConversationByParticipants")
            raise

    def fetchConversationsByUserId(self, session: Session, user_id: UUID) -> List[Conversation]:
        """
        Fetch all conversations a user takes part in,
        ordered by most recently updated.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_id : UUID
            Unique identifier of the user.

        Returns
        -------
        list[Conversation]
            Conversations where the user is either participant.
        """
        try:
            return (
                session.query(Conversation)
                .filter(or_(Conversation.participant1_id == user_id, Conversation.participant2_id == user_id))
                .order_by(desc(Conversation.updated_at))
                .all()
            )
        except Exception:
            logger.exception("Error in ConversationDao.fetchConversationsByUserId (user=%s)", user_id)
            raise

    def updateConversationByDate(self, session: Session, conversation_id: UUID, timestamp: datetime) -> None:
        """
        Set `updated_at` of a conversation.

        Raises
        ------
        sqlalchemy.exc.NoResultFound
            If the conversation does not exist.
        """
        try:
            conversation = session.query(Conversation).filter(Conversation.id == conversation_id).one()
            conversation.updated_at = timestamp
            session.flush()
        except Exception:
            logger.exception("Error in ConversationDao.updateConversationByDate (id=%s)", conversation_id)
            raise
