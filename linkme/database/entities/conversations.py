"""
Conversation ORM Model
=======================

The ``Conversation`` ORM model represents a private thread between two users,
stored in the ``conversation`` table.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- Two ordered participant slots with cached display names
- ``pair_key``: the unordered participant pair normalized as
  ``"<smaller id>:<larger id>"``, with a UNIQUE constraint. Lookups go through
  this column, so ``(A, B)`` and ``(B, A)`` resolve to the same row and two
  concurrent inserts for one pair cannot both succeed.
- Optional originating ``help_request_id``
- ``updated_at`` bumped whenever a message is posted
"""

import uuid
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import TEXT, VARCHAR, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from linkme.database.config.connection_engine import declarativeBase


def make_pair_key(participant_a: UUID, participant_b: UUID) -> str:
    """Normalize an unordered participant pair into a single comparable key."""
    low, high = sorted((str(participant_a), str(participant_b)))
    return f"{low}:{high}"


class Conversation(declarativeBase):
    """
    ORM model for the `conversation` table.

    Attributes
    ----------
    id : UUID
        Primary key. Unique identifier for the conversation.
    help_request_id : UUID | None
        Request that caused the conversation, if any.
    participant1_id, participant2_id : UUID
        The two participants, in creation order.
    participant1_name, participant2_name : str
        Cached display names.
    pair_key : str
        Normalized unordered pair, unique.
    updated_at : datetime
        Time of the last message (or creation).
    """

    __tablename__ = "conversation"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    """Primary key. UUID of the conversation."""

    help_request_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("help_request.id"), nullable=True
    )
    """Originating help request."""

    participant1_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False)
    participant1_name: Mapped[str] = mapped_column(TEXT, nullable=False)
    participant2_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False)
    participant2_name: Mapped[str] = mapped_column(TEXT, nullable=False)

    pair_key: Mapped[str] = mapped_column(VARCHAR(80), nullable=False, unique=True)
    """Unordered participant pair; at most one conversation per pair."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    """Timestamp of the latest activity (UTC)."""

    def __init__(
        self,
        participant1_id: UUID,
        participant1_name: str,
        participant2_id: UUID,
        participant2_name: str,
        help_request_id: Optional[UUID] = None,
    ):
        """
        Initialize a new Conversation object.

        Parameters
        ----------
        participant1_id, participant2_id : UUID
            The two users taking part.
        participant1_name, participant2_name : str
            Their display names.
        help_request_id : UUID, optional
            Request that started the conversation.
        """
        self.id = uuid.uuid4()
        self.help_request_id = help_request_id
        self.participant1_id = participant1_id
        self.participant1_name = participant1_name
        self.participant2_id = participant2_id
        self.participant2_name = participant2_name
        self.pair_key = make_pair_key(participant1_id, participant2_id)
        self.updated_at = datetime.now(timezone.utc)

    def has_participant(self, user_id: UUID) -> bool:
        return user_id in (self.participant1_id, self.participant2_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "help_request_id": self.help_request_id,
            "participant1_id": self.participant1_id,
            "participant1_name": self.participant1_name,
            "participant2_id": self.participant2_id,
            "participant2_name": self.participant2_name,
            "updated_at": self.updated_at,
        }

    def __str__(self) -> str:
        return (
            f"Conversation: id:{self.id}, participants: {self.participant1_id}/{self.participant2_id}, "
            f"updated: {self.updated_at}"
        )
