"""
Message ORM Model
=================

The ``Message`` ORM model represents a single message record within a
conversation. Each message is tied to a ``Conversation`` entity via a
foreign key; the conversation owns its messages.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- Foreign key reference to ``conversation.id`` (``conversation_id``)
- Sender id and cached sender name
- ``read`` flag, set when the other participant opens the thread
- Timezone-aware ``created_at`` timestamp (UTC)

"""

import uuid
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import TEXT, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from linkme.database.config.connection_engine import declarativeBase


class Message(declarativeBase):
    """
    ORM model for the `message` table.

    Attributes
    ----------
    id : UUID
        Primary key. Unique identifier for the message.
    conversation_id : UUID
        Foreign key reference to the `conversation` table.
    sender_id : UUID
        Author of the message.
    sender_name : str
        Author display name.
    text : str
        Content of the message.
    read : bool
        Whether the recipient has read the message.
    created_at : datetime
        Timestamp when the message was created.
    """

    __tablename__ = "message"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    """Primary key. UUID of the message."""

    conversation_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("conversation.id"), nullable=False, index=True
    )
    """Foreign key to the conversation this message belongs to."""

    sender_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False)
    """Author of the message."""

    sender_name: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Author display name."""

    text: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Text content of the message (cannot be null)."""

    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    """Read flag."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    """Timestamp when the message was created. Defaults to current UTC time."""

    def __init__(self, conversation_id: UUID, sender_id: UUID, sender_name: str, text: str):
        """
        Initialize a new, unread Message object.

        Parameters
        ----------
        conversation_id : UUID
            ID of the conversation this message belongs to.
        sender_id : UUID
            Author id.
        sender_name : str
            Author display name.
        text : str
            The content of the message.
        """
        self.id = uuid.uuid4()
        self.conversation_id = conversation_id
        self.sender_id = sender_id
        self.sender_name = sender_name
        self.text = text
        self.read = False
        self.created_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "conversation_id": self.conversation_id,
            "sender_id": self.sender_id,
            "sender_name": self.sender_name,
            "text": self.text,
            "read": self.read,
            "created_at": self.created_at,
        }

    def __str__(self) -> str:
        return (
            f"Conversation: id:{self.conversation_id}, "
            f"sender: {self.sender_id}, "
            f"message: {self.text}, "
            f"time_created: {self.created_at}"
        )
