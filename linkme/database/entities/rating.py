"""
Rating ORM Model
================

A score (1-5) given by one participant of a help request to the other.
Ratings are immutable: the DAO exposes no update or delete.

The UNIQUE constraint on ``(help_request_id, from_user_id)`` guarantees at
most one rating per rater per request even under concurrent submissions.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import TEXT, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from linkme.database.config.connection_engine import declarativeBase


class Rating(declarativeBase):
    """
    ORM model for the `rating` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    from_user_id : UUID
        The rater.
    to_user_id : UUID
        The rated user.
    help_request_id : UUID
        Request the rating refers to.
    score : int
        Integer score, 1 to 5.
    comment : str | None
        Optional free text.
    created_at : datetime
        Submission time (UTC).
    """

    __tablename__ = "rating"
    __table_args__ = (
        UniqueConstraint("help_request_id", "from_user_id", name="uq_rating_request_rater"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    from_user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False)
    to_user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False)
    help_request_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("help_request.id"), nullable=False
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __init__(
        self,
        from_user_id: UUID,
        to_user_id: UUID,
        help_request_id: UUID,
        score: int,
        comment: Optional[str] = None,
    ):
        self.id = uuid.uuid4()
        self.from_user_id = from_user_id
        self.to_user_id = to_user_id
        self.help_request_id = help_request_id
        self.score = score
        self.comment = comment
        self.created_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "from_user_id": self.from_user_id,
            "to_user_id": self.to_user_id,
            "help_request_id": self.help_request_id,
            "score": self.score,
            "comment": self.comment,
            "created_at": self.created_at,
        }

    def __str__(self) -> str:
        return f"Rating: {self.from_user_id} -> {self.to_user_id} ({self.score}) for {self.help_request_id}"
