"""
HelpRequest ORM Model
=====================

The ``HelpRequest`` ORM model represents a request for assistance posted by a
user. It maps to the ``help_request`` table.

Lifecycle
~~~~~~~~~
``open`` → ``accepted`` → ``completed``, or ``open`` → ``cancelled``.
``completed`` and ``cancelled`` are terminal. Transitions are enforced by
``linkme.database.core.help_requests`` using conditional updates on ``status``.

The volunteer-facing match score is not a column: it is computed per listing
by ``linkme.matching`` and never persisted.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import TEXT, VARCHAR, DateTime, Float, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from linkme.constants import STATUS_OPEN, URGENCY_FLEXIBLE
from linkme.database.config.connection_engine import declarativeBase


class HelpRequest(declarativeBase):
    """
    ORM model for the `help_request` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    user_id : UUID
        Owner (FK → app_user.id).
    user_name : str
        Owner display name at creation time.
    category : str
        Help category.
    description : str
        Free text.
    urgency : str
        ``urgent`` or ``flexible``.
    status : str
        ``open``, ``accepted``, ``completed`` or ``cancelled``.
    latitude, longitude : float
        Location of the request.
    address : str
        Display address.
    volunteer_id : UUID | None
        Assigned volunteer once accepted.
    volunteer_name : str | None
        Assigned volunteer display name.
    created_at : datetime
        Creation time (UTC).
    """

    __tablename__ = "help_request"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=False)
    user_name: Mapped[str] = mapped_column(TEXT, nullable=False)
    category: Mapped[str] = mapped_column(VARCHAR(32), nullable=False)
    description: Mapped[str] = mapped_column(TEXT, nullable=False)
    urgency: Mapped[str] = mapped_column(VARCHAR(16), nullable=False, default=URGENCY_FLEXIBLE)
    status: Mapped[str] = mapped_column(VARCHAR(16), nullable=False, default=STATUS_OPEN, index=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    address: Mapped[str] = mapped_column(TEXT, nullable=False)
    volunteer_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("app_user.id"), nullable=True
    )
    volunteer_name: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __init__(
        self,
        user_id: UUID,
        user_name: str,
        category: str,
        description: str,
        latitude: float,
        longitude: float,
        address: str,
        urgency: str = URGENCY_FLEXIBLE,
    ):
        """Create a new request in the ``open`` state."""
        self.id = uuid.uuid4()
        self.user_id = user_id
        self.user_name = user_name
        self.category = category
        self.description = description
        self.urgency = urgency
        self.status = STATUS_OPEN
        self.latitude = latitude
        self.longitude = longitude
        self.address = address
        self.volunteer_id = None
        self.volunteer_name = None
        self.created_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "category": self.category,
            "description": self.description,
            "urgency": self.urgency,
            "status": self.status,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "volunteer_id": self.volunteer_id,
            "volunteer_name": self.volunteer_name,
            "created_at": self.created_at,
        }

    def __str__(self) -> str:
        return f"HelpRequest: id:{self.id}, category: {self.category}, status: {self.status}"
