"""
User ORM Model
==============

The ``User`` ORM model represents a registered account. It maps to the
``app_user`` table and contains credentials, role, help-category affinities
and the running rating aggregate.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- Unique ``email`` and unique ``jmbg_hash`` (one account per person)
- Role (``user`` | ``volunteer``) and a set of help categories stored as JSON
- ``rating`` (mean of received scores) and ``rating_count``

"""

import uuid
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import JSON, TEXT, VARCHAR, DateTime, Float, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from linkme.database.config.connection_engine import declarativeBase


def normalize_categories(categories) -> list[str]:
    """Return help categories as a sorted list without duplicates."""
    return sorted(set(categories or ()))


class User(declarativeBase):
    """
    ORM model for the `app_user` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    email : str
        Login email, unique.
    password : str
        bcrypt hash of the password.
    name : str
        Display name.
    role : str
        ``user`` or ``volunteer``.
    jmbg_hash : str
        SHA-256 hex digest of the national ID number, unique, never mutated.
    help_categories : list[str]
        Categories a volunteer offers help with (set semantics).
    rating : float
        Arithmetic mean of all received rating scores (0 when none).
    rating_count : int
        Number of received ratings.
    created_at : datetime
        Registration time (UTC).
    """

    __tablename__ = "app_user"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    """Primary key. UUID of the user."""

    email: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, unique=True)
    """Email address of the user, unique."""

    password: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Hashed password of the user."""

    name: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Display name."""

    role: Mapped[str] = mapped_column(VARCHAR(16), nullable=False)
    """Role assigned to the user (user, volunteer)."""

    jmbg_hash: Mapped[str] = mapped_column(VARCHAR(64), nullable=False, unique=True)
    """One-way hash of the JMBG, unique across all users."""

    help_categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """Help categories offered by the user."""

    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    """Mean received rating."""

    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Number of received ratings."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    """Registration timestamp (UTC)."""

    def __init__(
        self,
        email: str,
        password: str,
        name: str,
        role: str,
        jmbg_hash: str,
        help_categories=None,
    ):
        """
        Initialize a new User object with an empty rating aggregate.

        Parameters
        ----------
        email : str
            Login email.
        password : str
            Plaintext password, hashed by `UserDao.createUser` before insert.
        name : str
            Display name.
        role : str
            ``user`` or ``volunteer``.
        jmbg_hash : str
            Hash of the national ID number.
        help_categories : Iterable[str], optional
            Offered help categories.
        """
        self.id = uuid.uuid4()
        self.email = email
        self.password = password
        self.name = name
        self.role = role
        self.jmbg_hash = jmbg_hash
        self.help_categories = normalize_categories(help_categories)
        self.rating = 0.0
        self.rating_count = 0
        self.created_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict:
        """Public representation of the user. Password and identity hashes are never included."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "help_categories": list(self.help_categories or []),
            "rating": self.rating,
            "rating_count": self.rating_count,
            "created_at": self.created_at,
        }

    def __str__(self) -> str:
        return f"User: id:{self.id}, email: {self.email}, role: {self.role}"
