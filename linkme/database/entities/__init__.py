"""
Entities Package - SQLAlchemy 2.0 ORM Models (UUID + UTC)
=========================================================

The `entities` package defines the ORM models of the application, mapping
database tables to Python classes using SQLAlchemy 2.0-typed mappings.
These classes are consumed by DAOs (`daos` package) to perform CRUD and
transactional operations.

Tech Stack & Conventions
------------------------
- PostgreSQL or SQLite through the generic `Uuid` column type
- Timezone-aware timestamps (UTC)
- SQLAlchemy 2.0 style `Mapped[...]` + `mapped_column(...)`
- Clear foreign keys and unique constraints for relational integrity

Contents
--------
- User
    Registered account: credentials, role, help categories, rating aggregate,
    unique email and unique JMBG hash.

- HelpRequest
    Request for assistance with the open/accepted/completed/cancelled status.

- Conversation
    Thread between two users, unique per unordered participant pair.

- Message
    A single message inside a conversation, with a read flag.

- Rating
    Immutable 1-5 score, unique per (help request, rater).

Importing this package registers every table on the shared MetaData.
"""

from linkme.database.entities.user import User
from linkme.database.entities.help_request import HelpRequest
from linkme.database.entities.conversations import Conversation
from linkme.database.entities.messages import Message
from linkme.database.entities.rating import Rating

__all__ = ["User", "HelpRequest", "Conversation", "Message", "Rating"]
