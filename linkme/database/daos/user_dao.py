"""
User DAO

Purpose
-------
Thin data-access layer for the `User` ORM entity. Provides:
- Creation with password hashing
- Lookup by id, email or identity hash
- Profile updates (name, role, help categories)
- The atomic rating-aggregate update

Design
------
- The DAO expects an active SQLAlchemy `Session` supplied by the caller
  (usually injected by `@transactional` in the core layer).
- Business rules (validation, uniqueness messages) live in `linkme.database.core`;
  the DAO focuses on persistence operations.
- Passwords are hashed using `EncryptionDec.hash_password(...)` before insert.

Error Handling
--------------
- Each method logs the failure with its traceback and re-raises. A unique-key
  `IntegrityError` from `createUser` is re-raised unlogged; registration maps
  it to `DuplicateIdentity`.

Usage
-----
.. code-block:: python

    from linkme.database.helpers.transactionManagement import SessionFactory
    from linkme.database.entities.user import User
    from linkme.database.daos.user_dao import UserDao

    dao = UserDao()
    with SessionFactory() as session:
        user = User(email="ana@example.com", password="Secret#123", name="Ana",
                    role="volunteer", jmbg_hash="...", help_categories=["shopping"])
        dao.createUser(session, user)
        session.commit()

        same = dao.fetchUserByEmail(session, "ana@example.com")
        dao.applyRating(session, user.id, score=5)
        session.commit()
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkme.crypt.encrypt_decrypt import EncryptionDec
from linkme.database.entities.user import User, normalize_categories

logger = logging.getLogger(__name__)


class UserDao:
    """
    Data Access Object (DAO) for managing User entities.
    """

    def createUser(self, session: Session, user_data: User) -> User:
        """
        Create a new user in the database with a hashed password.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_data : User
            User entity object whose ``password`` is still plaintext.

        Returns
        -------
        User
            The added user.
        """
        try:
            enc = EncryptionDec()
            user_data.password = enc.hash_password(text=user_data.password)
            session.add(user_data)
            session.flush()
            return user_data
        except IntegrityError:
            raise
        except Exception:
            logger.exception("Error in UserDao.createUser")
            raise

    def fetchUserById(self, session: Session, user_id: UUID) -> User | None:
        """Return the user with ``user_id`` or None."""
        try:
            return session.get(User, user_id)
        except Exception:
            logger.exception("Error in UserDao.fetchUserById (id=%s)", user_id)
            raise

    def fetchUserByEmail(self, session: Session, email: str) -> User | None:
        """
        Fetch a user by email.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        email : str
            Email address of the user.

        Returns
        -------
        User | None
            The matching user, if any.
        """
        try:
            return session.query(User).filter(User.email == email).one_or_none()
        except Exception:
            logger.exception("Error in UserDao.fetchUserByEmail")
            raise

    def fetchUserByJmbgHash(self, session: Session, jmbg_hash: str) -> User | None:
        """Fetch a user by the hash of their national ID number."""
        try:
            return session.query(User).filter(User.jmbg_hash == jmbg_hash).one_or_none()
        except Exception:
            logger.exception("Error in UserDao.fetchUserByJmbgHash")
            raise

    def updateUser(self, session: Session, user_id: UUID, name: str | None = None,
                   role: str | None = None, help_categories=None) -> User | None:
        """
        Update the mutable profile fields of a user.

        Identity hash, email and rating aggregate are deliberately not
        accepted here. ``None`` leaves a field unchanged.

        Returns
        -------
        User | None
            The updated user, or None when it does not exist.
        """
        try:
            user = session.get(User, user_id)
            if user is None:
                return None
            if name is not None:
                user.name = name
            if role is not None:
                user.role = role
            if help_categories is not None:
                user.help_categories = normalize_categories(help_categories)
            session.flush()
            return user
        except Exception:
            logger.exception("Error in UserDao.updateUser (id=%s)", user_id)
            raise

    def applyRating(self, session: Session, user_id: UUID, score: int) -> User | None:
        """
        Fold one new score into the user's running mean in a single UPDATE.

        ``rating = (rating * rating_count + score) / (rating_count + 1)`` and
        ``rating_count = rating_count + 1`` are evaluated by the database
        against the pre-update row, so concurrent ratings cannot lose updates.

        Returns
        -------
        User | None
            The refreshed user, or None when no row matched.
        """
        try:
            updated = (
                session.query(User)
                .filter(User.id == user_id)
                .update(
                    {
                        User.rating: (User.rating * User.rating_count + score) / (User.rating_count + 1.0),
                        User.rating_count: User.rating_count + 1,
                    },
                    synchronize_session=False,
                )
            )
            if updated == 0:
                return None
            return session.get(User, user_id, populate_existing=True)
        except Exception:
            logger.exception("Error in UserDao.applyRating (id=%s)", user_id)
            raise
