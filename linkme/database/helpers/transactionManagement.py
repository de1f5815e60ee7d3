"""
Database Transaction Management
===============================

This module provides utilities for managing SQLAlchemy database sessions
using Python context variables and a decorator-based transaction wrapper.

It allows seamless propagation of a database session across function calls
without explicitly threading it through arguments. Functions can be safely
decorated with ``@transactional`` to ensure they run inside a managed
transactional context.

Key features
~~~~~~~~~~~~
- Context variable to store the active session
- Implicit reuse of existing sessions (nested service calls share one transaction)
- Automatic commit and rollback handling
- Storage failures re-raised as :class:`linkme.exceptions.PersistenceError`
- Clean session closure after execution

"""

import contextvars
import logging
from functools import wraps

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from linkme.database.config.connection_engine import connection_engine
from linkme.exceptions import PersistenceError

logger = logging.getLogger(__name__)

SessionFactory = sessionmaker(bind=connection_engine)
"""Session factory bound to the application engine."""

# --------------------------------------------------------------------
# Context variable to store the current database session.
# --------------------------------------------------------------------
db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""


def transactional(func):
    """
    Decorator to wrap functions in a managed SQLAlchemy transaction.

    Ensures that:
    - If a session already exists in context, it is reused and the outermost
      caller owns commit/rollback.
    - Otherwise, a new session is created, committed, and closed.
    - On errors, the session is rolled back and closed. Raw SQLAlchemy errors
      are converted to ``PersistenceError``; domain errors propagate unchanged.

    Parameters
    ----------
    func : callable
        The function to wrap. It must accept a `session` keyword argument.

    Returns
    -------
    callable
        The wrapped function, executed within a database transaction.

    Example
    -------
    >>> @transactional
    ... def get_user(session, user_id):
    ...     return session.get(User, user_id)
    ...
    >>> user = get_user(user_id=some_id)
    """
    @wraps(func)
    def wrap_func(*args, **kwargs):
        session = db_session_context.get()
        if session:
            return func(*args, session=session, **kwargs)

        session = SessionFactory()
        token = db_session_context.set(session)

        try:
            result = func(*args, session=session, **kwargs)
            session.flush()
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Transaction failed in %s", func.__qualname__)
            raise PersistenceError() from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func
