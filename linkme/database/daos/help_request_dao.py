"""
Help Request DAO

Purpose
-------
Data-access layer for the `HelpRequest` ORM entity:
- Create requests
- Query by id, by owner, or all open requests (newest first)
- Compare-and-set status transitions

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- `transitionStatus` issues ``UPDATE ... WHERE id = :id AND status = :expected``
  and reports whether a row changed. Two callers racing on the same request
  therefore cannot both win: the second sees zero rows updated.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from linkme.constants import STATUS_OPEN
from linkme.database.entities.help_request import HelpRequest

logger = logging.getLogger(__name__)


class HelpRequestDao:
    """
    Data Access Object (DAO) for managing HelpRequest entities.
    """

    def createHelpRequest(self, session: Session, help_request: HelpRequest) -> HelpRequest:
        try:
            session.add(help_request)
            session.flush()
            return help_request
        except Exception:
            logger.exception("Error in HelpRequestDao.createHelpRequest")
            raise

    def fetchHelpRequestById(self, session: Session, request_id: UUID, refresh: bool = False) -> HelpRequest | None:
        """
        Return one request or None.

        ``refresh=True`` reloads the row from the database even when it is
        already in the session's identity map (needed after `transitionStatus`).
        """
        try:
            return session.get(HelpRequest, request_id, populate_existing=refresh)
        except Exception:
            logger.exception("Error in HelpRequestDao.fetchHelpRequestById (id=%s)", request_id)
            raise

    def fetchHelpRequestsByUserId(self, session: Session, user_id: UUID) -> List[HelpRequest]:
        """All requests owned by ``user_id``, newest first."""
        try:
            return (
                session.query(HelpRequest)
                .filter(HelpRequest.user_id == user_id)
                .order_by(desc(HelpRequest.created_at))
                .all()
            )
        except Exception:
            logger.exception("Error in HelpRequestDao.fetchHelpRequestsByUserId (user=%s)", user_id)
            raise

    def fetchOpenHelpRequests(self, session: Session) -> List[HelpRequest]:
        """All requests still in the ``open`` state, newest first."""
        try:
            return (
                session.query(HelpRequest)
                .filter(HelpRequest.status == STATUS_OPEN)
                .order_by(desc(HelpRequest.created_at))
                .all()
            )
        except Exception:
            logger.exception("Error in HelpRequestDao.fetchOpenHelpRequests")
            raise

    def transitionStatus(self, session: Session, request_id: UUID, expected_status: str,
                         new_status: str, **values) -> bool:
        """
        Move a request from ``expected_status`` to ``new_status``.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        request_id : UUID
            Target request.
        expected_status : str
            Status the row must currently have.
        new_status : str
            Status to set.
        **values
            Extra columns to set in the same statement (e.g. ``volunteer_id``).

        Returns
        -------
        bool
            True if exactly one row was updated.
        """
        try:
            changes = {HelpRequest.status: new_status}
            for column, value in values.items():
                changes[getattr(HelpRequest, column)] = value
            updated = (
                session.query(HelpRequest)
                .filter(HelpRequest.id == request_id, HelpRequest.status == expected_status)
                .update(changes, synchronize_session=False)
            )
            return updated == 1
        except Exception:
            logger.exception(
                "Error in HelpRequestDao.transitionStatus (id=%s, %s -> %s)",
                request_id, expected_status, new_status,
            )
            raise
