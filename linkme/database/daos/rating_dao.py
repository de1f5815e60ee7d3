"""
Rating DAO

Insert and lookup for the immutable `Rating` entity. There is intentionally no
update or delete method. A duplicate insert re-raises `IntegrityError` without
logging; the rating service reports it as `DuplicateRating`.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkme.database.entities.rating import Rating

logger = logging.getLogger(__name__)


class RatingDao:

    def createRating(self, session: Session, rating: Rating) -> Rating:
        """
        Add and flush a rating.

        Raises
        ------
        sqlalchemy.exc.IntegrityError
            If the rater already rated this help request.
        """
        try:
            session.add(rating)
            session.flush()
            return rating
        except IntegrityError:
            raise
        except Exception:
            logger.exception("Error in RatingDao.createRating")
            raise

    def fetchRatingByRequestAndUser(self, session: Session, help_request_id: UUID, from_user_id: UUID) -> Rating | None:
        try:
            return (
                session.query(Rating)
                .filter(Rating.help_request_id == help_request_id, Rating.from_user_id == from_user_id)
                .one_or_none()
            )
        except Exception:
            logger.exception("Error in RatingDao.fetchRatingByRequestAndUser")
            raise
