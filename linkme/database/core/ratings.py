"""
Ratings and the per-user rating aggregate.

A rating is given by one side of an accepted help request to the other. The
first rating on an ``accepted`` request also completes it; the counterpart
may still leave their own single rating on the ``completed`` request.
The rating insert, the aggregate update and the status change commit or roll
back together.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkme.constants import MAX_RATING_SCORE, MIN_RATING_SCORE, STATUS_ACCEPTED, STATUS_COMPLETED
from linkme.database.core.funcs import load_user
from linkme.database.core.help_requests import load_help_request
from linkme.database.core.validation import as_uuid
from linkme.database.daos.help_request_dao import HelpRequestDao
from linkme.database.daos.rating_dao import RatingDao
from linkme.database.daos.user_dao import UserDao
from linkme.database.entities.rating import Rating
from linkme.database.helpers.transactionManagement import transactional
from linkme.exceptions import DuplicateRating, InvalidTransition, NotFound, ValidationError

logger = logging.getLogger(__name__)


def _validate_score(score) -> int:
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError("score must be an integer")
    if not MIN_RATING_SCORE <= score <= MAX_RATING_SCORE:
        raise ValidationError(f"score must be between {MIN_RATING_SCORE} and {MAX_RATING_SCORE}")
    return score


@transactional
def submit_rating(session: Session, from_user_id, to_user_id, help_request_id, score: int,
                  comment: str | None = None) -> dict:
    """
    Rate the other party of a help request.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    from_user_id : UUID | str
        The rater; the request's owner or its assigned volunteer.
    to_user_id : UUID | str
        The rated user; must be the rater's counterpart on the request.
    help_request_id : UUID | str
        The request being rated.
    score : int
        1 to 5.
    comment : str, optional
        Free text; blank comments are stored as None.

    Returns
    -------
    dict
        {'rating': <rating dict>, 'user': <rated user's public dict>,
        'help_request': <request dict>}

    Raises
    ------
    ValidationError
        Bad score or wrong ``to_user_id``.
    DuplicateRating
        The rater already rated this request (also when losing a race).
    NotFound
        Request or rated user absent.
    InvalidTransition
        Rater is not a party to the request, or the request was never
        accepted.
    """
    score = _validate_score(score)
    request_id = as_uuid(help_request_id, "help_request_id")
    rater_id = as_uuid(from_user_id, "from_user_id")
    target_id = as_uuid(to_user_id, "to_user_id")

    rating_dao = RatingDao()
    if rating_dao.fetchRatingByRequestAndUser(session, request_id, rater_id) is not None:
        raise DuplicateRating()

    help_request = load_help_request(session, request_id)
    if rater_id == help_request.user_id:
        counterpart = help_request.volunteer_id
    elif rater_id == help_request.volunteer_id:
        counterpart = help_request.user_id
    else:
        raise InvalidTransition("Only the owner or the assigned volunteer can rate this request")
    if help_request.status not in (STATUS_ACCEPTED, STATUS_COMPLETED):
        raise InvalidTransition(f"Cannot rate a request that is {help_request.status}")
    if target_id != counterpart:
        raise ValidationError("to_user_id must be the other party of the help request")
    load_user(session, target_id, "to_user_id")

    rating = Rating(
        from_user_id=rater_id,
        to_user_id=target_id,
        help_request_id=request_id,
        score=score,
        comment=(comment or "").strip() or None,
    )
    try:
        with session.begin_nested():
            rating_dao.createRating(session, rating)
    except IntegrityError:
        raise DuplicateRating() from None

    rated_user = UserDao().applyRating(session, target_id, score)
    if rated_user is None:
        raise NotFound("User not found")

    if help_request.status == STATUS_ACCEPTED:
        if not HelpRequestDao().transitionStatus(session, request_id, STATUS_ACCEPTED, STATUS_COMPLETED):
            # refresh to report what the request moved to in the meantime
            current = load_help_request(session, request_id, refresh=True).status
            if current != STATUS_COMPLETED:
                raise InvalidTransition(f"Cannot complete a request that is {current}")
        else:
            logger.info("Help request %s completed", request_id)

    logger.info("Rating %s: %s rated %s with %d", rating.id, rater_id, target_id, score)
    return {
        "rating": rating.to_dict(),
        "user": rated_user.to_dict(),
        "help_request": load_help_request(session, request_id, refresh=True).to_dict(),
    }


@transactional
def check_rating(session: Session, help_request_id, from_user_id) -> dict:
    """Tell whether ``from_user_id`` already rated the request: {'has_rated', 'rating'}."""
    rating = RatingDao().fetchRatingByRequestAndUser(
        session,
        as_uuid(help_request_id, "help_request_id"),
        as_uuid(from_user_id, "from_user_id"),
    )
    return {"has_rated": rating is not None, "rating": rating.to_dict() if rating else None}
