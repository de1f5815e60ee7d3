"""
Help request lifecycle.

States and transitions
----------------------
::

    open ──accept──▶ accepted ──rating submitted──▶ completed
      │
      └──cancel (owner only)──▶ cancelled

``completed`` and ``cancelled`` are terminal. Every transition is a
compare-and-set on ``status`` (`HelpRequestDao.transitionStatus`), so of two
concurrent acceptances exactly one succeeds and the other gets
``InvalidTransition``.

Accepting is one transaction together with its side effects: the owner/volunteer
conversation is obtained or created and the volunteer's greeting is posted. If
any step fails the request stays ``open``.

The ``accepted → completed`` step lives in `linkme.database.core.ratings`,
since it only happens as part of submitting a rating.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from linkme.constants import (
    GREETING_PREVIEW_LENGTH,
    HELP_CATEGORIES,
    ROLE_VOLUNTEER,
    STATUS_ACCEPTED,
    STATUS_CANCELLED,
    STATUS_OPEN,
    URGENCIES,
    URGENCY_FLEXIBLE,
)
from linkme.database.config.config import settings
from linkme.database.core.funcs import load_user, obtain_conversation, post_message
from linkme.database.core.validation import as_uuid, require_choice, require_coordinates, require_text
from linkme.database.daos.help_request_dao import HelpRequestDao
from linkme.database.entities.help_request import HelpRequest
from linkme.database.helpers.transactionManagement import transactional
from linkme.exceptions import InvalidTransition, NotFound, ValidationError
from linkme.matching import Coordinates, rank

logger = logging.getLogger(__name__)


def load_help_request(session: Session, request_id, refresh: bool = False) -> HelpRequest:
    """Fetch a help request or raise ``NotFound``."""
    help_request = HelpRequestDao().fetchHelpRequestById(session, as_uuid(request_id, "help_request_id"), refresh)
    if help_request is None:
        raise NotFound("Help request not found")
    return help_request


def _rejected(session: Session, help_request: HelpRequest, action: str) -> InvalidTransition:
    current = load_help_request(session, help_request.id, refresh=True).status
    return InvalidTransition(f"Cannot {action} a request that is {current}")


def greeting_for(help_request: HelpRequest) -> str:
    return settings.GREETING_TEMPLATE.format(preview=help_request.description[:GREETING_PREVIEW_LENGTH])


@transactional
def create_help_request(session: Session, user_id, category: str, description: str, latitude, longitude,
                        address: str, urgency: str = URGENCY_FLEXIBLE) -> dict:
    """
    Post a new help request in the ``open`` state.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    user_id : UUID | str
        Owner of the request.
    category : str
        One of the help categories.
    description : str
        What help is needed.
    latitude, longitude : float
        Location of the request.
    address : str
        Human-readable address.
    urgency : str, optional
        ``urgent`` or ``flexible`` (default).

    Returns
    -------
    dict
        The created request.
    """
    owner = load_user(session, user_id)
    require_choice(category, HELP_CATEGORIES, "category")
    require_choice(urgency, URGENCIES, "urgency")
    lat, lon = require_coordinates(latitude, longitude)

    help_request = HelpRequest(
        user_id=owner.id,
        user_name=owner.name,
        category=category,
        description=require_text(description, "description"),
        latitude=lat,
        longitude=lon,
        address=require_text(address, "address"),
        urgency=urgency,
    )
    HelpRequestDao().createHelpRequest(session, help_request)
    logger.info("Help request %s opened by %s", help_request.id, owner.id)
    return help_request.to_dict()


@transactional
def accept_help_request(session: Session, request_id, volunteer_id) -> dict:
    """
    ``open → accepted``: assign a volunteer and open the conversation.

    Returns
    -------
    dict
        {'help_request': ..., 'conversation': ..., 'message': ...} where
        ``message`` is the volunteer's greeting.

    Raises
    ------
    NotFound
        Request or volunteer absent.
    InvalidTransition
        Request not open (including a lost race), user is not a volunteer,
        or the volunteer owns the request.
    """
    help_request = load_help_request(session, request_id)
    volunteer = load_user(session, volunteer_id, "volunteer_id")

    if volunteer.role != ROLE_VOLUNTEER:
        raise InvalidTransition("Only volunteers can accept help requests")
    if volunteer.id == help_request.user_id:
        raise InvalidTransition("You cannot accept your own help request")
    if help_request.status != STATUS_OPEN:
        raise InvalidTransition(f"Cannot accept a request that is {help_request.status}")

    accepted = HelpRequestDao().transitionStatus(
        session,
        help_request.id,
        STATUS_OPEN,
        STATUS_ACCEPTED,
        volunteer_id=volunteer.id,
        volunteer_name=volunteer.name,
    )
    if not accepted:
        raise _rejected(session, help_request, "accept")

    help_request = load_help_request(session, help_request.id, refresh=True)
    owner = load_user(session, help_request.user_id)
    conversation, _ = obtain_conversation(session, owner, volunteer, help_request.id)
    message = post_message(session, conversation, volunteer, greeting_for(help_request))

    logger.info("Help request %s accepted by %s", help_request.id, volunteer.id)
    return {
        "help_request": help_request.to_dict(),
        "conversation": conversation.to_dict(),
        "message": message.to_dict(),
    }


@transactional
def cancel_help_request(session: Session, request_id, user_id) -> dict:
    """
    ``open → cancelled``, allowed only for the request's owner.

    Raises
    ------
    NotFound
        Request absent.
    InvalidTransition
        Caller is not the owner, or the request is no longer open.
    """
    help_request = load_help_request(session, request_id)
    if as_uuid(user_id, "user_id") != help_request.user_id:
        raise InvalidTransition("Only the owner can cancel a help request")
    if help_request.status != STATUS_OPEN:
        raise InvalidTransition(f"Cannot cancel a request that is {help_request.status}")

    if not HelpRequestDao().transitionStatus(session, help_request.id, STATUS_OPEN, STATUS_CANCELLED):
        raise _rejected(session, help_request, "cancel")

    logger.info("Help request %s cancelled", help_request.id)
    return load_help_request(session, help_request.id, refresh=True).to_dict()


@transactional
def get_help_request(session: Session, request_id) -> dict:
    return load_help_request(session, request_id).to_dict()


@transactional
def get_help_requests_by_user(session: Session, user_id) -> list[dict]:
    """Requests owned by ``user_id`` in any state, newest first."""
    requests = HelpRequestDao().fetchHelpRequestsByUserId(session, as_uuid(user_id, "user_id"))
    return [r.to_dict() for r in requests]


@transactional
def get_open_help_requests(session: Session) -> list[dict]:
    return [r.to_dict() for r in HelpRequestDao().fetchOpenHelpRequests(session)]


@transactional
def list_matching_requests(session: Session, volunteer_id, latitude=None, longitude=None,
                           category: Optional[str] = None) -> list[dict]:
    """
    Open requests for a volunteer, best match first.

    The volunteer's own requests are excluded. Each entry carries an
    ``ai_match_score`` computed for this call only; it is never stored.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    volunteer_id : UUID | str
        The browsing volunteer; their help categories drive the score.
    latitude, longitude : float, optional
        Current volunteer location. Both or neither.
    category : str, optional
        Only return requests of this category.
    """
    volunteer = load_user(session, volunteer_id, "volunteer_id")
    location = None
    if latitude is not None or longitude is not None:
        if latitude is None or longitude is None:
            raise ValidationError("latitude and longitude must be given together")
        location = Coordinates(*require_coordinates(latitude, longitude))
    if category is not None:
        require_choice(category, HELP_CATEGORIES, "category")

    candidates = [
        r for r in HelpRequestDao().fetchOpenHelpRequests(session)
        if r.user_id != volunteer.id and (category is None or r.category == category)
    ]
    result = []
    for help_request, match_score in rank(candidates, volunteer.help_categories, location):
        item = help_request.to_dict()
        item["ai_match_score"] = match_score
        result.append(item)
    return result
