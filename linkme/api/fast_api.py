"""
FastAPI Router - Auth • Users • Help Requests • Conversations • Ratings
=======================================================================

Purpose
-------
Defines the HTTP API for:
- Authentication: register, login
- User profiles: read, update
- Help requests: create, list (own / open / matched for a volunteer), accept, cancel
- Conversations: get-or-create, list; messages: create, list, mark read
- Ratings: submit, check

Key Notes
---------
- Input validation via Pydantic models in `linkme.api.models`.
- Handlers are thin: they call `linkme.database.core` and translate
  `LinkMeError` subclasses into `HTTPException` with the error's status code
  and message.
- There is no session cookie; the acting user's id travels in the request body
  or query string.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Response, status

from linkme.api.models import (
    AcceptDetails,
    CancelDetails,
    ConversationCreationDetails,
    HelpRequestCreation,
    NewMessage,
    RatingDetails,
    ReadReceipt,
    UserCredentials,
    UserData,
    UserUpdate,
)
from linkme.database.core.funcs import (
    create_message,
    get_conversation,
    get_conversations_by_user,
    get_messages,
    get_or_create_conversation,
    get_user,
    login_user,
    mark_messages_as_read,
    register_user,
    update_user,
)
from linkme.database.core.help_requests import (
    accept_help_request,
    cancel_help_request,
    create_help_request,
    get_help_request,
    get_help_requests_by_user,
    get_open_help_requests,
    list_matching_requests,
)
from linkme.database.core.ratings import check_rating, submit_rating
from linkme.exceptions import LinkMeError

router = APIRouter(prefix="/api")
"""Creates the FastAPI router in which we define its routes"""


def _http_error(e: LinkMeError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.detail)


# -----------------------
# Auth & users
# -----------------------

@router.post('/auth/register', status_code=status.HTTP_201_CREATED)
def register(data: UserData):
    """Register a new account.

    Responses:
        201: the public user
        400: invalid input or weak password
        409: email or JMBG already registered
    """
    try:
        return register_user(
            email=data.email,
            password=data.password,
            name=data.name,
            role=data.role,
            jmbg=data.jmbg,
            help_categories=data.help_categories,
        )
    except LinkMeError as e:
        raise _http_error(e)


@router.post('/auth/login')
def login(data: UserCredentials):
    """Check credentials; 200 with the public user, 401 otherwise."""
    try:
        return login_user(email=data.email, password=data.password)
    except LinkMeError as e:
        raise _http_error(e)


@router.get('/users/{user_id}')
def read_user(user_id: UUID):
    try:
        return get_user(user_id=user_id)
    except LinkMeError as e:
        raise _http_error(e)


@router.put('/users/{user_id}')
def change_user(user_id: UUID, data: UserUpdate):
    try:
        return update_user(
            user_id=user_id,
            name=data.name,
            role=data.role,
            help_categories=data.help_categories,
        )
    except LinkMeError as e:
        raise _http_error(e)


# -----------------------
# Help requests
# -----------------------

@router.get('/help-requests')
def list_help_requests(user_id: Optional[UUID] = None):
    """Requests owned by `user_id` when given, otherwise all open requests."""
    try:
        if user_id is not None:
            return get_help_requests_by_user(user_id=user_id)
        return get_open_help_requests()
    except LinkMeError as e:
        raise _http_error(e)


@router.get('/help-requests/matches')
def matching_help_requests(volunteer_id: UUID, latitude: Optional[float] = None,
                           longitude: Optional[float] = None, category: Optional[str] = None):
    """Open requests ranked for a volunteer, each with `ai_match_score` (0-100)."""
    try:
        return list_matching_requests(
            volunteer_id=volunteer_id,
            latitude=latitude,
            longitude=longitude,
            category=category,
        )
    except LinkMeError as e:
        raise _http_error(e)


@router.get('/help-requests/{request_id}')
def read_help_request(request_id: UUID):
    try:
        return get_help_request(request_id=request_id)
    except LinkMeError as e:
        raise _http_error(e)


@router.post('/help-requests', status_code=status.HTTP_201_CREATED)
def new_help_request(data: HelpRequestCreation):
    try:
        return create_help_request(
            user_id=data.user_id,
            category=data.category,
            description=data.description,
            urgency=data.urgency,
            latitude=data.latitude,
            longitude=data.longitude,
            address=data.address,
        )
    except LinkMeError as e:
        raise _http_error(e)


@router.post('/help-requests/{request_id}/accept')
def accept(request_id: UUID, data: AcceptDetails):
    """Accept an open request as a volunteer.

    Responses:
        200: {'help_request', 'conversation', 'message'}
        404: request or volunteer not found
        409: request not open, caller not a volunteer, or caller owns it
    """
    try:
        return accept_help_request(request_id=request_id, volunteer_id=data.volunteer_id)
    except LinkMeError as e:
        raise _http_error(e)


@router.post('/help-requests/{request_id}/cancel')
def cancel(request_id: UUID, data: CancelDetails):
    try:
        return cancel_help_request(request_id=request_id, user_id=data.user_id)
    except LinkMeError as e:
        raise _http_error(e)


# -----------------------
# Conversations & messages
# -----------------------

@router.get('/conversations')
def user_conversations(user_id: UUID):
    try:
        return get_conversations_by_user(user_id=user_id)
    except LinkMeError as e:
        raise _http_error(e)


@router.post('/conversations')
def new_conversation(data: ConversationCreationDetails, response: Response):
    """Get or create the conversation of two users: 201 when created, 200 when it existed."""
    try:
        res = get_or_create_conversation(
            participant_a=data.participant1_id,
            participant_b=data.participant2_id,
            help_request_id=data.help_request_id,
        )
    except LinkMeError as e:
        raise _http_error(e)
    if res['created']:
        response.status_code = status.HTTP_201_CREATED
    return res['conversation']


@router.get('/conversations/{conversation_id}')
def read_conversation(conversation_id: UUID):
    try:
        return get_conversation(conversation_id=conversation_id)
    except LinkMeError as e:
        raise _http_error(e)


@router.get('/conversations/{conversation_id}/messages')
def messages(conversation_id: UUID):
    try:
        return get_messages(conversation_id=conversation_id)
    except LinkMeError as e:
        raise _http_error(e)


@router.post('/conversations/{conversation_id}/messages', status_code=status.HTTP_201_CREATED)
def new_message(conversation_id: UUID, data: NewMessage):
    try:
        return create_message(conversation_id=conversation_id, sender_id=data.sender_id, text=data.text)
    except LinkMeError as e:
        raise _http_error(e)


@router.put('/conversations/{conversation_id}/messages/read')
def read_messages(conversation_id: UUID, data: ReadReceipt):
    try:
        updated = mark_messages_as_read(conversation_id=conversation_id, user_id=data.user_id)
    except LinkMeError as e:
        raise _http_error(e)
    return {'updated': updated}


# -----------------------
# Ratings
# -----------------------

@router.post('/ratings', status_code=status.HTTP_201_CREATED)
def rate(data: RatingDetails):
    """Rate the other party of a help request.

    Responses:
        201: {'rating', 'user', 'help_request'}
        400: bad score or wrong recipient
        404: request not found
        409: already rated, or the request cannot be rated
    """
    try:
        return submit_rating(
            from_user_id=data.from_user_id,
            to_user_id=data.to_user_id,
            help_request_id=data.help_request_id,
            score=data.score,
            comment=data.comment,
        )
    except LinkMeError as e:
        raise _http_error(e)


@router.get('/ratings/check')
def has_rated(help_request_id: UUID, from_user_id: UUID):
    try:
        return check_rating(help_request_id=help_request_id, from_user_id=from_user_id)
    except LinkMeError as e:
        raise _http_error(e)
