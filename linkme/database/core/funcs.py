"""
Service-layer operations for users, conversations, and messages.

All public functions are wrapped with the `@transactional` decorator, which
manages SQLAlchemy sessions and transactions automatically. Each function
accepts (and uses) an injected `session: Session` provided by the decorator,
so callers invoke them with keyword arguments only, e.g.
``get_user(user_id=...)``.

Functions return plain dicts built from the entities inside the transaction;
no ORM object escapes a session. Failures are raised as the errors defined in
`linkme.exceptions`.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkme.constants import HELP_CATEGORIES, ROLES
from linkme.crypt.encrypt_decrypt import EncryptionDec
from linkme.database.core.validation import as_uuid, require_choice, require_text
from linkme.database.daos.conversation_dao import ConversationDao
from linkme.database.daos.message_dao import MessageDao
from linkme.database.daos.user_dao import UserDao
from linkme.database.entities.conversations import Conversation
from linkme.database.entities.messages import Message
from linkme.database.entities.user import User
from linkme.database.helpers.transactionManagement import transactional
from linkme.exceptions import DuplicateIdentity, InvalidCredentials, NotFound, ValidationError

logger = logging.getLogger(__name__)


def _validate_categories(categories: Optional[Iterable[str]]) -> list[str]:
    categories = list(categories or [])
    unknown = [c for c in categories if c not in HELP_CATEGORIES]
    if unknown:
        raise ValidationError(f"Unknown help categories: {', '.join(sorted(set(unknown)))}")
    return categories


def load_user(session: Session, user_id, field: str = "user_id") -> User:
    """Fetch a user or raise ``NotFound``."""
    user = UserDao().fetchUserById(session, as_uuid(user_id, field))
    if user is None:
        raise NotFound("User not found")
    return user


# --------------------------------------------------------------------
# Users
# --------------------------------------------------------------------

@transactional
def register_user(session: Session, email: str, password: str, name: str, role: str,
                  jmbg: str, help_categories: Optional[Iterable[str]] = None) -> dict:
    """
    Validate uniqueness and password policy, then create a new user.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    email : str
        Login email (must be unique, compared case-insensitively).
    password : str
        Plaintext password, validated then hashed at DAO level.
    name : str
        Display name.
    role : str
        ``user`` or ``volunteer``.
    jmbg : str
        13-digit national ID number. Only its hash is stored.
    help_categories : Iterable[str], optional
        Categories the user offers help with.

    Returns
    -------
    dict
        The public user representation (no password hash).

    Raises
    ------
    ValidationError
        Missing fields, bad role/category, weak password or malformed JMBG.
    DuplicateIdentity
        Email or JMBG already registered.
    """
    user_dao = UserDao()
    enc = EncryptionDec()

    email = require_text(email, "email").lower()
    name = require_text(name, "name")
    jmbg = require_text(jmbg, "jmbg")
    if not password:
        raise ValidationError("password is required")
    require_choice(role, ROLES, "role")
    categories = _validate_categories(help_categories)
    if not enc.is_valid_jmbg(jmbg):
        raise ValidationError("JMBG must be exactly 13 digits")
    if not enc.is_valid_password(password):
        raise ValidationError(
            "Password is invalid. Must contain at least 8 characters, 1 lowercase, "
            "1 uppercase, 1 digit, and 1 special character."
        )

    jmbg_hash = enc.hash_identity(jmbg)
    if user_dao.fetchUserByEmail(session, email) is not None:
        raise DuplicateIdentity("Email already registered")
    if user_dao.fetchUserByJmbgHash(session, jmbg_hash) is not None:
        raise DuplicateIdentity("JMBG already registered")

    user = User(
        email=email,
        password=password,
        name=name,
        role=role,
        jmbg_hash=jmbg_hash,
        help_categories=categories,
    )
    try:
        with session.begin_nested():
            user_dao.createUser(session=session, user_data=user)
    except IntegrityError:
        # lost a race against a concurrent registration with the same email or JMBG
        raise DuplicateIdentity("Email or JMBG already registered") from None

    logger.info("Registered %s %s", user.role, user.id)
    return user.to_dict()


@transactional
def login_user(session: Session, email: str, password: str) -> dict:
    """
    Check credentials and return the public user.

    Raises
    ------
    InvalidCredentials
        Unknown email or wrong password (the two are not distinguished).
    """
    if not email or not password:
        raise ValidationError("Email and password required")
    user = UserDao().fetchUserByEmail(session, email.strip().lower())
    if user is None or not EncryptionDec().check_passwords(password, user.password):
        raise InvalidCredentials()
    return user.to_dict()


@transactional
def get_user(session: Session, user_id) -> dict:
    return load_user(session, user_id).to_dict()


@transactional
def update_user(session: Session, user_id, name: Optional[str] = None, role: Optional[str] = None,
                help_categories: Optional[Iterable[str]] = None) -> dict:
    """
    Update name, role and/or help categories. Fields left as None are unchanged.

    Email, identity hash and the rating aggregate cannot be changed here.
    """
    if name is not None:
        name = require_text(name, "name")
    if role is not None:
        require_choice(role, ROLES, "role")
    if help_categories is not None:
        help_categories = _validate_categories(help_categories)

    user = UserDao().updateUser(
        session,
        as_uuid(user_id, "user_id"),
        name=name,
        role=role,
        help_categories=help_categories,
    )
    if user is None:
        raise NotFound("User not found")
    return user.to_dict()


# --------------------------------------------------------------------
# Conversations
# --------------------------------------------------------------------

def obtain_conversation(session: Session, participant_a: User, participant_b: User,
                        help_request_id: Optional[UUID] = None) -> tuple[Conversation, bool]:
    """
    Return the conversation between two users, creating it when missing.

    The lookup is symmetric. An existing conversation is returned unchanged,
    including its first ``help_request_id``. The insert runs inside a
    SAVEPOINT: if a concurrent caller created the same pair first, the unique
    ``pair_key`` rejects ours and the winner's row is returned instead.

    Returns
    -------
    tuple[Conversation, bool]
        The conversation and whether it was created by this call.
    """
    if participant_a.id == participant_b.id:
        raise ValidationError("A conversation needs two different participants")

    conversation_dao = ConversationDao()
    existing = conversation_dao.fetchConversationByParticipants(session, participant_a.id, participant_b.id)
    if existing is not None:
        return existing, False

    conversation = Conversation(
        participant1_id=participant_a.id,
        participant1_name=participant_a.name,
        participant2_id=participant_b.id,
        participant2_name=participant_b.name,
        help_request_id=help_request_id,
    )
    try:
        with session.begin_nested():
            conversation_dao.createConversation(session, conversation)
    except IntegrityError:
        winner = conversation_dao.fetchConversationByParticipants(session, participant_a.id, participant_b.id)
        if winner is None:
            raise
        logger.info("Conversation for pair %s created concurrently, reusing %s", winner.pair_key, winner.id)
        return winner, False

    logger.info("Created conversation %s", conversation.id)
    return conversation, True


def post_message(session: Session, conversation: Conversation, sender: User, text: str) -> Message:
    """Append a message from ``sender`` and bump the conversation's ``updated_at``."""
    if not conversation.has_participant(sender.id):
        raise ValidationError("Sender is not a participant of this conversation")
    message = Message(
        conversation_id=conversation.id,
        sender_id=sender.id,
        sender_name=sender.name,
        text=require_text(text, "text"),
    )
    MessageDao().createMessage(session, message)
    ConversationDao().updateConversationByDate(session, conversation.id, datetime.now(timezone.utc))
    return message


def _load_conversation(session: Session, conversation_id) -> Conversation:
    conversation = ConversationDao().fetchConversationById(session, as_uuid(conversation_id, "conversation_id"))
    if conversation is None:
        raise NotFound("Conversation not found")
    return conversation


@transactional
def get_or_create_conversation(session: Session, participant_a, participant_b, help_request_id=None) -> dict:
    """
    Get or create the conversation between two users.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    participant_a, participant_b : UUID | str
        The two users, in any order.
    help_request_id : UUID | str, optional
        Stored only when the conversation is new.

    Returns
    -------
    dict
        {'conversation': <conversation dict>, 'created': <bool>}
    """
    user_a = load_user(session, participant_a, "participant1_id")
    user_b = load_user(session, participant_b, "participant2_id")
    request_id = as_uuid(help_request_id, "help_request_id") if help_request_id else None
    conversation, created = obtain_conversation(session, user_a, user_b, request_id)
    return {"conversation": conversation.to_dict(), "created": created}


@transactional
def get_conversation(session: Session, conversation_id) -> dict:
    return _load_conversation(session, conversation_id).to_dict()


@transactional
def get_conversations_by_user(session: Session, user_id) -> list[dict]:
    """
    List a user's conversations, most recently active first, each with its
    latest message under ``last_message`` (None for an empty thread).
    """
    message_dao = MessageDao()
    conversations = ConversationDao().fetchConversationsByUserId(session, as_uuid(user_id, "user_id"))
    result = []
    for conversation in conversations:
        item = conversation.to_dict()
        last = message_dao.fetchLastMessage(session, conversation.id)
        item["last_message"] = last.to_dict() if last else None
        result.append(item)
    return result


# --------------------------------------------------------------------
# Messages
# --------------------------------------------------------------------

@transactional
def create_message(session: Session, conversation_id, sender_id, text: str) -> dict:
    """
    Post a message to a conversation.

    Raises
    ------
    NotFound
        Conversation or sender absent.
    ValidationError
        Empty text, or sender not a participant.
    """
    conversation = _load_conversation(session, conversation_id)
    sender = load_user(session, sender_id, "sender_id")
    return post_message(session, conversation, sender, text).to_dict()


@transactional
def get_messages(session: Session, conversation_id) -> list[dict]:
    """All messages of a conversation, oldest first."""
    conversation = _load_conversation(session, conversation_id)
    return [m.to_dict() for m in MessageDao().fetchMessagesByConversationId(session, conversation.id)]


@transactional
def mark_messages_as_read(session: Session, conversation_id, user_id) -> int:
    """
    Mark the messages ``user_id`` received in a conversation as read.

    Returns
    -------
    int
        Number of messages that changed from unread to read.
    """
    conversation = _load_conversation(session, conversation_id)
    reader_id = as_uuid(user_id, "user_id")
    if not conversation.has_participant(reader_id):
        raise ValidationError("User is not a participant of this conversation")
    return MessageDao().markMessagesAsRead(session, conversation.id, reader_id)
