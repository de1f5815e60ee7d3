"""
Tests for the conversation registry and messages.
"""

import logging
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from linkme.database.core.funcs import (
    create_message,
    get_conversation,
    get_conversations_by_user,
    get_messages,
    get_or_create_conversation,
    load_user,
    mark_messages_as_read,
    obtain_conversation,
)
from linkme.database.daos.conversation_dao import ConversationDao
from linkme.database.entities.conversations import make_pair_key
from linkme.database.helpers.transactionManagement import SessionFactory
from linkme.exceptions import NotFound, ValidationError

MISSING_ID = "00000000-0000-4000-8000-000000000000"


def test_lookup_is_symmetric(owner, volunteer):
    first = get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])
    second = get_or_create_conversation(participant_a=volunteer["id"], participant_b=owner["id"])

    assert first["created"] is True
    assert second["created"] is False
    assert first["conversation"]["id"] == second["conversation"]["id"]
    assert len(get_conversations_by_user(user_id=owner["id"])) == 1


def test_existing_conversation_keeps_its_request(owner, volunteer, make_request):
    first_request = make_request(owner["id"])
    second_request = make_request(owner["id"])
    get_or_create_conversation(
        participant_a=owner["id"], participant_b=volunteer["id"], help_request_id=first_request["id"]
    )

    again = get_or_create_conversation(
        participant_a=volunteer["id"], participant_b=owner["id"], help_request_id=second_request["id"]
    )

    assert again["conversation"]["help_request_id"] == first_request["id"]


def test_participant_names_are_copied(owner, volunteer):
    conversation = get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])["conversation"]

    assert conversation["participant1_name"] == "Olga"
    assert conversation["participant2_name"] == "Vuk"


def test_pair_key_ignores_order():
    assert make_pair_key("b", "a") == make_pair_key("a", "b") == "a:b"


def test_conversation_with_self_is_rejected(owner):
    with pytest.raises(ValidationError):
        get_or_create_conversation(participant_a=owner["id"], participant_b=owner["id"])


def test_conversation_with_unknown_user(owner):
    with pytest.raises(NotFound):
        get_or_create_conversation(participant_a=owner["id"], participant_b=MISSING_ID)


def test_losing_insert_returns_winner(owner, volunteer, caplog):
    winner = get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])["conversation"]
    real_lookup = ConversationDao.fetchConversationByParticipants
    calls = {"n": 0}

    def stale_then_real(self, session, a, b):
        # first lookup misses, as it would for a caller that raced the winner
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_lookup(self, session, a, b)

    with patch.object(ConversationDao, "fetchConversationByParticipants", stale_then_real):
        res = get_or_create_conversation(participant_a=volunteer["id"], participant_b=owner["id"])

    assert res["created"] is False
    assert res["conversation"]["id"] == winner["id"]
    assert len(get_conversations_by_user(user_id=volunteer["id"])) == 1
    assert [r for r in caplog.records if r.levelno >= logging.ERROR] == []


def test_duplicate_pair_violates_unique_key(owner, volunteer):
    get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])
    with patch.object(ConversationDao, "fetchConversationByParticipants", lambda self, s, a, b: None):
        with pytest.raises(IntegrityError):
            session = SessionFactory()
            try:
                obtain_conversation(
                    session,
                    load_user(session, owner["id"]),
                    load_user(session, volunteer["id"]),
                )
            finally:
                session.rollback()
                session.close()


def test_messages_are_chronological(owner, volunteer):
    conversation = get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])["conversation"]

    create_message(conversation_id=conversation["id"], sender_id=owner["id"], text="Hello")
    create_message(conversation_id=conversation["id"], sender_id=volunteer["id"], text="Hi, on my way")

    texts = [m["text"] for m in get_messages(conversation_id=conversation["id"])]
    assert texts == ["Hello", "Hi, on my way"]


def test_message_bumps_conversation(owner, volunteer):
    conversation = get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])["conversation"]

    message = create_message(conversation_id=conversation["id"], sender_id=owner["id"], text="Hello")

    assert get_conversation(conversation_id=conversation["id"])["id"] == conversation["id"]
    listed = get_conversations_by_user(user_id=volunteer["id"])
    assert listed[0]["last_message"]["id"] == message["id"]


def test_outsider_cannot_post(owner, volunteer, make_user):
    outsider = make_user(name="Zoran")
    conversation = get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])["conversation"]

    with pytest.raises(ValidationError):
        create_message(conversation_id=conversation["id"], sender_id=outsider["id"], text="Hey")


def test_empty_message_is_rejected(owner, volunteer):
    conversation = get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])["conversation"]

    with pytest.raises(ValidationError):
        create_message(conversation_id=conversation["id"], sender_id=owner["id"], text="  ")


def test_message_to_unknown_conversation(owner):
    with pytest.raises(NotFound):
        create_message(conversation_id=MISSING_ID, sender_id=owner["id"], text="Hello")


def test_mark_as_read_only_touches_received_messages(owner, volunteer):
    conversation = get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])["conversation"]
    create_message(conversation_id=conversation["id"], sender_id=volunteer["id"], text="Hi")
    create_message(conversation_id=conversation["id"], sender_id=volunteer["id"], text="Are you home?")
    create_message(conversation_id=conversation["id"], sender_id=owner["id"], text="Yes")

    assert mark_messages_as_read(conversation_id=conversation["id"], user_id=owner["id"]) == 2
    assert mark_messages_as_read(conversation_id=conversation["id"], user_id=owner["id"]) == 0

    read = {m["text"]: m["read"] for m in get_messages(conversation_id=conversation["id"])}
    assert read == {"Hi": True, "Are you home?": True, "Yes": False}


def test_listing_is_newest_activity_first(owner, volunteer, make_user):
    other = make_user(name="Mira", role="volunteer")
    older = get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"])["conversation"]
    newer = get_or_create_conversation(participant_a=owner["id"], participant_b=other["id"])["conversation"]
    create_message(conversation_id=older["id"], sender_id=owner["id"], text="ping")

    listed = get_conversations_by_user(user_id=owner["id"])

    assert [c["id"] for c in listed] == [older["id"], newer["id"]]
    assert listed[1]["last_message"] is None
