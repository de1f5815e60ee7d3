"""
Tests for simultaneous writers: two threads hit the same row at the same moment
and exactly one of them wins.
"""

import logging
import threading

import pytest

from linkme.database.core.funcs import get_conversations_by_user, get_or_create_conversation, get_user
from linkme.database.core.help_requests import accept_help_request, get_help_request
from linkme.database.core.ratings import submit_rating
from linkme.exceptions import DuplicateRating, InvalidTransition

ROUNDS = 5


def run_together(*calls):
    """Start every call on its own thread behind a barrier; return (result, error) pairs in call order."""
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def worker(index, call):
        barrier.wait()
        try:
            outcomes[index] = (call(), None)
        except Exception as e:
            outcomes[index] = (None, e)

    threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    assert not any(t.is_alive() for t in threads)
    return outcomes


def split(outcomes):
    wins = [result for result, error in outcomes if error is None]
    losses = [error for result, error in outcomes if error is not None]
    return wins, losses


def error_records(caplog):
    return [r for r in caplog.records if r.levelno >= logging.ERROR]


@pytest.mark.parametrize("round_", range(ROUNDS))
def test_one_volunteer_wins_simultaneous_accept(round_, owner, make_user, make_request, caplog):
    first = make_user(name="Vuk", role="volunteer")
    second = make_user(name="Mira", role="volunteer")
    request = make_request(owner["id"])

    outcomes = run_together(
        lambda: accept_help_request(request_id=request["id"], volunteer_id=first["id"]),
        lambda: accept_help_request(request_id=request["id"], volunteer_id=second["id"]),
    )
    wins, losses = split(outcomes)

    assert len(wins) == 1
    assert len(losses) == 1
    assert isinstance(losses[0], InvalidTransition)
    stored = get_help_request(request_id=request["id"])
    assert stored["status"] == "accepted"
    assert stored["volunteer_id"] == wins[0]["help_request"]["volunteer_id"]
    assert error_records(caplog) == []


@pytest.mark.parametrize("round_", range(ROUNDS))
def test_simultaneous_get_or_create_share_one_conversation(round_, owner, volunteer, caplog):
    outcomes = run_together(
        lambda: get_or_create_conversation(participant_a=owner["id"], participant_b=volunteer["id"]),
        lambda: get_or_create_conversation(participant_a=volunteer["id"], participant_b=owner["id"]),
    )
    wins, losses = split(outcomes)

    assert losses == []
    assert wins[0]["conversation"]["id"] == wins[1]["conversation"]["id"]
    assert sorted(w["created"] for w in wins) == [False, True]
    assert len(get_conversations_by_user(user_id=owner["id"])) == 1
    assert error_records(caplog) == []


@pytest.mark.parametrize("round_", range(ROUNDS))
def test_simultaneous_identical_ratings_count_once(round_, owner, volunteer, make_request, caplog):
    request = make_request(owner["id"])
    accept_help_request(request_id=request["id"], volunteer_id=volunteer["id"])

    def rate():
        return submit_rating(
            from_user_id=owner["id"],
            to_user_id=volunteer["id"],
            help_request_id=request["id"],
            score=5,
        )

    wins, losses = split(run_together(rate, rate))

    assert len(wins) == 1
    assert len(losses) == 1
    assert isinstance(losses[0], DuplicateRating)
    rated = get_user(user_id=volunteer["id"])
    assert rated["rating_count"] == 1
    assert rated["rating"] == pytest.approx(5.0)
    assert get_help_request(request_id=request["id"])["status"] == "completed"
    assert error_records(caplog) == []
