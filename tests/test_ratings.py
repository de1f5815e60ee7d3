"""
Tests for rating submission and the running-average aggregate.
"""

import logging
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from linkme.database.core.funcs import get_user
from linkme.database.core.help_requests import accept_help_request, get_help_request, load_help_request
from linkme.database.core.ratings import check_rating, submit_rating
from linkme.database.daos.rating_dao import RatingDao
from linkme.exceptions import DuplicateRating, InvalidTransition, NotFound, ValidationError

MISSING_ID = "00000000-0000-4000-8000-000000000000"


@pytest.fixture
def accepted(owner, volunteer, make_request):
    request = make_request(owner["id"])
    accept_help_request(request_id=request["id"], volunteer_id=volunteer["id"])
    return request


def test_full_journey_completes_request(owner, volunteer, accepted):
    res = submit_rating(
        from_user_id=owner["id"],
        to_user_id=volunteer["id"],
        help_request_id=accepted["id"],
        score=4,
        comment="Quick and friendly",
    )

    assert res["rating"]["score"] == 4
    assert res["rating"]["comment"] == "Quick and friendly"
    assert res["user"]["rating"] == pytest.approx(4.0)
    assert res["user"]["rating_count"] == 1
    assert res["help_request"]["status"] == "completed"
    assert get_help_request(request_id=accepted["id"])["status"] == "completed"


def test_second_rating_is_duplicate_and_leaves_aggregate(owner, volunteer, accepted):
    submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=accepted["id"], score=5)

    with pytest.raises(DuplicateRating):
        submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=accepted["id"], score=1)

    rated = get_user(user_id=volunteer["id"])
    assert rated["rating"] == pytest.approx(5.0)
    assert rated["rating_count"] == 1


def test_counterpart_can_rate_completed_request(owner, volunteer, accepted):
    submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=accepted["id"], score=5)

    res = submit_rating(from_user_id=volunteer["id"], to_user_id=owner["id"], help_request_id=accepted["id"], score=3)

    assert res["user"]["rating"] == pytest.approx(3.0)
    assert res["help_request"]["status"] == "completed"


def test_aggregate_is_mean_of_all_scores(owner, volunteer, make_user, make_request):
    scores = [5, 4, 2, 5, 3]
    for i, s in enumerate(scores):
        requester = make_user(name=f"Req{i}")
        request = make_request(requester["id"])
        accept_help_request(request_id=request["id"], volunteer_id=volunteer["id"])
        submit_rating(from_user_id=requester["id"], to_user_id=volunteer["id"], help_request_id=request["id"], score=s)

    rated = get_user(user_id=volunteer["id"])
    assert rated["rating"] == pytest.approx(sum(scores) / len(scores))
    assert rated["rating_count"] == len(scores)


@pytest.mark.parametrize("score", [0, 6, -1, 2.5, "5", True])
def test_score_must_be_integer_from_1_to_5(owner, volunteer, accepted, score):
    with pytest.raises(ValidationError):
        submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=accepted["id"], score=score)


def test_open_request_cannot_be_rated(owner, volunteer, make_request):
    request = make_request(owner["id"])

    with pytest.raises(InvalidTransition):
        submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=request["id"], score=5)

    assert get_user(user_id=volunteer["id"])["rating_count"] == 0


def test_outsider_cannot_rate(volunteer, make_user, accepted):
    outsider = make_user(name="Zoran")

    with pytest.raises(InvalidTransition):
        submit_rating(from_user_id=outsider["id"], to_user_id=volunteer["id"], help_request_id=accepted["id"], score=1)


def test_must_rate_the_other_party(owner, make_user, accepted):
    stranger = make_user(name="Zoran")

    with pytest.raises(ValidationError):
        submit_rating(from_user_id=owner["id"], to_user_id=stranger["id"], help_request_id=accepted["id"], score=5)
    with pytest.raises(ValidationError):
        submit_rating(from_user_id=owner["id"], to_user_id=owner["id"], help_request_id=accepted["id"], score=5)


def test_rating_unknown_request(owner, volunteer):
    with pytest.raises(NotFound):
        submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=MISSING_ID, score=5)


def test_lost_race_reports_duplicate_and_changes_nothing(owner, volunteer, accepted, caplog):
    submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=accepted["id"], score=4)

    # the pre-check misses, as it would for a request racing the first insert
    with patch.object(RatingDao, "fetchRatingByRequestAndUser", lambda self, s, r, u: None):
        with pytest.raises(DuplicateRating):
            submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=accepted["id"], score=1)

    rated = get_user(user_id=volunteer["id"])
    assert rated["rating"] == pytest.approx(4.0)
    assert rated["rating_count"] == 1
    assert [r for r in caplog.records if r.levelno >= logging.ERROR] == []


def test_failed_completion_rolls_back_rating(owner, volunteer, accepted):
    def status_moved_on(session, request_id, refresh=False):
        if refresh:
            return SimpleNamespace(status="cancelled")
        return load_help_request(session, request_id)

    with (
        patch("linkme.database.core.ratings.HelpRequestDao.transitionStatus", return_value=False),
        patch("linkme.database.core.ratings.load_help_request", side_effect=status_moved_on),
    ):
        with pytest.raises(InvalidTransition):
            submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=accepted["id"], score=5)

    assert check_rating(help_request_id=accepted["id"], from_user_id=owner["id"])["has_rated"] is False
    assert get_user(user_id=volunteer["id"])["rating_count"] == 0
    assert get_help_request(request_id=accepted["id"])["status"] == "accepted"


def test_check_rating(owner, volunteer, accepted):
    before = check_rating(help_request_id=accepted["id"], from_user_id=owner["id"])
    submit_rating(from_user_id=owner["id"], to_user_id=volunteer["id"], help_request_id=accepted["id"], score=2)
    after = check_rating(help_request_id=accepted["id"], from_user_id=owner["id"])

    assert before == {"has_rated": False, "rating": None}
    assert after["has_rated"] is True
    assert after["rating"]["score"] == 2
    assert check_rating(help_request_id=accepted["id"], from_user_id=volunteer["id"])["has_rated"] is False
