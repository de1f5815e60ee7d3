"""
Volunteer match scoring.

The score is an additive heuristic in ``[0, 100]`` used to rank open help
requests for one volunteer:

- +50 when the request category is one the volunteer offers
- distance band, only when both locations are known:
  < 1 km → +40, < 5 km → +30, < 10 km → +20, otherwise +10;
  +25 flat when either location is unknown
- +10 for urgent requests

It is recomputed on every listing and never persisted.
"""

from typing import Iterable, List, Optional, Tuple

from linkme.constants import URGENCY_URGENT
from linkme.matching.distance import Coordinates, distance_km

CATEGORY_MATCH_POINTS = 50
UNKNOWN_LOCATION_POINTS = 25
URGENCY_POINTS = 10
MAX_SCORE = 100

# (upper bound in km, points); first band whose bound exceeds the distance wins
DISTANCE_BANDS = ((1.0, 40), (5.0, 30), (10.0, 20))
FAR_POINTS = 10


def distance_points(distance: float) -> int:
    for bound, points in DISTANCE_BANDS:
        if distance < bound:
            return points
    return FAR_POINTS


def _request_location(request) -> Optional[Coordinates]:
    lat = getattr(request, "latitude", None)
    lon = getattr(request, "longitude", None)
    if lat is None or lon is None:
        return None
    return Coordinates(lat, lon)


def score(request, volunteer_categories: Iterable[str], volunteer_location: Optional[Coordinates] = None) -> int:
    """
    Compute the match score of ``request`` for a volunteer.

    Parameters
    ----------
    request
        Any object exposing ``category``, ``urgency``, ``latitude`` and
        ``longitude`` (a ``HelpRequest`` row in practice).
    volunteer_categories : Iterable[str]
        Categories the volunteer offers.
    volunteer_location : Coordinates, optional
        Where the volunteer is; ``None`` when unknown.

    Returns
    -------
    int
        Score in ``[0, 100]``.
    """
    total = 0
    if request.category in set(volunteer_categories or ()):
        total += CATEGORY_MATCH_POINTS

    request_location = _request_location(request)
    if request_location is not None and volunteer_location is not None:
        total += distance_points(distance_km(
            request_location.latitude,
            request_location.longitude,
            volunteer_location.latitude,
            volunteer_location.longitude,
        ))
    else:
        total += UNKNOWN_LOCATION_POINTS

    if request.urgency == URGENCY_URGENT:
        total += URGENCY_POINTS

    return min(total, MAX_SCORE)


def rank(requests, volunteer_categories: Iterable[str],
         volunteer_location: Optional[Coordinates] = None) -> List[Tuple[object, int]]:
    """Pair each request with its score, best first. Equal scores keep input order."""
    categories = set(volunteer_categories or ())
    scored = [(r, score(r, categories, volunteer_location)) for r in requests]
    # sorted() is stable, so ties stay in their incoming (newest-first) order
    return sorted(scored, key=lambda pair: pair[1], reverse=True)
