"""
The `matching` package ranks open help requests for a volunteer.

Contents
--------
- distance
    `distance_km`: haversine great-circle distance (Earth radius 6371 km)
    `Coordinates`: (latitude, longitude) pair
- scoring
    `score`: bounded 0-100 match score (category, distance band, urgency)
    `rank`: stable best-first ordering of requests by score

Both modules are pure: no database access, no side effects.
"""

from linkme.matching.distance import Coordinates, distance_km
from linkme.matching.scoring import rank, score

__all__ = ["Coordinates", "distance_km", "rank", "score"]
