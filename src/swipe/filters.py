"""
Pre-queue filters for pods.

Pods reach the swipe queue only if they share at least one tag with the
user's interests and, when a radius is configured, lie within that
distance of the user.

Distances are great-circle distances in metres on a sphere of radius
6,371 km, the same model web maps use for "distance to".
"""

import logging
import math
from typing import Iterable, List, Optional, Tuple

from src.models.candidate import Candidate

logger = logging.getLogger(__name__)

EARTH_RADIUS_METRES = 6_371_000

Coordinates = Tuple[float, float]


def has_tag_overlap(candidate: Candidate, interests: Iterable[str]) -> bool:
    """True if any of the candidate's tags is one of the user's interests."""
    wanted = set(interests)
    return any(tag in wanted for tag in candidate.tags)


def filter_by_interests(
    candidates: Iterable[Candidate],
    interests: Iterable[str],
) -> List[Candidate]:
    """
    Keep candidates sharing at least one tag with the interests.

    Order is preserved. Tags are compared exactly (case-sensitive).
    """
    interests = set(interests)
    kept = []
    for candidate in candidates:
        if has_tag_overlap(candidate, interests):
            kept.append(candidate)
        else:
            logger.debug("Skipping pod %s: no tag matches user interests", candidate.id)
    return kept


def distance_between(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance in metres between two (lat, lng) pairs."""
    lat1, lng1 = map(math.radians, a)
    lat2, lng2 = map(math.radians, b)
    sin_dlat = math.sin((lat2 - lat1) / 2)
    sin_dlng = math.sin((lng2 - lng1) / 2)
    h = sin_dlat * sin_dlat + math.cos(lat1) * math.cos(lat2) * sin_dlng * sin_dlng
    return EARTH_RADIUS_METRES * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance_to(candidate: Candidate, origin: Coordinates) -> Optional[float]:
    """
    Distance in metres from origin to the candidate.

    Returns None (and logs) when the pod has no usable coordinates.
    """
    if candidate.location is None:
        logger.warning("Pod %s has no location", candidate.id)
        return None
    coords = candidate.location.coordinates()
    if coords is None:
        logger.warning(
            "Invalid latitude or longitude for pod %s: %r",
            candidate.id,
            candidate.location,
        )
        return None
    return distance_between(origin, coords)


def filter_by_distance(
    candidates: Iterable[Candidate],
    origin: Optional[Coordinates],
    max_distance: Optional[float],
) -> List[Candidate]:
    """
    Drop candidates farther than max_distance metres from origin.

    Pods whose coordinates cannot be read are kept; only a computed
    distance above the limit excludes a pod. With no origin or no limit
    the input is returned unchanged (as a list).
    """
    candidates = list(candidates)
    if origin is None or max_distance is None:
        return candidates

    kept = []
    for candidate in candidates:
        distance = distance_to(candidate, origin)
        if distance is not None and distance > max_distance:
            logger.debug(
                "Skipping pod %s: %.0fm away (max %.0fm)",
                candidate.id,
                distance,
                max_distance,
            )
            continue
        kept.append(candidate)
    return kept
