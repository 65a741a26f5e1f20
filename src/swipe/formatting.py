"""
Card display helpers.

Turns a Candidate into the payload a client renders as one card:
"Jun 5 @ 3:30pm", "(1.2 km away)", joined tags and net votes.
"""

import logging
from datetime import datetime
from typing import Optional

from src.models.candidate import Candidate
from src.swipe.filters import Coordinates, distance_to

logger = logging.getLogger(__name__)


# Shown when the stack runs out of pods
EMPTY_STATE = {
    "message": "No more pods found.",
    "links": [
        {"label": "Adjust my tags", "href": "/home"},
        {"label": "Adjust Pod Proximity", "href": "/settings"},
        {"label": "Host a pod", "href": "/createPod"},
    ],
}


def format_distance(metres: float) -> str:
    """
    >>> format_distance(1234)
    '(1.2 km away)'
    """
    return f"({metres / 1000:.1f} km away)"


def _parse_date(date_string: str) -> Optional[datetime]:
    if not date_string:
        return None
    try:
        return datetime.fromisoformat(date_string.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        # e.g. "June 5, 2024"
        return datetime.strptime(date_string, "%B %d, %Y")
    except ValueError:
        logger.warning("Unparseable pod date: %r", date_string)
        return None


def format_time(time_string: str) -> str:
    """
    Convert "HH:MM" (24h) to "H:MMam/pm".

    Midnight stays "0:MMam"; noon is "12:MMpm".
    """
    if not time_string:
        return ""
    hours_part, _, minutes = time_string.partition(":")
    try:
        hours = int(hours_part)
    except ValueError:
        logger.warning("Unparseable pod time: %r", time_string)
        return time_string

    ampm = "am"
    if hours >= 12:
        ampm = "pm"
        if hours > 12:
            hours -= 12
    return f"{hours}:{minutes}{ampm}"


def format_date_time(date_string: str, time_string: str = "") -> str:
    """
    >>> format_date_time("2024-06-05", "15:30")
    'Jun 5 @ 3:30pm'
    """
    date = _parse_date(date_string)
    day_label = f"{date.strftime('%b')} {date.day}" if date else (date_string or "")
    return f"{day_label} @ {format_time(time_string)}"


def build_card(
    candidate: Candidate,
    origin: Optional[Coordinates] = None,
    city: Optional[str] = None,
) -> dict:
    """
    Build the display payload for one card.

    The distance label is None when there is no user location or the pod's
    coordinates are malformed; the card is still shown.
    """
    distance = None
    if origin is not None:
        metres = distance_to(candidate, origin)
        if metres is not None:
            distance = format_distance(metres)

    return {
        "id": candidate.id,
        "name": candidate.name,
        "image": candidate.image,
        "description": candidate.description,
        "tags": ", ".join(candidate.tags),
        "when": format_date_time(candidate.formatted_date, candidate.time),
        "distance": distance,
        "city": city,
        "score": candidate.score,
    }
