"""
Sample Test Data - Externalized Pods and Helpers

Pods are kept in the pod server's wire format so the same records can be
served through mocked HTTP responses and parsed into Candidates.
"""

from unittest.mock import Mock

import requests

from src.models.candidate import Candidate, Location


# Amsterdam Centraal
USER_ORIGIN = (52.3791, 4.9003)

POD_RECORDS = [
    {
        "_id": "pod-1",
        "name": "Sunset Sketching",
        "image": "/img/sketch.png",
        "location": {"lat": "52.3676", "lng": "4.9041"},
        "tags": ["art", "outdoors"],
        "eventDescription": "Bring a pencil.",
        "formattedDate": "2024-06-05",
        "time": "19:30",
        "upvotes": ["u1", "u2", "u3"],
        "downvotes": ["u4"],
    },
    {
        "_id": "pod-2",
        "name": "Jazz Jam",
        "image": "/img/jazz.png",
        "location": {"lat": "52.0907", "lng": "5.1214"},
        "tags": ["music"],
        "eventDescription": "Open stage.",
        "formattedDate": "2024-06-07",
        "time": "21:00",
        "upvotes": [],
        "downvotes": [],
    },
    {
        "_id": "pod-3",
        "name": "Street Food Walk",
        "image": "/img/food.png",
        "location": {"lat": "not-a-number", "lng": "4.9"},
        "tags": ["food", "art"],
        "eventDescription": "Tasting tour.",
        "formattedDate": "2024-06-08",
        "time": "12:15",
        "upvotes": ["u1"],
        "downvotes": [],
    },
]


def make_candidate(pod_id: str = "pod-x", tags=("art",), lat="52.0", lng="5.0", **kwargs) -> Candidate:
    """Build a Candidate with sensible defaults."""
    return Candidate(
        id=pod_id,
        name=kwargs.pop("name", f"Pod {pod_id}"),
        location=Location(lat=lat, lng=lng),
        tags=tuple(tags),
        **kwargs,
    )


def json_response(payload, status_code: int = 200) -> Mock:
    """A requests.Response double returning payload from .json()."""
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response
