"""
Core data model for Pod Swipe.

Defines the Candidate dataclass representing a single pod (a discoverable
event) as served by the pod server, plus its Location.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple
import json
import math


@dataclass(frozen=True)
class Location:
    """
    Geographic location of a pod, kept exactly as received.

    The pod server stores coordinates as strings, but numbers are accepted
    too. Use coordinates() to get a validated float pair.
    """

    lat: Any = None
    lng: Any = None

    def coordinates(self) -> Optional[Tuple[float, float]]:
        """
        Return (lat, lng) as floats, or None if either value is malformed.

        Booleans, empty strings, non-numeric strings and NaN are all malformed.
        """
        try:
            if isinstance(self.lat, bool) or isinstance(self.lng, bool):
                return None
            lat = float(self.lat)
            lng = float(self.lng)
        except (TypeError, ValueError):
            return None
        if math.isnan(lat) or math.isnan(lng):
            return None
        return (lat, lng)

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["Location"]:
        if not isinstance(data, dict):
            return None
        return cls(lat=data.get("lat"), lng=data.get("lng"))


def _as_tuple(value: Any, field_name: str) -> Tuple[Any, ...]:
    """Convert a list field of a pod record, rejecting scalars and objects."""
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{field_name} must be a list, got {type(value).__name__}")
    return tuple(value)


@dataclass(frozen=True)
class Candidate:
    """
    A pod shown as one card in the swipe stack.

    Candidates are immutable once fetched; the queue owns them for their
    lifetime in the UI.

    Attributes:
        id: Server-side identifier (the document's "_id").
        name: Display name of the pod.
        image: Image URL or path.
        location: Where the pod takes place (may be None).
        tags: Free-text labels matched against user interests.
        description: Free-text event description.
        formatted_date: Scheduled date as sent by the server (ISO-ish string).
        time: Scheduled time of day, "HH:MM" 24h, may be empty.
        upvotes: Raw upvote entries (only their count is displayed).
        downvotes: Raw downvote entries.
    """

    id: str
    name: str
    image: str = ""
    location: Optional[Location] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
    description: str = ""
    formatted_date: str = ""
    time: str = ""
    upvotes: Tuple[Any, ...] = field(default_factory=tuple)
    downvotes: Tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate that required fields are present.

        Raises:
            ValueError: If validation fails.
        """
        errors = []

        if not self.id or not str(self.id).strip():
            errors.append("id is required and cannot be empty")

        if not isinstance(self.name, str):
            errors.append(f"name must be a string, got {type(self.name).__name__}")
        elif not self.name.strip():
            errors.append("name is required and cannot be empty")

        if not isinstance(self.tags, (list, tuple)) or not all(isinstance(tag, str) for tag in self.tags):
            errors.append("tags must all be strings")

        if errors:
            raise ValueError(f"Candidate validation failed: {'; '.join(errors)}")

    @property
    def score(self) -> int:
        """Net votes (upvotes minus downvotes)."""
        return len(self.upvotes) - len(self.downvotes)

    def to_dict(self) -> dict:
        """
        Convert back to the pod server's wire format.

        The decision sink receives this payload, so field names match what
        getPods returned.
        """
        return {
            "_id": self.id,
            "name": self.name,
            "image": self.image,
            "location": self.location.to_dict() if self.location else None,
            "tags": list(self.tags),
            "eventDescription": self.description,
            "formattedDate": self.formatted_date,
            "time": self.time,
            "upvotes": list(self.upvotes),
            "downvotes": list(self.downvotes),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Candidate":
        """
        Create a Candidate from a decoded pod record.

        Args:
            data: Pod record as sent by the pod server.

        Returns:
            New Candidate instance.

        Raises:
            ValueError: If the record is missing required fields.
        """
        if not isinstance(data, dict):
            raise ValueError(f"pod record must be an object, got {type(data).__name__}")

        tags = data.get("tags") or []
        if isinstance(tags, str):
            tags = [tags]

        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            name=data.get("name") or "",
            image=data.get("image") or "",
            location=Location.from_dict(data.get("location")),
            tags=_as_tuple(tags, "tags"),
            description=data.get("eventDescription") or "",
            formatted_date=data.get("formattedDate") or "",
            time=data.get("time") or "",
            upvotes=_as_tuple(data.get("upvotes") or (), "upvotes"),
            downvotes=_as_tuple(data.get("downvotes") or (), "downvotes"),
        )

    @classmethod
    def from_raw(cls, raw: Any) -> "Candidate":
        """
        Create a Candidate from one element of the getPods response.

        The server JSON-encodes each pod individually inside the array, so
        elements are usually strings; plain objects are accepted as well.

        Raises:
            ValueError: If the element is not valid JSON or not a valid pod.
        """
        if isinstance(raw, (str, bytes)):
            raw = json.loads(raw)
        return cls.from_dict(raw)

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"{self.name} [{', '.join(self.tags)}]"
