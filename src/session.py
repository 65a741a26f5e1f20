"""
Swipe session - one user's pass through the pod stack.

Lifecycle (one per page load / deck):

    interests -> pods -> tag filter -> distance filter -> SwipeQueue

After loading, drags and button presses consume the queue head and each
resulting Decision is forwarded to the pod server. The queue advances
before the post is attempted; a failed post is logged and lost.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from src.clients.geocoder import ReverseGeocoder
from src.clients.pod_client import PodClient
from src.config import MAX_POD_DISTANCE
from src.swipe.filters import Coordinates, filter_by_distance, filter_by_interests
from src.swipe.formatting import build_card
from src.swipe.queue import Decision, Outcome, SwipeQueue, classify_gesture

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """What happened while building the queue."""

    interests: List[str] = field(default_factory=list)
    fetched: int = 0
    after_tag_filter: int = 0
    queued: int = 0

    def __str__(self) -> str:
        return (
            f"LoadResult(fetched={self.fetched}, "
            f"after_tag_filter={self.after_tag_filter}, queued={self.queued})"
        )


class SwipeSession:
    """
    Wires a SwipeQueue to the pod server.

    Args:
        client: Pod server client (candidate source and decision sink).
        geocoder: Optional reverse geocoder for city names on cards.
    """

    def __init__(self, client: PodClient, geocoder: Optional[ReverseGeocoder] = None):
        self.client = client
        self.geocoder = geocoder
        self.queue = SwipeQueue()
        self.origin: Optional[Coordinates] = None
        self.max_distance: Optional[float] = None
        self.sent: int = 0
        self.dropped: int = 0

    def load(
        self,
        origin: Optional[Coordinates] = None,
        max_distance: Optional[float] = MAX_POD_DISTANCE,
    ) -> LoadResult:
        """
        Fetch interests then pods, filter them and fill the queue.

        Args:
            origin: The user's (lat, lng), if geolocation is available.
            max_distance: Radius in metres; None disables the distance filter.
        """
        self.origin = origin
        self.max_distance = max_distance
        result = LoadResult()

        # Interests must be known before pods can be filtered
        result.interests = self.client.get_user_interests()
        pods = self.client.get_pods()
        result.fetched = len(pods)

        pods = filter_by_interests(pods, result.interests)
        result.after_tag_filter = len(pods)
        if result.fetched and not pods:
            logger.info("No pod matches the user's tags; please choose tags")

        pods = filter_by_distance(pods, origin, max_distance)
        self.queue.enqueue_all(pods)
        result.queued = len(pods)

        logger.info("Loaded swipe deck: %s", result)
        return result

    def current_card(self) -> Optional[dict]:
        """Display payload for the head pod, or None when the stack is empty."""
        candidate = self.queue.current()
        if candidate is None:
            return None
        city = self.geocoder.city_for(candidate.location) if self.geocoder else None
        return build_card(candidate, origin=self.origin, city=city)

    @property
    def remaining(self) -> int:
        return len(self.queue)

    def swipe(self, dx: float, vx: float) -> Optional[Decision]:
        """
        Handle the end of a drag.

        Returns:
            The Decision if the drag committed, None if the card snaps back
            or there is nothing to swipe.
        """
        outcome = classify_gesture(dx, vx)
        if outcome is None:
            return None
        return self.press(outcome)

    def press(self, outcome: Outcome) -> Optional[Decision]:
        """
        Handle a love/nope button. Buttons always commit.

        An empty stack suppresses the action and returns None.
        """
        if self.queue.current() is None:
            logger.debug("Ignoring %s: no pods left", Outcome(outcome).value)
            return None

        decision = self.queue.decide(outcome)
        verb = "right" if decision.accepted else "left"
        logger.info("Swiped %s on: %s", verb, decision.candidate.id)
        self._forward(decision)
        return decision

    def _forward(self, decision: Decision) -> None:
        if self.client.send_decision(decision):
            self.sent += 1
        else:
            self.dropped += 1
