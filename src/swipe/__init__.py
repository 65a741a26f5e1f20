"""
Swipe module.

The card queue, the drag/button decision policy, pre-queue filters and
card formatting.
"""

from src.swipe.queue import (
    Card,
    CardState,
    Decision,
    EmptyQueueError,
    Outcome,
    SwipeError,
    SwipeQueue,
    classify_gesture,
    should_commit,
)
from src.swipe.filters import (
    distance_between,
    distance_to,
    filter_by_distance,
    filter_by_interests,
    has_tag_overlap,
)
from src.swipe.formatting import (
    EMPTY_STATE,
    build_card,
    format_date_time,
    format_distance,
)

__all__ = [
    "Card",
    "CardState",
    "Decision",
    "EmptyQueueError",
    "Outcome",
    "SwipeError",
    "SwipeQueue",
    "classify_gesture",
    "should_commit",
    "distance_between",
    "distance_to",
    "filter_by_distance",
    "filter_by_interests",
    "has_tag_overlap",
    "EMPTY_STATE",
    "build_card",
    "format_date_time",
    "format_distance",
]
