"""
Swipe queue: the ordered stack of pod cards and the decisions made on it.

Only the head card can be decided. Every decision removes the head exactly
once, and nothing is ever pushed back, so the pending stack only shrinks.
The queue performs no I/O; callers forward each Decision to the pod server.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, List, Optional

from src.config import SWIPE_DISTANCE_THRESHOLD, SWIPE_VELOCITY_THRESHOLD
from src.models.candidate import Candidate


class SwipeError(Exception):
    """Base class for swipe queue errors."""


class EmptyQueueError(SwipeError):
    """A decision was attempted with no card at the head of the queue."""

    def __init__(self, outcome: "Outcome"):
        self.outcome = outcome
        super().__init__(f"Cannot {outcome.value} a pod: the swipe queue is empty")


class Outcome(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class CardState(str, Enum):
    PENDING = "pending"
    DECIDED = "decided"


@dataclass(frozen=True)
class Decision:
    """An accept/reject verdict on the card that was at the head."""

    outcome: Outcome
    candidate: Candidate

    @property
    def accepted(self) -> bool:
        return self.outcome is Outcome.ACCEPT


@dataclass
class Card:
    """A candidate wrapped with its lifecycle state inside the queue."""

    candidate: Candidate
    state: CardState = CardState.PENDING


def should_commit(
    dx: float,
    vx: float,
    distance_threshold: float = SWIPE_DISTANCE_THRESHOLD,
    velocity_threshold: float = SWIPE_VELOCITY_THRESHOLD,
) -> bool:
    """
    Decide whether a finished drag becomes a decision.

    Both the horizontal displacement and the horizontal release velocity
    must reach their thresholds; anything less snaps the card back.
    """
    return abs(dx) >= distance_threshold and abs(vx) >= velocity_threshold


def classify_gesture(
    dx: float,
    vx: float,
    distance_threshold: float = SWIPE_DISTANCE_THRESHOLD,
    velocity_threshold: float = SWIPE_VELOCITY_THRESHOLD,
) -> Optional[Outcome]:
    """
    Map a finished drag to an outcome.

    Returns:
        None when the card is kept, otherwise ACCEPT for a right swipe
        and REJECT for a left swipe.
    """
    if not should_commit(dx, vx, distance_threshold, velocity_threshold):
        return None
    return Outcome.ACCEPT if dx > 0 else Outcome.REJECT


class SwipeQueue:
    """
    Ordered queue of pod cards, front-to-back in server arrival order.

    Not thread-safe: all access is expected to come from one logical
    thread of control (one browser page, one CLI session, or a caller
    holding a lock).
    """

    def __init__(self, candidates: Iterable[Candidate] = ()):
        self._pending: Deque[Card] = deque()
        self._decided: List[Decision] = []
        self._decided_cards: List[Card] = []
        self.enqueue_all(candidates)

    def enqueue_all(self, candidates: Iterable[Candidate]) -> None:
        """Append candidates in the given order. Duplicates are kept."""
        self._pending.extend(Card(candidate) for candidate in candidates)

    def current(self) -> Optional[Candidate]:
        """Return the head candidate without removing it, or None if empty."""
        if not self._pending:
            return None
        return self._pending[0].candidate

    def decide(self, outcome: Outcome) -> Decision:
        """
        Consume the head card.

        Args:
            outcome: ACCEPT or REJECT.

        Returns:
            The Decision for the removed head.

        Raises:
            EmptyQueueError: If there is no head. The queue is left untouched.
        """
        outcome = Outcome(outcome)
        if not self._pending:
            raise EmptyQueueError(outcome)

        card = self._pending.popleft()
        card.state = CardState.DECIDED
        decision = Decision(outcome=outcome, candidate=card.candidate)
        self._decided_cards.append(card)
        self._decided.append(decision)
        return decision

    def state_of(self, candidate: Candidate) -> CardState:
        """
        Return the lifecycle state of a candidate in this queue.

        A candidate enqueued more than once is PENDING while any copy is
        still waiting.

        Raises:
            KeyError: If the candidate was never enqueued.
        """
        for card in self._pending:
            if card.candidate == candidate:
                return card.state
        for card in self._decided_cards:
            if card.candidate == candidate:
                return card.state
        raise KeyError(f"Candidate not in queue: {candidate.id}")

    def upcoming(self, limit: Optional[int] = None) -> List[Candidate]:
        """Pending candidates from the head onwards (for rendering the stack)."""
        cards = list(self._pending)
        if limit is not None:
            cards = cards[:limit]
        return [card.candidate for card in cards]

    @property
    def decided(self) -> List[Decision]:
        """Decisions made so far, oldest first."""
        return list(self._decided)

    def is_empty(self) -> bool:
        return not self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def __repr__(self) -> str:
        return f"<SwipeQueue pending={len(self._pending)} decided={len(self._decided)}>"
