"""
Pod server client.

Talks to the pod server's JSON endpoints:

    GET  /getUserInterests      -> ["art", "music", ...]
    GET  /getPods               -> ["{...pod json...}", ...]   (each pod JSON-encoded)
    POST /savePod   {"pod": ..} -> decision sink for likes
    POST /nopePod   {"pod": ..} -> decision sink for passes
    GET  /pod/<id>/attenders    -> [{"name": ...}, ...]

Every call is best-effort: network and decoding failures are logged and
turned into empty results, never raised. Decision posts are fire-and-forget.
"""

import logging
from typing import Any, List, Optional

import requests

from src.config import POD_SERVER_URL, REQUEST_TIMEOUT
from src.models.candidate import Candidate
from src.swipe.queue import Decision, Outcome

logger = logging.getLogger(__name__)


class PodClient:
    """
    HTTP client for the pod server.

    Args:
        base_url: Server root. Defaults to config.POD_SERVER_URL.
        timeout: Per-request timeout in seconds. Defaults to config.REQUEST_TIMEOUT.
        session: Optional requests.Session (cookies carry the user login).
    """

    name = "pod-server"

    SINK_PATHS = {
        Outcome.ACCEPT: "/savePod",
        Outcome.REJECT: "/nopePod",
    }

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        base_url = base_url if base_url is not None else POD_SERVER_URL
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _get_json(self, path: str) -> Optional[Any]:
        try:
            response = self.session.get(self._url(path), timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error("[%s] Error fetching %s: %s", self.name, path, e)
            return None
        except ValueError as e:
            logger.error("[%s] Invalid JSON from %s: %s", self.name, path, e)
            return None

    # =========================================================================
    # Candidate source
    # =========================================================================

    def get_user_interests(self) -> List[str]:
        """Fetch the logged-in user's interest tags (empty list on failure)."""
        data = self._get_json("/getUserInterests")
        if not isinstance(data, list):
            if data is not None:
                logger.error("[%s] Unexpected interests payload: %r", self.name, data)
            return []
        interests = [tag for tag in data if isinstance(tag, str)]
        logger.info("[%s] User tags: %s", self.name, interests)
        return interests

    def get_pods(self) -> List[Candidate]:
        """
        Fetch candidate pods in server order.

        Elements that are not valid pods are logged and skipped.
        """
        data = self._get_json("/getPods")
        if not isinstance(data, list):
            if data is not None:
                logger.error("[%s] Unexpected pods payload: %r", self.name, data)
            return []

        pods: List[Candidate] = []
        for raw in data:
            try:
                pods.append(Candidate.from_raw(raw))
            except (TypeError, ValueError) as e:
                logger.warning("[%s] Skipping invalid pod: %s", self.name, e)

        logger.info("[%s] Fetched %d pods", self.name, len(pods))
        return pods

    def get_attenders(self, pod_id: str) -> List[dict]:
        """Fetch the attender records of one pod."""
        data = self._get_json(f"/pod/{pod_id}/attenders")
        if not isinstance(data, list):
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    # =========================================================================
    # Decision sink
    # =========================================================================

    def save_pod(self, pod: Candidate) -> bool:
        """Report a like. Returns False if the post failed (already logged)."""
        return self._post_pod(self.SINK_PATHS[Outcome.ACCEPT], pod)

    def nope_pod(self, pod: Candidate) -> bool:
        """Report a pass. Returns False if the post failed (already logged)."""
        return self._post_pod(self.SINK_PATHS[Outcome.REJECT], pod)

    def send_decision(self, decision: Decision) -> bool:
        """Forward a decision to the matching sink endpoint."""
        if decision.accepted:
            return self.save_pod(decision.candidate)
        return self.nope_pod(decision.candidate)

    def _post_pod(self, path: str, pod: Candidate) -> bool:
        try:
            response = self.session.post(
                self._url(path),
                json={"pod": pod.to_dict()},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            # No retry: the queue has already moved on
            logger.error("[%s] Dropped %s for pod %s: %s", self.name, path, pod.id, e)
            return False

    def __repr__(self) -> str:
        return f"<PodClient base_url={self.base_url!r}>"


def format_attenders(attenders: List[dict]) -> str:
    """
    >>> format_attenders([{"name": "Ana"}, {"name": "Bo"}])
    'Attenders: Ana, Bo'
    """
    return f"Attenders: {', '.join(str(a.get('name', '')) for a in attenders)}"
