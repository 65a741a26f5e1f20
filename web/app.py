"""
Pod Swipe - Web Service

A Flask JSON API serving swipe decks and quiz/user persistence.

Run with: python -m web.app
Or: cd web && python app.py
"""

import sys
import threading
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import requests
from flask import Flask, jsonify, request
from werkzeug.security import generate_password_hash

from src.clients import PodClient, ReverseGeocoder, format_attenders
from src.config import DECK_TTL_SECONDS, MAX_OPEN_DECKS, MAX_POD_DISTANCE
from src.logging_setup import setup_logging
from src.session import SwipeSession
from src.storage import (
    DuplicateUsernameError,
    MongoQuizStore,
    QuizStore,
    StorageError,
)
from src.swipe import EMPTY_STATE, Outcome

app = Flask(__name__)

# Collaborators may be injected through app.config["POD_CLIENT"],
# app.config["GEOCODER"] and app.config["QUIZ_STORE"].


# =============================================================================
# Deck Registry
# =============================================================================

@dataclass
class Deck:
    """An open swipe session plus the lock serializing its mutations."""

    session: SwipeSession
    lock: threading.Lock = field(default_factory=threading.Lock)
    last_used: float = field(default_factory=time.monotonic)


# Open decks by id. _decks_lock guards the dict only; each deck is mutated
# under its own Deck.lock.
_decks: Dict[str, Deck] = {}
_decks_lock = threading.Lock()

_store_lock = threading.Lock()


def _evict_decks(now: float) -> None:
    """Drop idle and surplus decks. Caller holds _decks_lock."""
    stale = {
        deck_id for deck_id, deck in _decks.items()
        if now - deck.last_used > DECK_TTL_SECONDS
    }
    live = sorted(
        (deck_id for deck_id in _decks if deck_id not in stale),
        key=lambda deck_id: _decks[deck_id].last_used,
    )
    surplus = len(live) - MAX_OPEN_DECKS
    if surplus > 0:
        stale.update(live[:surplus])
    for deck_id in stale:
        del _decks[deck_id]
    if stale:
        app.logger.info("Evicted %d deck(s)", len(stale))


def register_deck(session: SwipeSession) -> str:
    deck_id = uuid.uuid4().hex
    with _decks_lock:
        _decks[deck_id] = Deck(session)
        _evict_decks(time.monotonic())
    return deck_id


def lookup_deck(deck_id: str) -> Optional[Deck]:
    """Return an open deck and mark it used, or None if unknown or expired."""
    now = time.monotonic()
    with _decks_lock:
        deck = _decks.get(deck_id)
        if deck is None:
            return None
        if now - deck.last_used > DECK_TTL_SECONDS:
            del _decks[deck_id]
            return None
        deck.last_used = now
        return deck


def get_pod_client() -> PodClient:
    """
    Get a pod server client for the current request.

    Without an injected client, a fresh one is built per request carrying
    the caller's cookies, so the pod server sees the logged-in user.
    """
    client = app.config.get("POD_CLIENT")
    if client is not None:
        return client
    http = requests.Session()
    http.cookies.update(request.cookies)
    return PodClient(session=http)


def get_geocoder() -> Optional[ReverseGeocoder]:
    return app.config.get("GEOCODER")


def get_store() -> QuizStore:
    """Get the connected quiz store, connecting on first use."""
    with _store_lock:
        store = app.config.get("QUIZ_STORE")
        if store is None:
            store = MongoQuizStore()
            app.config["QUIZ_STORE"] = store
        if not store.is_connected:
            store.connect()
        return store


def shutdown_store() -> None:
    """Close the quiz store if one was opened."""
    store = app.config.get("QUIZ_STORE")
    if store is not None:
        store.close()


def _json_body() -> Optional[Dict[str, Any]]:
    """The request's JSON object; {} when absent, None when not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _bad_request(message: str):
    return jsonify({"error": message}), 400


def _parse_float(data: dict, key: str) -> Optional[float]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _deck_payload(deck_id: str, session: SwipeSession) -> dict:
    card = session.current_card()
    payload = {
        "deck_id": deck_id,
        "remaining": session.remaining,
        "card": card,
    }
    if card is None:
        payload["empty"] = EMPTY_STATE
    return payload


def _unknown_deck(deck_id: str):
    return jsonify({"error": f"Unknown deck: {deck_id}"}), 404


# =============================================================================
# Deck API Endpoints
# =============================================================================

@app.route("/healthz")
def healthz():
    return jsonify({"status": "ok"})


@app.route("/api/decks", methods=["POST"])
def api_create_deck():
    """Build a new swipe deck from the pod server."""
    data = _json_body()
    if data is None:
        return _bad_request("Request body must be a JSON object")

    try:
        lat = _parse_float(data, "lat")
        lng = _parse_float(data, "lng")
        max_distance = _parse_float(data, "max_distance")
    except (TypeError, ValueError):
        return _bad_request("lat, lng and max_distance must be numbers")

    if (lat is None) != (lng is None):
        return _bad_request("lat and lng must be given together")

    origin = (lat, lng) if lat is not None else None
    if max_distance is None:
        max_distance = MAX_POD_DISTANCE

    session = SwipeSession(get_pod_client(), geocoder=get_geocoder())
    result = session.load(origin=origin, max_distance=max_distance)

    deck_id = register_deck(session)
    payload = _deck_payload(deck_id, session)
    payload["fetched"] = result.fetched
    return jsonify(payload), 201


@app.route("/api/decks/<deck_id>")
def api_get_deck(deck_id):
    """Current head card of a deck."""
    deck = lookup_deck(deck_id)
    if deck is None:
        return _unknown_deck(deck_id)
    with deck.lock:
        payload = _deck_payload(deck_id, deck.session)
    return jsonify(payload)


@app.route("/api/decks/<deck_id>", methods=["DELETE"])
def api_close_deck(deck_id):
    """Discard a deck (page unload)."""
    with _decks_lock:
        deck = _decks.pop(deck_id, None)
    if deck is None:
        return _unknown_deck(deck_id)
    with deck.lock:
        decided = len(deck.session.queue.decided)
    return jsonify({"success": True, "decided": decided})


def _decision_response(deck_id: str, deck: Deck, decide):
    with deck.lock:
        decision = decide(deck.session)
        payload = _deck_payload(deck_id, deck.session)

    payload["committed"] = decision is not None
    payload["outcome"] = decision.outcome.value if decision else None
    return jsonify(payload)


@app.route("/api/decks/<deck_id>/swipe", methods=["POST"])
def api_swipe(deck_id):
    """Finish a drag: {"dx": <px>, "vx": <px/ms>}."""
    data = _json_body()
    if data is None:
        return _bad_request("Request body must be a JSON object")
    try:
        dx = _parse_float(data, "dx")
        vx = _parse_float(data, "vx")
    except (TypeError, ValueError):
        dx = vx = None
    if dx is None or vx is None:
        return _bad_request("dx and vx are required numbers")

    deck = lookup_deck(deck_id)
    if deck is None:
        return _unknown_deck(deck_id)
    return _decision_response(deck_id, deck, lambda session: session.swipe(dx, vx))


def _press(deck_id: str, outcome: Outcome):
    deck = lookup_deck(deck_id)
    if deck is None:
        return _unknown_deck(deck_id)
    return _decision_response(deck_id, deck, lambda session: session.press(outcome))


@app.route("/api/decks/<deck_id>/love", methods=["POST"])
def api_love(deck_id):
    return _press(deck_id, Outcome.ACCEPT)


@app.route("/api/decks/<deck_id>/nope", methods=["POST"])
def api_nope(deck_id):
    return _press(deck_id, Outcome.REJECT)


@app.route("/api/pods/<pod_id>/attenders")
def api_attenders(pod_id):
    """Who is going to a pod."""
    attenders = get_pod_client().get_attenders(pod_id)
    return jsonify({
        "attenders": attenders,
        "text": format_attenders(attenders),
    })


# =============================================================================
# Persistence API Endpoints
# =============================================================================

@app.route("/api/users", methods=["POST"])
def api_create_user():
    """Register a user: {"username", "password"}."""
    data = _json_body()
    if data is None:
        return _bad_request("Request body must be a JSON object")
    username = data.get("username") or ""
    password = data.get("password") or ""

    if not isinstance(username, str) or not isinstance(password, str):
        return _bad_request("username and password must be strings")
    username = username.strip()
    if not username or not password:
        return _bad_request("username and password are required")

    try:
        user = get_store().create_user(username, generate_password_hash(password))
    except DuplicateUsernameError as e:
        return jsonify({"error": str(e)}), 409
    except StorageError as e:
        app.logger.error("Error creating user: %s", e)
        return jsonify({"error": "Storage unavailable"}), 503

    return jsonify({"success": True, "id": str(user.id), "username": user.username}), 201


@app.route("/api/quizzes", methods=["POST"])
def api_save_quiz():
    """Save generated questions: {"subject", "questions": [...]}."""
    data = _json_body()
    if data is None:
        return _bad_request("Request body must be a JSON object")
    subject = data.get("subject") or ""
    questions = data.get("questions")

    if not isinstance(subject, str) or not subject.strip():
        return _bad_request("subject is required")
    if not isinstance(questions, list):
        return _bad_request("questions must be a list")

    try:
        quiz = get_store().save_quiz(subject, questions)
    except StorageError as e:
        app.logger.error("Error saving quiz: %s", e)
        return jsonify({"error": "Storage unavailable"}), 503

    return jsonify({"success": True, "quiz": quiz.to_dict()}), 201


@app.route("/api/categories/<name>/quizzes")
def api_list_quizzes(name):
    """All quizzes saved under a category."""
    try:
        quizzes = get_store().list_quizzes(name)
    except StorageError as e:
        app.logger.error("Error listing quizzes: %s", e)
        return jsonify({"error": "Storage unavailable"}), 503

    return jsonify({
        "success": True,
        "count": len(quizzes),
        "quizzes": [quiz.to_dict() for quiz in quizzes],
    })


if __name__ == "__main__":
    setup_logging()
    print("=" * 50)
    print("Pod Swipe Service")
    print("=" * 50)
    print("Listening on http://localhost:5001")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    try:
        app.run(debug=True, port=5001)
    finally:
        shutdown_store()
