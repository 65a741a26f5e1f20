#!/usr/bin/env python3
"""
Pod Swipe - command-line entry point.

Swipe through nearby pods in the terminal, or save generated quizzes to
MongoDB.

Usage:
    python main.py swipe                            # Swipe with no location
    python main.py swipe --lat 52.37 --lng 4.89     # Distance-aware deck
    python main.py swipe --max-distance 5000        # Only pods within 5 km
    python main.py save-quiz --subject "art history" --questions quiz.json
    python main.py --show-config

In a swipe session each card is followed by a prompt:
    l          love (save the pod)
    n          nope (pass)
    DX,VX      finish a drag with displacement DX and velocity VX
    q          quit
"""

import argparse
import json
import logging
import sys
from typing import Callable, Optional

import requests

from src.clients import PodClient, ReverseGeocoder
from src.config import (
    MAX_POD_DISTANCE,
    POD_SERVER_URL,
    print_config_summary,
    validate_config,
)
from src.logging_setup import setup_logging
from src.session import SwipeSession
from src.storage import MockQuizStore, MongoQuizStore, StorageError
from src.swipe import EMPTY_STATE, Outcome

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="pod-swipe",
        description="Swipe through nearby pods and manage saved quizzes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s swipe                                  Swipe every pod matching your tags
  %(prog)s swipe --lat 52.37 --lng 4.89 -d 5000   Only pods within 5 km
  %(prog)s save-quiz -s "art history" -f quiz.json
  %(prog)s --show-config                          Show configuration and exit
        """,
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress and debug info",
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    # swipe
    swipe = commands.add_parser("swipe", help="Swipe through pods interactively")
    swipe.add_argument("--server", default=None, metavar="URL",
                       help=f"Pod server URL (default: {POD_SERVER_URL})")
    swipe.add_argument("--lat", type=float, default=None, help="Your latitude")
    swipe.add_argument("--lng", type=float, default=None, help="Your longitude")
    swipe.add_argument(
        "--max-distance", "-d",
        type=float,
        default=MAX_POD_DISTANCE,
        metavar="METRES",
        help="Hide pods farther than this (default: MAX_POD_DISTANCE or off)",
    )
    swipe.add_argument(
        "--cookie",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Session cookie for the pod server (repeatable)",
    )
    swipe.add_argument("--no-geocode", action="store_true",
                       help="Do not look up city names")

    # save-quiz
    save = commands.add_parser("save-quiz", help="Save a quiz from a JSON file")
    save.add_argument("--subject", "-s", required=True, help="Quiz subject")
    save.add_argument("--questions", "-f", required=True, metavar="FILE",
                      help="JSON file holding a list of question objects")
    save.add_argument("--mock", action="store_true",
                      help="Use the in-memory store instead of MongoDB")

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("Pod Swipe Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def print_card(card: dict, remaining: int) -> None:
    """Render one card as text."""
    print("-" * 60)
    print(f"{card['name']}  ({remaining} left)")
    place = " ".join(part for part in (card.get("city"), card.get("distance")) if part)
    if place:
        print(f"  {place}")
    print(f"  {card['when']}")
    if card.get("description"):
        print(f"  {card['description']}")
    print(f"  Tags: {card['tags']}")


def print_empty_state() -> None:
    print("-" * 60)
    print(EMPTY_STATE["message"])
    for link in EMPTY_STATE["links"]:
        print(f"  {link['label']}: {link['href']}")


def parse_command(line: str):
    """
    Parse one prompt answer.

    Returns:
        ("quit", None), ("press", Outcome), ("drag", (dx, vx)) or (None, None).
    """
    line = line.strip().lower()
    if line in ("q", "quit", "exit"):
        return "quit", None
    if line in ("l", "love", "like"):
        return "press", Outcome.ACCEPT
    if line in ("n", "nope", "pass"):
        return "press", Outcome.REJECT
    if "," in line:
        dx, _, vx = line.partition(",")
        try:
            return "drag", (float(dx), float(vx))
        except ValueError:
            return None, None
    return None, None


def run_swipe(
    session: SwipeSession,
    input_func: Callable[[str], str] = input,
) -> int:
    """Interactive loop over a loaded session. Returns the number of decisions."""
    decisions = 0
    while True:
        card = session.current_card()
        if card is None:
            print_empty_state()
            return decisions

        print_card(card, session.remaining)
        try:
            answer = input_func("[l]ove / [n]ope / dx,vx / [q]uit > ")
        except EOFError:
            return decisions

        action, value = parse_command(answer)
        if action == "quit":
            return decisions
        if action == "press":
            decision = session.press(value)
        elif action == "drag":
            decision = session.swipe(*value)
            if decision is None:
                print("  (kept)")
        else:
            print("  Unknown command")
            continue

        if decision is not None:
            decisions += 1
            print(f"  -> {decision.outcome.value}")


def cmd_swipe(args, input_func: Callable[[str], str] = input) -> int:
    if (args.lat is None) != (args.lng is None):
        print("❌ --lat and --lng must be given together")
        return 1

    http = requests.Session()
    for cookie in args.cookie:
        name, sep, value = cookie.partition("=")
        if not sep:
            print(f"❌ Invalid cookie (expected NAME=VALUE): {cookie}")
            return 1
        http.cookies.set(name, value)

    client = PodClient(base_url=args.server, session=http)
    geocoder = None if args.no_geocode else ReverseGeocoder()
    session = SwipeSession(client, geocoder=geocoder)

    origin = (args.lat, args.lng) if args.lat is not None else None
    result = session.load(origin=origin, max_distance=args.max_distance)
    print(f"Loaded {result.queued} of {result.fetched} pods")

    decisions = run_swipe(session, input_func)
    print(f"\nDecisions: {decisions} (sent {session.sent}, dropped {session.dropped})")
    return 0


def cmd_save_quiz(args) -> int:
    try:
        with open(args.questions) as f:
            questions = json.load(f)
    except (OSError, ValueError) as e:
        print(f"❌ Could not read questions: {e}")
        return 1

    if not isinstance(questions, list):
        print("❌ Questions file must contain a JSON list")
        return 1

    store = MockQuizStore() if args.mock else MongoQuizStore()
    try:
        with store:
            quiz = store.save_quiz(args.subject, questions)
    except (StorageError, ValueError) as e:
        print(f"❌ Could not save quiz: {e}")
        return 1

    print(f"✓ Saved quiz {quiz.title!r} ({len(quiz.question_objects)} questions)")
    return 0


def main(argv: list = None, input_func: Optional[Callable[[str], str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).
        input_func: Prompt reader for the swipe loop (default: input).

    Returns:
        Exit code (0 = success, 1 = error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(debug=args.verbose)

    if args.show_config:
        show_config()
        return 0

    if args.command is None:
        parser.print_help()
        return 1

    errors = validate_config()
    if errors:
        for error in errors:
            print(f"❌ {error}")
        return 1

    try:
        if args.command == "swipe":
            return cmd_swipe(args, input_func or input)
        return cmd_save_quiz(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
