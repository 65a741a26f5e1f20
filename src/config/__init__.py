"""
Configuration module.

Handles environment variables, server URLs, database and swipe settings.
"""

from src.config.config import (
    APP_ENV,
    DEBUG,
    POD_SERVER_URL,
    REQUEST_TIMEOUT,
    NOMINATIM_URL,
    GEOCODER_USER_AGENT,
    MONGODB_URI,
    MONGODB_DB_NAME,
    MAX_POD_DISTANCE,
    SWIPE_DISTANCE_THRESHOLD,
    SWIPE_VELOCITY_THRESHOLD,
    DECK_TTL_SECONDS,
    MAX_OPEN_DECKS,
    is_production,
    is_development,
    get_mongodb_uri,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "POD_SERVER_URL",
    "REQUEST_TIMEOUT",
    "NOMINATIM_URL",
    "GEOCODER_USER_AGENT",
    "MONGODB_URI",
    "MONGODB_DB_NAME",
    "MAX_POD_DISTANCE",
    "SWIPE_DISTANCE_THRESHOLD",
    "SWIPE_VELOCITY_THRESHOLD",
    "DECK_TTL_SECONDS",
    "MAX_OPEN_DECKS",
    "is_production",
    "is_development",
    "get_mongodb_uri",
    "validate_config",
    "print_config_summary",
]
