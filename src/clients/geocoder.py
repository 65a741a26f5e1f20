"""
Reverse geocoding via Nominatim (OpenStreetMap).

Used only to put a place name on pod cards; any failure just leaves the
card without a city.
"""

import logging
from functools import lru_cache
from typing import Optional

import requests

from src.config import GEOCODER_USER_AGENT, NOMINATIM_URL, REQUEST_TIMEOUT
from src.models.candidate import Location

logger = logging.getLogger(__name__)

# Most specific first
PLACE_KEYS = ("city", "town", "village", "hamlet")


class ReverseGeocoder:
    """
    Resolve coordinates to a settlement name.

    Lookups are memoized per coordinate pair, keeping at most cache_size
    entries (least recently used are evicted first).
    """

    def __init__(
        self,
        url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
        cache_size: int = 1024,
    ):
        self.url = url if url is not None else NOMINATIM_URL
        self.user_agent = user_agent if user_agent is not None else GEOCODER_USER_AGENT
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT
        self._cached_lookup = lru_cache(maxsize=cache_size)(self._lookup)

    def city_for(self, location: Optional[Location]) -> Optional[str]:
        """
        Return the city/town/village/hamlet name for a pod location.

        Returns None for malformed coordinates or when the lookup fails.
        """
        if location is None:
            logger.warning("Invalid location object: %r", location)
            return None
        coords = location.coordinates()
        if coords is None:
            logger.warning("Invalid latitude or longitude: %r", location)
            return None
        return self._cached_lookup(*coords)

    def _lookup(self, lat: float, lng: float) -> Optional[str]:
        try:
            response = requests.get(
                self.url,
                params={"format": "jsonv2", "lat": lat, "lon": lng},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error("Reverse geocoding failed for %s,%s: %s", lat, lng, e)
            return None
        except ValueError as e:
            logger.error("Unexpected geocoder response for %s,%s: %s", lat, lng, e)
            return None

        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, dict):
            logger.error("Geocoder response for %s,%s has no address: %r", lat, lng, data)
            return None

        for key in PLACE_KEYS:
            place = address.get(key)
            if place and isinstance(place, str):
                return place
        return None
