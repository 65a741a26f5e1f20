"""
Clients module.

HTTP collaborators: the pod server and the reverse geocoder.
"""

from src.clients.pod_client import PodClient, format_attenders
from src.clients.geocoder import ReverseGeocoder

__all__ = [
    "PodClient",
    "ReverseGeocoder",
    "format_attenders",
]
