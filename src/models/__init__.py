"""
Data models module.

Defines pods (swipe candidates) and the user/category/quiz records.
"""

from src.models.candidate import Candidate, Location
from src.models.records import User, Category, Quiz, format_subject

__all__ = [
    "Candidate",
    "Location",
    "User",
    "Category",
    "Quiz",
    "format_subject",
]
