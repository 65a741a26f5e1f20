"""
Storage module.

Handles persistence of users, quiz categories and quizzes via MongoDB or
an in-memory backend.
"""

from src.storage.base import (
    DuplicateUsernameError,
    QuizStore,
    StorageError,
    StoreNotConnectedError,
)
from src.storage.mongo import MongoQuizStore, MockQuizStore

__all__ = [
    "QuizStore",
    "StorageError",
    "StoreNotConnectedError",
    "DuplicateUsernameError",
    "MongoQuizStore",
    "MockQuizStore",
]
