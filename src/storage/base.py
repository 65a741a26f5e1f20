"""
Base storage abstraction for Pod Swipe.

Defines the quiz/user persistence interface every backend implements, and
the errors they raise. Stores are constructed explicitly and handed to
callers; they have an explicit connect()/close() lifecycle and can be used
as context managers.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Tuple

from src.models.records import Category, Quiz, User, format_subject


class StorageError(Exception):
    """A persistence operation failed."""


class StoreNotConnectedError(StorageError):
    """The store was used before connect() or after close()."""


class DuplicateUsernameError(StorageError):
    """A user with this username already exists."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already taken: {username!r}")


class QuizStore(ABC):
    """
    Abstract base class for all storage backends.

    Implementations must provide:
    - connection lifecycle (connect / close / is_connected)
    - find-or-create of categories by normalized name
    - an atomic "claim the next quiz number" step for a category
    - quiz insertion and listing
    - user creation and lookup
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.

        Used for logging and debugging.
        """
        pass

    @abstractmethod
    def connect(self) -> None:
        """Open the underlying connection. Raises StorageError on failure."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        pass

    @abstractmethod
    def find_or_create_category(self, name: str) -> Category:
        """
        Return the category with this name, creating it if missing.

        The name is normalized with format_subject first, so "art HISTORY"
        and "Art History" resolve to the same category.
        """
        pass

    @abstractmethod
    def _claim_quiz_number(self, category_name: str) -> Tuple[Category, int]:
        """
        Atomically increment the category's quiz counter.

        Creates the category if needed. Returns the updated category and
        the counter value before the increment.
        """
        pass

    @abstractmethod
    def _insert_quiz(self, quiz: Quiz) -> Quiz:
        """Persist a quiz and return it with its id set."""
        pass

    @abstractmethod
    def list_quizzes(self, category_name: str) -> List[Quiz]:
        """Quizzes of a category in insertion order (empty if no such category)."""
        pass

    @abstractmethod
    def create_user(self, username: str, password: str) -> User:
        """
        Create a user.

        Raises:
            DuplicateUsernameError: If the username is taken.
        """
        pass

    @abstractmethod
    def get_user(self, username: str) -> Optional[User]:
        pass

    def save_quiz(self, subject: str, questions: Iterable[Any]) -> Quiz:
        """
        Save a quiz under the category derived from subject.

        The title is "<Formatted Subject> - <n>" where n counts the quizzes
        previously saved in that category, so titles never repeat.

        Raises:
            ValueError: If subject is empty.
            StorageError: If the backend fails.
        """
        if not subject or not subject.strip():
            raise ValueError("subject is required and cannot be empty")

        formatted = format_subject(subject)
        category, number = self._claim_quiz_number(formatted)
        quiz = Quiz(
            category_id=category.id,
            title=f"{formatted} - {number}",
            question_objects=list(questions),
        )
        return self._insert_quiz(quiz)

    def __enter__(self) -> "QuizStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __str__(self) -> str:
        return f"QuizStore({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
