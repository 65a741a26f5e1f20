"""
MongoDB storage backend for Pod Swipe.

Implements the QuizStore interface with pymongo.

=============================================================================
COLLECTIONS
=============================================================================

| Collection  | Fields                                    | Indexes            |
|-------------|-------------------------------------------|--------------------|
| users       | username, password                        | username (unique)  |
| categories  | name, numQuizzes                          | name (unique)      |
| quizzes     | category_id, title, questionObjects       | category_id        |

Category names are stored normalized ("Machine Learning"), so the unique
index on name enforces one category per subject.

=============================================================================
"""

import logging
from contextlib import contextmanager
from itertools import count
from typing import Dict, Iterator, List, Optional, Tuple

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from src.config import MONGODB_DB_NAME, get_mongodb_uri
from src.models.records import Category, Quiz, User, format_subject
from src.storage.base import (
    DuplicateUsernameError,
    QuizStore,
    StorageError,
    StoreNotConnectedError,
)

logger = logging.getLogger(__name__)


class MongoQuizStore(QuizStore):
    """
    MongoDB-backed storage implementation.

    Nothing happens at construction time; call connect() (or use the store
    as a context manager) before any other operation.

    Args:
        uri: Connection string. Defaults to config.MONGODB_URI or localhost.
        db_name: Database name. Defaults to config.MONGODB_DB_NAME.
        server_selection_timeout_ms: How long connect() waits for a server.
    """

    def __init__(
        self,
        uri: str = None,
        db_name: str = None,
        server_selection_timeout_ms: int = 5000,
    ):
        self.uri = uri if uri is not None else get_mongodb_uri()
        self.db_name = db_name if db_name is not None else MONGODB_DB_NAME
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[MongoClient] = None
        self._db = None

    @property
    def name(self) -> str:
        return "mongodb"

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def connect(self) -> None:
        if self._client is not None:
            return
        client = MongoClient(
            self.uri,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
        )
        try:
            client.admin.command("ping")
            db = client[self.db_name]
            db.users.create_index([("username", ASCENDING)], unique=True)
            db.categories.create_index([("name", ASCENDING)], unique=True)
            db.quizzes.create_index([("category_id", ASCENDING)])
        except PyMongoError as e:
            client.close()
            raise StorageError(f"Could not connect to MongoDB: {e}") from e

        self._client = client
        self._db = db
        logger.info("MongoDB connected successfully (db=%s)", self.db_name)

    def close(self) -> None:
        if self._client is None:
            return
        self._client.close()
        self._client = None
        self._db = None
        logger.info("MongoDB connection closed")

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def db(self):
        if self._db is None:
            raise StoreNotConnectedError("MongoQuizStore is not connected; call connect() first")
        return self._db

    @contextmanager
    def _errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except StorageError:
            raise
        except PyMongoError as e:
            logger.error("Error %s: %s", action, e)
            raise StorageError(f"Error {action}: {e}") from e

    # =========================================================================
    # Categories and quizzes
    # =========================================================================

    def find_or_create_category(self, name: str) -> Category:
        name = format_subject(name)
        with self._errors("finding or creating category"):
            try:
                doc = self.db.categories.find_one_and_update(
                    {"name": name},
                    {"$setOnInsert": {"name": name, "numQuizzes": 0}},
                    upsert=True,
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                # A concurrent upsert created it first
                doc = self.db.categories.find_one({"name": name})
        return Category.from_document(doc)

    def _claim_quiz_number(self, category_name: str) -> Tuple[Category, int]:
        with self._errors("claiming quiz number"):
            doc = self.db.categories.find_one_and_update(
                {"name": category_name},
                {"$inc": {"numQuizzes": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        category = Category.from_document(doc)
        return category, category.num_quizzes - 1

    def _insert_quiz(self, quiz: Quiz) -> Quiz:
        logger.info("Saving quiz %r", quiz.title)
        with self._errors("saving quiz"):
            result = self.db.quizzes.insert_one(quiz.to_document())
        quiz.id = result.inserted_id
        return quiz

    def list_quizzes(self, category_name: str) -> List[Quiz]:
        name = format_subject(category_name)
        with self._errors("listing quizzes"):
            category = self.db.categories.find_one({"name": name})
            if category is None:
                return []
            docs = self.db.quizzes.find({"category_id": category["_id"]}).sort("_id", ASCENDING)
            return [Quiz.from_document(doc) for doc in docs]

    # =========================================================================
    # Users
    # =========================================================================

    def create_user(self, username: str, password: str) -> User:
        user = User(username=username, password=password)
        with self._errors("creating user"):
            try:
                result = self.db.users.insert_one(user.to_document())
            except DuplicateKeyError as e:
                raise DuplicateUsernameError(username) from e
        user.id = result.inserted_id
        return user

    def get_user(self, username: str) -> Optional[User]:
        with self._errors("fetching user"):
            doc = self.db.users.find_one({"username": username})
        return User.from_document(doc) if doc else None


class MockQuizStore(QuizStore):
    """
    In-memory store for testing and development.

    Use this when MongoDB is not available. Data is stored in memory and
    lost when the process ends. Ids are sequential integers.
    """

    def __init__(self):
        self._connected = False
        self._ids = count(1)
        self._users: Dict[str, User] = {}
        self._categories: Dict[str, Category] = {}
        self._quizzes: List[Quiz] = []

    @property
    def name(self) -> str:
        return "mock"

    def connect(self) -> None:
        self._connected = True

    def close(self) -> None:
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def _check(self) -> None:
        if not self._connected:
            raise StoreNotConnectedError("MockQuizStore is not connected; call connect() first")

    def find_or_create_category(self, name: str) -> Category:
        self._check()
        name = format_subject(name)
        if name not in self._categories:
            self._categories[name] = Category(name=name, id=next(self._ids))
        return self._categories[name]

    def _claim_quiz_number(self, category_name: str) -> Tuple[Category, int]:
        category = self.find_or_create_category(category_name)
        number = category.num_quizzes
        category.num_quizzes += 1
        return category, number

    def _insert_quiz(self, quiz: Quiz) -> Quiz:
        self._check()
        quiz.id = next(self._ids)
        self._quizzes.append(quiz)
        return quiz

    def list_quizzes(self, category_name: str) -> List[Quiz]:
        self._check()
        category = self._categories.get(format_subject(category_name))
        if category is None:
            return []
        return [quiz for quiz in self._quizzes if quiz.category_id == category.id]

    def create_user(self, username: str, password: str) -> User:
        self._check()
        if username in self._users:
            raise DuplicateUsernameError(username)
        user = User(username=username, password=password, id=next(self._ids))
        self._users[username] = user
        return user

    def get_user(self, username: str) -> Optional[User]:
        self._check()
        return self._users.get(username)

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._users.clear()
        self._categories.clear()
        self._quizzes.clear()

    def count(self) -> int:
        """Return number of stored quizzes (for testing)."""
        return len(self._quizzes)
