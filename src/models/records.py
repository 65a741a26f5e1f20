"""
Persistence records for Pod Swipe.

User, Category and Quiz map one-to-one onto MongoDB documents in the
"users", "categories" and "quizzes" collections. Document field names keep
the camelCase the database already uses.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


def format_subject(subject: str) -> str:
    """
    Normalize a subject/category name: each word capitalized, rest lowercase.

    Words are split on single spaces, so repeated spaces survive as-is.

    >>> format_subject("machine LEARNING")
    'Machine Learning'
    """
    return " ".join(word[:1].upper() + word[1:].lower() for word in subject.split(" "))


@dataclass
class User:
    """A registered user. Usernames are unique across the collection."""

    username: str
    password: str
    id: Optional[Any] = None

    def __post_init__(self) -> None:
        errors = []
        if not self.username or not self.username.strip():
            errors.append("username is required and cannot be empty")
        if not self.password:
            errors.append("password is required and cannot be empty")
        if errors:
            raise ValueError(f"User validation failed: {'; '.join(errors)}")

    def to_document(self) -> dict:
        doc = {"username": self.username, "password": self.password}
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "User":
        return cls(username=doc["username"], password=doc["password"], id=doc.get("_id"))

    def __repr__(self) -> str:
        # Never leak the password into logs
        return f"User(id={self.id!r}, username={self.username!r})"


@dataclass
class Category:
    """
    A grouping bucket for quizzes, keyed by normalized subject name.

    Attributes:
        name: Normalized name (see format_subject).
        num_quizzes: How many quizzes have been saved under this category.
        id: Database identifier, None until persisted.
    """

    name: str
    num_quizzes: int = 0
    id: Optional[Any] = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Category validation failed: name is required and cannot be empty")
        if self.num_quizzes < 0:
            raise ValueError(
                f"Category validation failed: num_quizzes cannot be negative, got {self.num_quizzes}"
            )

    def to_document(self) -> dict:
        doc = {"name": self.name, "numQuizzes": self.num_quizzes}
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "Category":
        return cls(
            name=doc["name"],
            num_quizzes=int(doc.get("numQuizzes", 0)),
            id=doc.get("_id"),
        )


@dataclass
class Quiz:
    """
    A saved quiz. Belongs to exactly one Category.

    question_objects is opaque to this layer; whatever the quiz generator
    produced is stored untouched.
    """

    category_id: Any
    title: str
    question_objects: List[Any] = field(default_factory=list)
    id: Optional[Any] = None

    def __post_init__(self) -> None:
        errors = []
        if self.category_id is None:
            errors.append("category_id is required")
        if not self.title or not self.title.strip():
            errors.append("title is required and cannot be empty")
        if not isinstance(self.question_objects, list):
            errors.append("question_objects must be a list")
        if errors:
            raise ValueError(f"Quiz validation failed: {'; '.join(errors)}")

    def to_document(self) -> dict:
        doc = {
            "category_id": self.category_id,
            "title": self.title,
            "questionObjects": self.question_objects,
        }
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "Quiz":
        return cls(
            category_id=doc["category_id"],
            title=doc["title"],
            question_objects=list(doc.get("questionObjects", [])),
            id=doc.get("_id"),
        )

    def to_dict(self) -> dict:
        """JSON-safe representation (ids rendered as strings)."""
        return {
            "id": str(self.id) if self.id is not None else None,
            "category_id": str(self.category_id),
            "title": self.title,
            "questions": self.question_objects,
        }
