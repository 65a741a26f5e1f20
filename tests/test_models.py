"""
Tests for data models: Candidate/Location parsing and the persistence records.
"""

import json

import pytest

from src.models.candidate import Candidate, Location
from src.models.records import Category, Quiz, User, format_subject


class TestLocation:

    @pytest.mark.parametrize("lat,lng,expected", [
        ("52.37", "4.89", (52.37, 4.89)),
        (52.37, 4.89, (52.37, 4.89)),
        ("-33.9", 151, (-33.9, 151.0)),
    ])
    def test_valid_coordinates(self, lat, lng, expected):
        assert Location(lat, lng).coordinates() == expected

    @pytest.mark.parametrize("lat,lng", [
        ("abc", "4.89"),
        ("52.37", ""),
        (None, "4.89"),
        ("nan", "4.89"),
        (True, 4.89),
        ({"x": 1}, 4.89),
    ])
    def test_malformed_coordinates(self, lat, lng):
        assert Location(lat, lng).coordinates() is None

    def test_from_dict_ignores_non_objects(self):
        assert Location.from_dict("52,4") is None
        assert Location.from_dict(None) is None


class TestCandidate:

    def test_from_dict_maps_wire_fields(self, pod_records):
        pod = Candidate.from_dict(pod_records[0])

        assert pod.id == "pod-1"
        assert pod.name == "Sunset Sketching"
        assert pod.description == "Bring a pencil."
        assert pod.formatted_date == "2024-06-05"
        assert pod.tags == ("art", "outdoors")
        assert pod.location == Location("52.3676", "4.9041")

    def test_from_raw_decodes_json_string(self, pods_payload):
        pod = Candidate.from_raw(pods_payload[1])
        assert pod.name == "Jazz Jam"

    def test_from_raw_accepts_dict(self, pod_records):
        assert Candidate.from_raw(pod_records[1]).id == "pod-2"

    def test_from_raw_rejects_bad_json(self):
        with pytest.raises(ValueError):
            Candidate.from_raw("{not json")

    def test_from_dict_requires_id_and_name(self):
        with pytest.raises(ValueError, match="id is required"):
            Candidate.from_dict({"name": "No id"})
        with pytest.raises(ValueError, match="name is required"):
            Candidate.from_dict({"_id": "x"})

    def test_from_dict_rejects_wrong_field_types(self):
        with pytest.raises(ValueError, match="name must be a string"):
            Candidate.from_dict({"_id": "x", "name": 42})
        with pytest.raises(ValueError, match="tags must be a list"):
            Candidate.from_dict({"_id": "x", "name": "X", "tags": 5})
        with pytest.raises(ValueError, match="upvotes must be a list"):
            Candidate.from_dict({"_id": "x", "name": "X", "upvotes": 3})

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(ValueError):
            Candidate.from_dict(["not", "a", "pod"])

    def test_single_string_tag_becomes_tuple(self):
        pod = Candidate.from_dict({"_id": "x", "name": "X", "tags": "art"})
        assert pod.tags == ("art",)

    def test_round_trip_preserves_wire_shape(self, pod_records):
        record = pod_records[0]
        assert Candidate.from_dict(record).to_dict() == record

    def test_to_dict_is_json_serializable(self, candidates):
        for pod in candidates:
            json.dumps({"pod": pod.to_dict()})

    def test_score_is_net_votes(self, candidates):
        assert candidates[0].score == 2
        assert candidates[1].score == 0

    def test_is_immutable(self, candidates):
        with pytest.raises(AttributeError):
            candidates[0].name = "changed"

    def test_str(self, candidates):
        assert str(candidates[0]) == "Sunset Sketching [art, outdoors]"


class TestFormatSubject:

    @pytest.mark.parametrize("raw,expected", [
        ("machine LEARNING", "Machine Learning"),
        ("art history", "Art History"),
        ("MATH", "Math"),
        ("a  b", "A  B"),
        ("", ""),
    ])
    def test_format_subject(self, raw, expected):
        assert format_subject(raw) == expected


class TestRecords:

    def test_user_requires_username_and_password(self):
        with pytest.raises(ValueError):
            User(username="", password="x")
        with pytest.raises(ValueError):
            User(username="ana", password="")

    def test_user_repr_hides_password(self):
        assert "s3cret" not in repr(User(username="ana", password="s3cret"))

    def test_category_document_round_trip(self):
        category = Category(name="Math", num_quizzes=3, id="c1")
        doc = category.to_document()
        assert doc == {"name": "Math", "numQuizzes": 3, "_id": "c1"}
        assert Category.from_document(doc) == category

    def test_category_defaults_to_zero_quizzes(self):
        assert Category.from_document({"name": "Math", "_id": 1}).num_quizzes == 0

    def test_category_rejects_negative_count(self):
        with pytest.raises(ValueError):
            Category(name="Math", num_quizzes=-1)

    def test_quiz_document_uses_database_field_names(self):
        quiz = Quiz(category_id="c1", title="Math - 0", question_objects=[{"q": 1}])
        assert quiz.to_document() == {
            "category_id": "c1",
            "title": "Math - 0",
            "questionObjects": [{"q": 1}],
        }

    def test_quiz_requires_category_and_title(self):
        with pytest.raises(ValueError, match="category_id"):
            Quiz(category_id=None, title="x")
        with pytest.raises(ValueError, match="title"):
            Quiz(category_id="c1", title=" ")

    def test_quiz_to_dict_stringifies_ids(self):
        quiz = Quiz(category_id=7, title="Math - 0", id=9)
        assert quiz.to_dict() == {
            "id": "9",
            "category_id": "7",
            "title": "Math - 0",
            "questions": [],
        }
