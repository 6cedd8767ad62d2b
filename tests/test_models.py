"""
Tests for the value objects in jobboard.models.
"""

import pytest

from jobboard.models import (
    Answer,
    ApplicationStatus,
    ApplyJobData,
    Job,
    Question,
    QuestionType,
)


class TestQuestion:

    def test_from_dict_reads_wire_keys(self):
        question = Question.from_dict({
            "id": "q1",
            "text": "Pick  all   that apply",
            "type": "multiple-choice",
            "options": ["A", "B"],
            "correctAnswer": ["A"],
            "scoring": 30,
        })

        assert question.id == "q1"
        assert question.text == "Pick all that apply"
        assert question.options == ("A", "B")
        assert question.correct_answer == ("A",)

    def test_to_dict_round_trips_lists(self):
        data = {
            "id": "q1",
            "text": "Pick one",
            "type": "single-choice",
            "options": ["A", "B"],
            "correctAnswer": "A",
            "scoring": 10,
        }
        assert Question.from_dict(data).to_dict() == data

    def test_optional_fields_are_omitted(self):
        d = Question(id="q1", text="Tell us", type="text", scoring=5).to_dict()
        assert "correctAnswer" not in d
        assert "options" not in d
        assert "keywords" not in d

    def test_enum_type_is_stored_as_string(self):
        question = Question(id="q1", text="Rate", type=QuestionType.RATING, scoring=5)
        assert question.type == "rating"

    def test_negative_scoring_rejected(self):
        with pytest.raises(ValueError):
            Question(id="q1", text="Rate", type="rating", scoring=-1)

    def test_keywords_are_cleaned(self):
        question = Question(id="q1", text="t", type="text", scoring=5, keywords=(" python ", "", "sql"))
        assert question.keywords == ("python", "sql")

    def test_is_frozen(self):
        question = Question(id="q1", text="t", type="text", scoring=5)
        with pytest.raises(AttributeError):
            question.scoring = 10


class TestAnswer:

    def test_from_dict_ignores_caller_score(self):
        answer = Answer.from_dict({"questionId": "q1", "answer": "B", "score": 99})
        assert answer.score == 0

    def test_with_score_returns_copy(self):
        answer = Answer(question_id="q1", answer=["A", "B"])
        scored = answer.with_score(20)

        assert scored.score == 20
        assert answer.score == 0
        assert scored.to_dict() == {"questionId": "q1", "answer": ["A", "B"], "score": 20}


class TestJob:

    def test_max_possible_score(self, job_data):
        job = Job.from_dict(job_data)
        assert job.max_possible_score == 135
        assert len(job.questions) == 5

    def test_to_dict_uses_wire_keys(self, job_data):
        d = Job.from_dict(job_data).to_dict()
        assert d["jobName"] == "acme-backend-2024"
        assert d["questions"][1]["correctAnswer"] == ["A", "B", "C"]


class TestApplyJobData:

    def test_normalizes_applicant_fields(self, make_application):
        data = ApplyJobData.from_dict(
            make_application("job-1", applicantName="  Jane   Doe ", applicantEmail=" Jane.Doe@Example.COM ")
        )

        assert data.applicant_name == "Jane Doe"
        assert data.applicant_email == "jane.doe@example.com"
        assert len(data.answers) == 5


def test_status_values():
    assert ApplicationStatus.values() == ["pending", "reviewed", "accepted", "rejected"]
