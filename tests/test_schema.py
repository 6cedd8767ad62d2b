"""
Tests for payload validation.
"""

import json
import time

import pytest
from jobboard.schema import (
    validate_application,
    validate_job,
    validate_question,
    validate_status_update,
)


class TestValidateJob:
    """Test job validation."""

    def test_valid_job(self, job_data):
        """Valid job should have no errors."""
        assert validate_job(job_data) == []

    def test_missing_required_field(self, job_data):
        """Missing required field should error."""
        del job_data["title"]
        errors = validate_job(job_data)
        assert "Job title is required" in errors

    def test_field_too_long(self, job_data):
        job_data["location"] = "x" * 101
        errors = validate_job(job_data)
        assert any("location" in err.lower() and "100" in err for err in errors)

    def test_empty_questions(self, job_data):
        job_data["questions"] = []
        assert "At least one question is required" in validate_job(job_data)

    def test_duplicate_question_ids(self, job_data):
        job_data["questions"][1]["id"] = "q1"
        errors = validate_job(job_data)
        assert any("duplicate" in err.lower() for err in errors)

    def test_partial_update(self):
        """Partial updates only check the fields that are present."""
        assert validate_job({"title": "Staff Engineer"}, partial=True) == []
        assert validate_job({"title": ""}, partial=True) == ["Job title cannot be empty"]

    def test_not_an_object(self):
        assert validate_job(["nope"]) == ["Job must be an object"]


class TestValidateQuestion:
    """Test question validation."""

    def test_choice_needs_two_options(self):
        errors = validate_question({
            "id": "q1", "text": "Pick", "type": "single-choice", "options": ["A"], "scoring": 5,
        })
        assert any("at least 2 options" in err for err in errors)

    def test_choice_needs_options(self):
        errors = validate_question({"id": "q1", "text": "Pick", "type": "multiple-choice", "scoring": 5})
        assert any("Options are required" in err for err in errors)

    def test_correct_answer_must_be_an_option(self):
        errors = validate_question({
            "id": "q1", "text": "Pick", "type": "multiple-choice",
            "options": ["A", "B"], "correctAnswer": ["A", "Z"], "scoring": 5,
        })
        assert any("among the options" in err and "Z" in err for err in errors)

    def test_correct_answer_shape(self):
        errors = validate_question({
            "id": "q1", "text": "Pick", "type": "multiple-choice",
            "options": ["A", "B"], "correctAnswer": "A", "scoring": 5,
        })
        assert any("list of strings" in err for err in errors)

    def test_boolean_correct_answer_shape(self):
        errors = validate_question({
            "id": "q1", "text": "Eligible?", "type": "boolean", "correctAnswer": "yes", "scoring": 5,
        })
        assert any("boolean" in err for err in errors)

    @pytest.mark.parametrize("scoring,message", [
        (-1, "positive"),
        (101, "cannot exceed 100"),
        ("10", "must be a number"),
        (None, "scoring is required"),
    ])
    def test_scoring_bounds(self, scoring, message):
        data = {"id": "q1", "text": "Rate", "type": "rating"}
        if scoring is not None:
            data["scoring"] = scoring
        errors = validate_question(data)
        assert any(message in err for err in errors)

    def test_unknown_type(self):
        errors = validate_question({"id": "q1", "text": "Upload", "type": "file-upload", "scoring": 5})
        assert any("type must be one of" in err for err in errors)

    def test_question_text_too_long(self):
        errors = validate_question({"id": "q1", "text": "x" * 501, "type": "text", "scoring": 5})
        assert any("500" in err for err in errors)

    def test_keywords_only_on_text(self):
        errors = validate_question({
            "id": "q1", "text": "Rate", "type": "rating", "scoring": 5, "keywords": ["sql"],
        })
        assert any("Keywords" in err for err in errors)

    def test_position_prefix(self):
        errors = validate_question({"text": "Rate", "type": "rating", "scoring": 5}, index=2)
        assert errors == ["Question 3: Question ID is required"]


class TestValidateApplication:
    """Test apply-for-job validation."""

    def test_valid_application(self, make_application):
        assert validate_application(make_application("job-1")) == []

    def test_invalid_email(self, make_application):
        errors = validate_application(make_application("job-1", applicantEmail="not-an-email"))
        assert errors == ["Please enter a valid email address"]

    def test_long_invalid_email_is_rejected_quickly(self, make_application):
        started = time.monotonic()
        errors = validate_application(make_application("job-1", applicantEmail="a" * 5000 + "!"))

        assert errors == ["Please enter a valid email address"]
        assert time.monotonic() - started < 1.0

    @pytest.mark.parametrize("email", ["jane.doe@example.co.uk", "j-d+tag@mail.example.io"])
    def test_valid_email_forms(self, make_application, email):
        assert validate_application(make_application("job-1", applicantEmail=email)) == []

    def test_duplicate_answers(self, make_application):
        answers = [{"questionId": "q1", "answer": "B"}, {"questionId": "q1", "answer": "B"}]
        errors = validate_application(make_application("job-1", answers=answers))
        assert errors == ["Answer 2: Duplicate answer for question 'q1'"]

    def test_huge_integer_answer(self, make_application):
        answers = [{"questionId": "q5", "answer": json.loads("1" + "0" * 400)}]
        assert validate_application(make_application("job-1", answers=answers)) == []

    def test_name_too_long(self, make_application):
        errors = validate_application(make_application("job-1", applicantName="x" * 101))
        assert any("100" in err for err in errors)

    def test_no_answers(self, make_application):
        errors = validate_application(make_application("job-1", answers=[]))
        assert "At least one answer is required" in errors

    def test_answer_value_types(self, make_application):
        answers = [
            {"questionId": "q1", "answer": {"nested": True}},
            {"questionId": "q2", "answer": ["A", 1]},
            {"questionId": "q3", "answer": None},
            {"questionId": "q4"},
        ]
        errors = validate_application(make_application("job-1", answers=answers))

        assert any(err.startswith("Answer 1:") for err in errors)
        assert any(err.startswith("Answer 2:") for err in errors)
        assert not any(err.startswith("Answer 3:") for err in errors)
        assert "Answer 4: Answer is required" in errors

    def test_missing_ids(self):
        errors = validate_application({"applicantName": "Jane", "applicantEmail": "jane@example.com", "answers": []})
        assert "Job ID is required" in errors
        assert "Applicant ID is required" in errors


class TestValidateStatusUpdate:
    """Test review status validation."""

    def test_valid_update(self):
        assert validate_status_update({"status": "accepted", "reviewedBy": "sam", "notes": "Strong"}) == []

    def test_unknown_status(self):
        errors = validate_status_update({"status": "hired"})
        assert any("Status must be one of" in err for err in errors)

    def test_missing_status(self):
        assert validate_status_update({}) == ["Status is required"]

    def test_empty_reviewer(self):
        errors = validate_status_update({"status": "reviewed", "reviewedBy": "  "})
        assert errors == ["Reviewed by cannot be empty if provided"]

    def test_notes_too_long(self):
        errors = validate_status_update({"status": "reviewed", "notes": "x" * 1001})
        assert any("1000" in err for err in errors)
