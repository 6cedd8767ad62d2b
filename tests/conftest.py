"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from jobboard.database import init_database, get_session
from jobboard.models import Question

LONG_TEXT = "I rebuilt our intake pipeline around a queue and cut p99 latency."  # > 50 chars


@pytest.fixture
def job_data() -> Dict[str, Any]:
    """Valid job posting covering every question type (max score 135)."""
    return {
        "title": "Backend Engineer",
        "location": "Remote",
        "customer": "Acme Corp",
        "jobName": "acme-backend-2024",
        "description": "Build and run the application intake services.",
        "questions": [
            {
                "id": "q1",
                "text": "Which database do you prefer?",
                "type": "single-choice",
                "options": ["A", "B", "C"],
                "correctAnswer": "B",
                "scoring": 25,
            },
            {
                "id": "q2",
                "text": "Which of these have you used?",
                "type": "multiple-choice",
                "options": ["A", "B", "C", "D"],
                "correctAnswer": ["A", "B", "C"],
                "scoring": 30,
            },
            {
                "id": "q3",
                "text": "Describe a project you are proud of.",
                "type": "text",
                "scoring": 20,
            },
            {
                "id": "q4",
                "text": "Are you eligible to work remotely?",
                "type": "boolean",
                "correctAnswer": True,
                "scoring": 10,
            },
            {
                "id": "q5",
                "text": "Rate your SQL skills from 0 to 10.",
                "type": "rating",
                "scoring": 50,
            },
        ],
    }


@pytest.fixture
def questions(job_data) -> List[Question]:
    return [Question.from_dict(q) for q in job_data["questions"]]


@pytest.fixture
def full_answers() -> List[Dict[str, Any]]:
    """Answers to every question of job_data: 25 + 20 + 20 + 10 + 35 = 110."""
    return [
        {"questionId": "q1", "answer": "B"},
        {"questionId": "q2", "answer": ["A", "B"]},
        {"questionId": "q3", "answer": LONG_TEXT},
        {"questionId": "q4", "answer": True},
        {"questionId": "q5", "answer": 7},
    ]


@pytest.fixture
def make_application(full_answers) -> Callable[..., Dict[str, Any]]:
    """
    Fixture that returns a function building an apply-for-job payload.
    make_application(job_id, applicant_id="cand-1", answers=None) -> dict
    """
    def _make(job_id: str, applicant_id: str = "cand-1", answers: Optional[list] = None, **extra) -> Dict[str, Any]:
        data = {
            "jobId": job_id,
            "applicantId": applicant_id,
            "applicantName": "Jane Doe",
            "applicantEmail": f"{applicant_id}@example.com",
            "answers": full_answers if answers is None else answers,
        }
        data.update(extra)
        return data
    return _make


@pytest.fixture
def db_path(tmp_path) -> Path:
    path = tmp_path / "test.db"
    init_database(path)
    return path


@pytest.fixture
def db_session(db_path):
    """Create a temporary database and return a session."""
    session = get_session(db_path)
    yield session
    session.close()


@pytest.fixture
def write_json(tmp_path) -> Callable[[str, Any], Path]:
    """Fixture that returns a function: write_json("name.json", data) -> Path"""
    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
