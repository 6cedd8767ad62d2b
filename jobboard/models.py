"""
Value objects shared by the scorer, the validators and the storage layer.

All scoring entities are frozen: a scoring call builds them, reads them and
throws them away. Dictionaries use the camelCase keys of the JSON wire format
(questionId, correctAnswer, totalScore, ...).
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .normalize import normalize_choices, normalize_email, normalize_name, normalize_whitespace


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    SINGLE_CHOICE = "single-choice"
    TEXT = "text"
    BOOLEAN = "boolean"
    RATING = "rating"

    @classmethod
    def values(cls) -> List[str]:
        return [t.value for t in cls]


CHOICE_TYPES = (QuestionType.MULTIPLE_CHOICE.value, QuestionType.SINGLE_CHOICE.value)


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @classmethod
    def values(cls) -> List[str]:
        return [s.value for s in cls]


def _freeze(value: Any) -> Any:
    # Lists coming from JSON become tuples so frozen objects stay hashable-ish
    # and cannot be mutated through a shared reference.
    if isinstance(value, list):
        return tuple(value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclass(frozen=True)
class Question:
    """
    A scoring rubric item belonging to a job.

    `type` is kept as a plain string rather than a QuestionType so that
    question types this version does not know about can still be loaded and
    scored (see AnswerScorer.strict_types).
    """
    id: str
    text: str
    type: str
    scoring: float
    options: Tuple[str, ...] = ()
    correct_answer: Any = None
    keywords: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.type, QuestionType):
            object.__setattr__(self, "type", self.type.value)
        if self.scoring < 0:
            raise ValueError(f"Question {self.id!r}: scoring must be >= 0, got {self.scoring}")
        object.__setattr__(self, "text", normalize_whitespace(self.text))
        object.__setattr__(self, "options", tuple(self.options or ()))
        object.__setattr__(self, "keywords", normalize_choices(self.keywords))
        object.__setattr__(self, "correct_answer", _freeze(self.correct_answer))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        return cls(
            id=str(data["id"]),
            text=data.get("text", ""),
            type=data["type"],
            scoring=data.get("scoring", 0),
            options=tuple(data.get("options") or ()),
            correct_answer=data.get("correctAnswer"),
            keywords=tuple(data.get("keywords") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "type": self.type,
            "scoring": self.scoring,
        }
        if self.options:
            d["options"] = list(self.options)
        if self.correct_answer is not None:
            d["correctAnswer"] = _thaw(self.correct_answer)
        if self.keywords:
            d["keywords"] = list(self.keywords)
        return d


@dataclass(frozen=True)
class Answer:
    """An applicant's response to one question. `score` is set by the scorer only."""
    question_id: str
    answer: Any = None
    score: float = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "answer", _freeze(self.answer))

    def with_score(self, score: float) -> "Answer":
        return replace(self, score=score)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Answer":
        # Any caller-supplied score is ignored on purpose; scores are computed.
        return cls(question_id=str(data["questionId"]), answer=data.get("answer"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questionId": self.question_id,
            "answer": _thaw(self.answer),
            "score": self.score,
        }


@dataclass(frozen=True)
class Job:
    """A job posting with its question catalogue."""
    title: str
    location: str
    customer: str
    job_name: str
    description: str
    questions: Tuple[Question, ...] = ()
    job_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "title", normalize_whitespace(self.title))
        object.__setattr__(self, "location", normalize_whitespace(self.location))
        object.__setattr__(self, "customer", normalize_whitespace(self.customer))
        object.__setattr__(self, "job_name", normalize_whitespace(self.job_name))
        object.__setattr__(self, "questions", tuple(self.questions or ()))

    @property
    def max_possible_score(self) -> float:
        return sum(q.scoring for q in self.questions)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        return cls(
            title=data.get("title", ""),
            location=data.get("location", ""),
            customer=data.get("customer", ""),
            job_name=data.get("jobName", ""),
            description=data.get("description", ""),
            questions=tuple(Question.from_dict(q) for q in data.get("questions") or []),
            job_id=data.get("id") or data.get("jobId"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "title": self.title,
            "location": self.location,
            "customer": self.customer,
            "jobName": self.job_name,
            "description": self.description,
            "questions": [q.to_dict() for q in self.questions],
        }
        if self.job_id is not None:
            d["id"] = self.job_id
        return d


@dataclass(frozen=True)
class ApplyJobData:
    """The body of an application: who is applying, to what, with which answers."""
    job_id: str
    applicant_id: str
    applicant_name: str
    applicant_email: str
    answers: Tuple[Answer, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "applicant_id", (self.applicant_id or "").strip())
        object.__setattr__(self, "applicant_name", normalize_name(self.applicant_name))
        object.__setattr__(self, "applicant_email", normalize_email(self.applicant_email))
        object.__setattr__(self, "answers", tuple(self.answers or ()))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApplyJobData":
        return cls(
            job_id=str(data["jobId"]),
            applicant_id=str(data["applicantId"]),
            applicant_name=data.get("applicantName", ""),
            applicant_email=data.get("applicantEmail", ""),
            answers=tuple(Answer.from_dict(a) for a in data.get("answers") or []),
        )


@dataclass(frozen=True)
class ScoredApplication:
    answers: Tuple[Answer, ...]
    total_score: float
    max_possible_score: float
    score_percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answers": [a.to_dict() for a in self.answers],
            "totalScore": self.total_score,
            "maxPossibleScore": self.max_possible_score,
            "scorePercentage": self.score_percentage,
        }
