"""
Error types raised by the scorer and the storage layer.

Everything derives from JobBoardError so callers (the CLI, or any outer
transport) can map the whole family to a user-facing validation failure.
"""

from typing import Any, List, Optional


class JobBoardError(Exception):
    """Base class for all jobboard errors."""
    pass


class ValidationError(JobBoardError):
    """Raised when a request payload fails schema validation."""

    def __init__(self, errors: List[str], message: str = "Validation error"):
        self.errors = list(errors)
        super().__init__(f"{message}: " + "; ".join(self.errors))


class ScoringError(JobBoardError):
    """Raised when an answer set cannot be scored against a job."""
    pass


class UnknownQuestion(ScoringError):
    """An answer references a question id that the job does not define."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Question not found for the given answer: {question_id!r}")


class DuplicateAnswer(ScoringError):
    """The answer set answers the same question more than once."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Question answered more than once: {question_id!r}")


class InvalidAnswerShape(ScoringError):
    """An answer value does not have the shape its question type requires."""

    def __init__(self, question_id: str, question_type: str, value: Any, expected: Optional[str] = None):
        self.question_id = question_id
        self.question_type = question_type
        self.value = value
        self.expected = expected
        detail = f", expected {expected}" if expected else ""
        super().__init__(
            f"Invalid answer type for question {question_id!r} ({question_type}): "
            f"got {type(value).__name__}{detail}"
        )


class JobNotFound(JobBoardError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class ApplicationNotFound(JobBoardError):
    def __init__(self, application_id: str):
        self.application_id = application_id
        super().__init__(f"Application not found: {application_id}")


class DuplicateApplication(JobBoardError):
    def __init__(self, job_id: str, applicant_id: str):
        self.job_id = job_id
        self.applicant_id = applicant_id
        super().__init__(f"Applicant {applicant_id!r} has already applied for job {job_id}")
