import math
import re
from typing import Any, Dict, List

from .models import CHOICE_TYPES, ApplicationStatus, QuestionType

JOB_STR_LIMITS = {
    "title": ("Job title", 200),
    "location": ("Job location", 100),
    "customer": ("Customer", 100),
    "jobName": ("Job name", 150),
    "description": ("Job description", 2000),
}
QUESTION_TEXT_MAX = 500
SCORING_MIN = 0
SCORING_MAX = 100
APPLICANT_NAME_MAX = 100
NOTES_MAX = 1000

# No nested repetition: the pattern must stay linear on hostile input.
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]{2,}$")


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_number(v: Any) -> bool:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    # Large ints overflow math.isfinite and are finite anyway.
    return isinstance(v, int) or math.isfinite(v)


def _is_string_list(v: Any) -> bool:
    return isinstance(v, list) and all(isinstance(x, str) for x in v)


def validate_question(data: Dict[str, Any], index: int = 0) -> List[str]:
    """
    Returns a list of validation error messages for one question.
    Messages are prefixed with the question's position in the job.
    """
    prefix = f"Question {index + 1}"
    if not isinstance(data, dict):
        return [f"{prefix}: must be an object"]

    errors: List[str] = []

    if not _is_non_empty_str(data.get("id")):
        errors.append(f"{prefix}: Question ID is required")

    text = data.get("text")
    if not _is_non_empty_str(text):
        errors.append(f"{prefix}: Question text is required")
    elif len(text) > QUESTION_TEXT_MAX:
        errors.append(f"{prefix}: Question text cannot exceed {QUESTION_TEXT_MAX} characters")

    qtype = data.get("type")
    if qtype is None:
        errors.append(f"{prefix}: Question type is required")
    elif qtype not in QuestionType.values():
        errors.append(f"{prefix}: Question type must be one of: " + ", ".join(QuestionType.values()))

    scoring = data.get("scoring")
    if scoring is None:
        errors.append(f"{prefix}: Question scoring is required")
    elif not _is_number(scoring):
        errors.append(f"{prefix}: Scoring must be a number")
    elif scoring < SCORING_MIN:
        errors.append(f"{prefix}: Scoring must be a positive number")
    elif scoring > SCORING_MAX:
        errors.append(f"{prefix}: Scoring cannot exceed {SCORING_MAX}")

    options = data.get("options")
    if options is not None and not _is_string_list(options):
        errors.append(f"{prefix}: Options must be a list of strings")
        options = None

    if qtype in CHOICE_TYPES:
        if options is None:
            errors.append(f"{prefix}: Options are required for {qtype} questions")
        elif len(options) < 2:
            errors.append(f"{prefix}: {qtype.capitalize()} questions must have at least 2 options")

    errors.extend(_validate_correct_answer(prefix, qtype, data.get("correctAnswer"), options))

    keywords = data.get("keywords")
    if keywords is not None:
        if qtype != QuestionType.TEXT.value:
            errors.append(f"{prefix}: Keywords are only supported on text questions")
        elif not _is_string_list(keywords):
            errors.append(f"{prefix}: Keywords must be a list of strings")

    return errors


def _validate_correct_answer(prefix: str, qtype: Any, correct: Any, options: Any) -> List[str]:
    # Absent correct answers are allowed for every type; such questions score 0
    # for the types that compare against one.
    if correct is None:
        return []

    if qtype == QuestionType.MULTIPLE_CHOICE.value:
        if not _is_string_list(correct):
            return [f"{prefix}: Correct answer must be a list of strings for multiple-choice questions"]
        values = correct
    elif qtype == QuestionType.SINGLE_CHOICE.value:
        if not isinstance(correct, str):
            return [f"{prefix}: Correct answer must be a string for single-choice questions"]
        values = [correct]
    elif qtype == QuestionType.TEXT.value:
        return [] if isinstance(correct, str) else [f"{prefix}: Correct answer must be a string for text questions"]
    elif qtype == QuestionType.BOOLEAN.value:
        return [] if isinstance(correct, bool) else [f"{prefix}: Correct answer must be a boolean for boolean questions"]
    elif qtype == QuestionType.RATING.value:
        return [] if _is_number(correct) else [f"{prefix}: Correct answer must be a number for rating questions"]
    else:
        return []

    if options is None:
        return []
    missing = [v for v in values if v not in options]
    if missing:
        return [f"{prefix}: Correct answer values must be among the options: " + ", ".join(missing)]
    return []


def validate_job(data: Dict[str, Any], partial: bool = False) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.

    With partial=True (job updates) every field is optional, but fields that
    are present must still be valid.
    """
    if not isinstance(data, dict):
        return ["Job must be an object"]

    errors: List[str] = []

    for f, (label, limit) in JOB_STR_LIMITS.items():
        if f not in data:
            if not partial:
                errors.append(f"{label} is required")
            continue
        v = data[f]
        if not _is_non_empty_str(v):
            errors.append(f"{label} cannot be empty")
        elif len(v) > limit:
            errors.append(f"{label} cannot exceed {limit} characters")

    if "questions" not in data:
        if not partial:
            errors.append("Questions are required")
        return errors

    questions = data["questions"]
    if not isinstance(questions, list):
        errors.append("Questions must be a list")
        return errors
    if len(questions) < 1:
        errors.append("At least one question is required")

    seen = set()
    for i, q in enumerate(questions):
        errors.extend(validate_question(q, i))
        qid = q.get("id") if isinstance(q, dict) else None
        if isinstance(qid, str) and qid:
            if qid in seen:
                errors.append(f"Question {i + 1}: Duplicate question ID '{qid}'")
            seen.add(qid)

    return errors


def validate_application(data: Dict[str, Any]) -> List[str]:
    """Returns validation error messages for an apply-for-job payload."""
    if not isinstance(data, dict):
        return ["Application must be an object"]

    errors: List[str] = []

    for f, label in (("jobId", "Job ID"), ("applicantId", "Applicant ID")):
        if not _is_non_empty_str(data.get(f)):
            errors.append(f"{label} is required")

    name = data.get("applicantName")
    if not _is_non_empty_str(name):
        errors.append("Applicant name is required")
    elif len(name.strip()) > APPLICANT_NAME_MAX:
        errors.append(f"Applicant name cannot exceed {APPLICANT_NAME_MAX} characters")

    email = data.get("applicantEmail")
    if not _is_non_empty_str(email):
        errors.append("Applicant email is required")
    elif not EMAIL_RE.match(email.strip()):
        errors.append("Please enter a valid email address")

    answers = data.get("answers")
    if answers is None:
        errors.append("Answers are required")
        return errors
    if not isinstance(answers, list):
        errors.append("Answers must be a list")
        return errors
    if len(answers) < 1:
        errors.append("At least one answer is required")

    seen = set()
    for i, a in enumerate(answers):
        prefix = f"Answer {i + 1}"
        if not isinstance(a, dict):
            errors.append(f"{prefix}: must be an object")
            continue
        qid = a.get("questionId")
        if not _is_non_empty_str(qid):
            errors.append(f"{prefix}: Question ID is required")
        elif qid in seen:
            errors.append(f"{prefix}: Duplicate answer for question '{qid}'")
        else:
            seen.add(qid)
        if "answer" not in a:
            errors.append(f"{prefix}: Answer is required")
            continue
        v = a["answer"]
        if v is None:
            continue
        if not (isinstance(v, (str, bool)) or _is_number(v) or _is_string_list(v)):
            errors.append(f"{prefix}: Answer must be a string, number, boolean, or array of strings")

    return errors


def validate_status_update(data: Dict[str, Any]) -> List[str]:
    """Returns validation error messages for an application status update."""
    if not isinstance(data, dict):
        return ["Status update must be an object"]

    errors: List[str] = []

    status = data.get("status")
    if status is None:
        errors.append("Status is required")
    elif status not in ApplicationStatus.values():
        errors.append("Status must be one of: " + ", ".join(ApplicationStatus.values()))

    reviewed_by = data.get("reviewedBy")
    if reviewed_by is not None and not _is_non_empty_str(reviewed_by):
        errors.append("Reviewed by cannot be empty if provided")

    notes = data.get("notes")
    if notes is not None:
        if not isinstance(notes, str):
            errors.append("Notes must be a string")
        elif len(notes) > NOTES_MAX:
            errors.append(f"Notes cannot exceed {NOTES_MAX} characters")

    return errors
