"""
Job and application storage service.

Responsibilities:
- CRUD operations for jobs.
- Application intake: validate, score, persist.
- Application listing, ranking and review status.

Scoring decisions live in jobboard.scorer; this module only decides
whether a scored application may be stored.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from .config import load_settings
from .database import ApplicationRecord, JobRecord
from .errors import (
    ApplicationNotFound,
    DuplicateApplication,
    JobBoardError,
    JobNotFound,
    ValidationError,
)
from .logger import get_logger
from .models import ApplicationStatus, ApplyJobData, Job
from .schema import validate_application, validate_job, validate_status_update
from .scorer import AnswerScorer

logger = get_logger()

# Wire field -> JobRecord column
_JOB_FIELDS = {
    "title": "title",
    "location": "location",
    "customer": "customer",
    "jobName": "job_name",
    "description": "description",
}


# --- Jobs ---

def create_job(session, data: Dict[str, Any]) -> JobRecord:
    errors = validate_job(data)
    if errors:
        raise ValidationError(errors)

    job = Job.from_dict(data)
    record = JobRecord(
        title=job.title,
        location=job.location,
        customer=job.customer,
        job_name=job.job_name,
        description=job.description,
        questions=[q.to_dict() for q in job.questions],
    )
    session.add(record)
    session.commit()

    logger.info(
        "Job created",
        job_id=record.job_id,
        questions=len(job.questions),
        max_possible_score=job.max_possible_score,
    )
    return record


def list_jobs(session) -> List[JobRecord]:
    """All jobs, newest first."""
    return session.query(JobRecord).order_by(JobRecord.created_at.desc()).all()


def get_job(session, job_id: str) -> Optional[JobRecord]:
    return session.get(JobRecord, job_id)


def update_job(session, job_id: str, data: Dict[str, Any]) -> Optional[JobRecord]:
    """
    Apply a partial update to a job. Returns None when the job does not exist.

    Existing applications keep the scores they were given at submission.
    """
    errors = validate_job(data, partial=True)
    if errors:
        raise ValidationError(errors)

    record = get_job(session, job_id)
    if record is None:
        return None

    # Round-trip through the model so stored values are normalized the same
    # way as on create.
    merged = Job.from_dict({**record.to_model().to_dict(), **data})
    for wire_name, column in _JOB_FIELDS.items():
        if wire_name in data:
            setattr(record, column, getattr(merged, column))
    if "questions" in data:
        record.questions = [q.to_dict() for q in merged.questions]

    session.commit()
    logger.info("Job updated", job_id=job_id, fields=sorted(data.keys()))
    return record


def delete_job(session, job_id: str) -> bool:
    """Delete a job and its applications. Returns False when nothing was deleted."""
    record = get_job(session, job_id)
    if record is None:
        return False
    session.delete(record)
    session.commit()
    logger.info("Job deleted", job_id=job_id)
    return True


# --- Applications ---

def _record_failure(error: Exception, **context) -> None:
    logger.error(f"Error in apply_for_job: {error}", error_type=type(error).__name__, **context)
    logger.record_scoring_failure(type(error).__name__)


def apply_for_job(
    session,
    data: Dict[str, Any],
    scorer: Optional[AnswerScorer] = None,
) -> ApplicationRecord:
    """
    Score an application against its job and store it with status 'pending'.

    Raises:
        ValidationError: payload is malformed, or answers a question twice
        JobNotFound: jobId does not reference a stored job
        DuplicateApplication: the applicant already applied for this job
        UnknownQuestion, InvalidAnswerShape: the answers cannot be scored

    Nothing is stored when any of these is raised.
    """
    logger.record_application_submitted()
    job_id = data.get("jobId") if isinstance(data, dict) else None

    try:
        errors = validate_application(data)
        if errors:
            raise ValidationError(errors)

        application = ApplyJobData.from_dict(data)

        job_record = get_job(session, application.job_id)
        if job_record is None:
            raise JobNotFound(application.job_id)

        existing = (
            session.query(ApplicationRecord)
            .filter_by(job_id=application.job_id, applicant_id=application.applicant_id)
            .first()
        )
        if existing is not None:
            raise DuplicateApplication(application.job_id, application.applicant_id)

        if scorer is None:
            scorer = AnswerScorer(strict_types=load_settings().strict_question_types)
        result = scorer.score_job(job_record.to_model(), application)

        record = ApplicationRecord(
            job_id=application.job_id,
            applicant_id=application.applicant_id,
            applicant_name=application.applicant_name,
            applicant_email=application.applicant_email,
            answers=[a.to_dict() for a in result.answers],
            total_score=result.total_score,
            max_possible_score=result.max_possible_score,
            score_percentage=result.score_percentage,
            status=ApplicationStatus.PENDING.value,
            applied_at=datetime.now(),
        )
        session.add(record)
        try:
            session.commit()
        except IntegrityError as e:
            # A concurrent submission won the unique (job_id, applicant_id) race.
            session.rollback()
            raise DuplicateApplication(application.job_id, application.applicant_id) from e

    except JobBoardError as e:
        _record_failure(e, job_id=job_id)
        raise

    logger.record_application_scored(record.job_id, record.score_percentage)
    logger.info(
        "Application scored",
        application_id=record.application_id,
        job_id=record.job_id,
        total_score=record.total_score,
        max_possible_score=record.max_possible_score,
        score_percentage=record.score_percentage,
    )
    return record


def _ranked(session, job_id: str):
    return (
        session.query(ApplicationRecord)
        .filter_by(job_id=job_id)
        .order_by(ApplicationRecord.score_percentage.desc(), ApplicationRecord.applied_at.asc())
    )


def get_applications_by_job(session, job_id: str, status: Optional[str] = None) -> List[ApplicationRecord]:
    """Applications for a job, best score first, earliest first among ties."""
    query = _ranked(session, job_id)
    if status is not None:
        if status not in ApplicationStatus.values():
            raise ValidationError(["Status must be one of: " + ", ".join(ApplicationStatus.values())])
        query = query.filter(ApplicationRecord.status == status)
    return query.all()


def get_application(session, application_id: str) -> Optional[ApplicationRecord]:
    return session.get(ApplicationRecord, application_id)


def update_application_status(
    session,
    application_id: str,
    status: str,
    reviewed_by: Optional[str] = None,
    notes: Optional[str] = None,
) -> ApplicationRecord:
    payload: Dict[str, Any] = {"status": status}
    if reviewed_by is not None:
        payload["reviewedBy"] = reviewed_by
    if notes is not None:
        payload["notes"] = notes
    errors = validate_status_update(payload)
    if errors:
        raise ValidationError(errors)

    record = get_application(session, application_id)
    if record is None:
        raise ApplicationNotFound(application_id)

    record.status = status
    record.reviewed_at = datetime.now()
    if reviewed_by:
        record.reviewed_by = reviewed_by.strip()
    if notes:
        record.notes = notes.strip()
    session.commit()

    logger.info("Application status updated", application_id=application_id, status=status)
    return record


def get_top_applicants(session, job_id: str, limit: Optional[int] = None) -> List[ApplicationRecord]:
    if limit is None:
        limit = load_settings().top_applicants_limit
    if limit < 1:
        raise ValidationError(["Limit must be at least 1"])
    return _ranked(session, job_id).limit(limit).all()
