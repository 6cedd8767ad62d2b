"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for job and application storage. Question
catalogues and answer sets are stored as JSON columns in the camelCase wire
format; scoring always works on the models in jobboard.models.
"""

import uuid
from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, String, DateTime, Float, Integer, JSON, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from .models import ApplicationStatus, Job, Question

Base = declarative_base()


def new_id() -> str:
    return uuid.uuid4().hex


class JobRecord(Base):
    """Job posting model."""

    __tablename__ = "jobs"

    job_id = Column(String, primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    location = Column(String(100), nullable=False)
    customer = Column(String(100), nullable=False)
    job_name = Column(String(150), nullable=False)
    description = Column(Text, nullable=False)
    questions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    applications = relationship(
        "ApplicationRecord",
        back_populates="job",
        cascade="all, delete-orphan",
    )

    def to_model(self) -> Job:
        return Job(
            title=self.title,
            location=self.location,
            customer=self.customer,
            job_name=self.job_name,
            description=self.description,
            questions=tuple(Question.from_dict(q) for q in self.questions or []),
            job_id=self.job_id,
        )

    def to_dict(self) -> dict:
        d = self.to_model().to_dict()
        d["createdAt"] = self.created_at.isoformat() if self.created_at else None
        d["updatedAt"] = self.updated_at.isoformat() if self.updated_at else None
        return d


class ApplicationRecord(Base):
    """Job application model."""

    __tablename__ = "job_applications"
    __table_args__ = (
        # One application per applicant per job
        UniqueConstraint("job_id", "applicant_id", name="uq_application_job_applicant"),
    )

    application_id = Column(String, primary_key=True, default=new_id)
    job_id = Column(String, ForeignKey("jobs.job_id"), nullable=False, index=True)
    applicant_id = Column(String, nullable=False)
    applicant_name = Column(String(100), nullable=False)
    applicant_email = Column(String, nullable=False, index=True)
    answers = Column(JSON, nullable=False, default=list)
    total_score = Column(Float, nullable=False, default=0)
    max_possible_score = Column(Float, nullable=False, default=0)
    score_percentage = Column(Integer, nullable=False, default=0, index=True)
    status = Column(String, nullable=False, default=ApplicationStatus.PENDING.value)
    applied_at = Column(DateTime, nullable=False, default=datetime.now)
    reviewed_at = Column(DateTime, nullable=True)
    reviewed_by = Column(String, nullable=True)
    notes = Column(String(1000), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    job = relationship("JobRecord", back_populates="applications")

    def to_dict(self) -> dict:
        return {
            "id": self.application_id,
            "jobId": self.job_id,
            "applicantId": self.applicant_id,
            "applicantName": self.applicant_name,
            "applicantEmail": self.applicant_email,
            "answers": list(self.answers or []),
            "totalScore": self.total_score,
            "maxPossibleScore": self.max_possible_score,
            "scorePercentage": self.score_percentage,
            "status": self.status,
            "appliedAt": self.applied_at.isoformat() if self.applied_at else None,
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "reviewedBy": self.reviewed_by,
            "notes": self.notes,
        }


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
