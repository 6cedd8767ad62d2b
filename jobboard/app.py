import argparse
import json
from pathlib import Path
from typing import Any, List, Optional

from .env import load_env

from . import __version__
from .config import load_settings
from .database import get_session, init_database
from .errors import JobBoardError
from .logger import get_logger
from .models import Answer, Job
from .schema import validate_application, validate_job, validate_status_update
from .scorer import AnswerScorer
from . import storage


def _read_json(path_str: str) -> Any:
    input_path = Path(path_str)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {input_path}: {e}")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _open_session(args: argparse.Namespace):
    db_path = Path(args.db)
    init_database(db_path)
    return get_session(db_path)


def cmd_score(args: argparse.Namespace) -> None:
    job_data = _read_json(args.job)
    if not isinstance(job_data, dict):
        raise SystemExit("Job file must contain a JSON object")
    answers_data = _read_json(args.answers)
    # Accept either a bare answer list or a full application body.
    if isinstance(answers_data, dict):
        answers_data = answers_data.get("answers", [])
    if not isinstance(answers_data, list):
        raise SystemExit("Answers file must contain a list of answers or an object with 'answers'")

    try:
        job = Job.from_dict(job_data)
        answers = [Answer.from_dict(a) for a in answers_data]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise SystemExit(f"Malformed input: {e}")

    scorer = AnswerScorer(strict_types=args.strict or load_settings().strict_question_types)
    result = scorer.score(job.questions, answers)
    _print_json(result.to_dict())


def cmd_validate(args: argparse.Namespace) -> None:
    data = _read_json(args.input)
    validators = {
        "job": validate_job,
        "application": validate_application,
        "status": validate_status_update,
    }
    errors = validators[args.kind](data)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_create_job(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        record = storage.create_job(session, _read_json(args.input))
        print(f"Job: {record.job_id}")
        print(f"Questions: {len(record.questions)}")
    finally:
        session.close()


def cmd_list_jobs(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        jobs = storage.list_jobs(session)
        if not jobs:
            print("No jobs in store.")
            return
        print(f"Found {len(jobs)} jobs in {args.db}:\n")
        for job in jobs:
            model = job.to_model()
            print(f"ID: {job.job_id}")
            print(f"  Title: {job.title}")
            print(f"  Customer: {job.customer}")
            print(f"  Location: {job.location}")
            print(f"  Questions: {len(model.questions)} (max score {model.max_possible_score})")
            print()
    finally:
        session.close()


def cmd_show_job(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        record = storage.get_job(session, args.id)
        if record is None:
            raise SystemExit(f"Job not found: {args.id}")
        _print_json(record.to_dict())
    finally:
        session.close()


def cmd_update_job(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        record = storage.update_job(session, args.id, _read_json(args.input))
        if record is None:
            raise SystemExit(f"Job not found: {args.id}")
        print(f"Updated: {record.job_id}")
    finally:
        session.close()


def cmd_delete_job(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        if not storage.delete_job(session, args.id):
            raise SystemExit(f"Job not found: {args.id}")
        print(f"Deleted: {args.id}")
    finally:
        session.close()


def cmd_apply(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        record = storage.apply_for_job(session, _read_json(args.input))
        print(f"Application: {record.application_id}")
        print(f"Score: {record.total_score}/{record.max_possible_score} ({record.score_percentage}%)")
    finally:
        session.close()


def _print_applications(records) -> None:
    for rank, r in enumerate(records, start=1):
        print(
            f"{rank:>3}. {r.applicant_name} <{r.applicant_email}> "
            f"{r.score_percentage}% [{r.status}] id={r.application_id}"
        )


def cmd_applications(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        records = storage.get_applications_by_job(session, args.job_id, status=args.status)
        if not records:
            print("No applications found.")
            return
        _print_applications(records)
    finally:
        session.close()


def cmd_show_application(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        record = storage.get_application(session, args.id)
        if record is None:
            raise SystemExit(f"Application not found: {args.id}")
        _print_json(record.to_dict())
    finally:
        session.close()


def cmd_top(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        records = storage.get_top_applicants(session, args.job_id, limit=args.limit)
        if not records:
            print("No applications found.")
            return
        _print_applications(records)
    finally:
        session.close()


def cmd_set_status(args: argparse.Namespace) -> None:
    session = _open_session(args)
    try:
        record = storage.update_application_status(
            session, args.id, args.status, reviewed_by=args.reviewed_by, notes=args.notes
        )
        print(f"Application {record.application_id}: {record.status}")
    finally:
        session.close()


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    default_db = str(settings.db_path)

    parser = argparse.ArgumentParser(prog="jobboard", description="Job postings and scored applications")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")

    def with_db(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
        p.add_argument("--db", default=default_db, help=f"Path to SQLite database (default: {default_db})")
        return p

    sc = subparsers.add_parser("score", help="Score an answer set against a job JSON without storing anything")
    sc.add_argument("--job", required=True, help="Path to job JSON (with questions)")
    sc.add_argument("--answers", required=True, help="Path to answers JSON (list, or application body)")
    sc.add_argument("--strict", action="store_true", help="Fail on question types without a scoring rule")
    sc.set_defaults(func=cmd_score)

    val = subparsers.add_parser("validate", help="Validate a JSON payload")
    val.add_argument("--input", required=True, help="Path to JSON input")
    val.add_argument("--kind", choices=["job", "application", "status"], default="job", help="Payload kind (default: job)")
    val.set_defaults(func=cmd_validate)

    cj = with_db(subparsers.add_parser("create-job", help="Create a job from a JSON file"))
    cj.add_argument("--input", required=True, help="Path to job JSON")
    cj.set_defaults(func=cmd_create_job)

    lj = with_db(subparsers.add_parser("list-jobs", help="List all stored jobs"))
    lj.set_defaults(func=cmd_list_jobs)

    sj = with_db(subparsers.add_parser("show-job", help="Show a job as JSON"))
    sj.add_argument("--id", required=True, help="Job ID")
    sj.set_defaults(func=cmd_show_job)

    uj = with_db(subparsers.add_parser("update-job", help="Apply a partial update from a JSON file"))
    uj.add_argument("--id", required=True, help="Job ID")
    uj.add_argument("--input", required=True, help="Path to JSON with the fields to change")
    uj.set_defaults(func=cmd_update_job)

    dj = with_db(subparsers.add_parser("delete-job", help="Delete a job and its applications"))
    dj.add_argument("--id", required=True, help="Job ID")
    dj.set_defaults(func=cmd_delete_job)

    ap = with_db(subparsers.add_parser("apply", help="Submit an application JSON; it is scored and stored"))
    ap.add_argument("--input", required=True, help="Path to application JSON")
    ap.set_defaults(func=cmd_apply)

    apps = with_db(subparsers.add_parser("applications", help="List a job's applications, best first"))
    apps.add_argument("--job-id", required=True, help="Job ID")
    apps.add_argument("--status", choices=["pending", "reviewed", "accepted", "rejected"], help="Filter by status")
    apps.set_defaults(func=cmd_applications)

    sa = with_db(subparsers.add_parser("show-application", help="Show an application as JSON"))
    sa.add_argument("--id", required=True, help="Application ID")
    sa.set_defaults(func=cmd_show_application)

    top = with_db(subparsers.add_parser("top", help="Show the top applicants for a job"))
    top.add_argument("--job-id", required=True, help="Job ID")
    top.add_argument("--limit", type=int, default=settings.top_applicants_limit,
                     help=f"Number of applicants (default: {settings.top_applicants_limit})")
    top.set_defaults(func=cmd_top)

    ss = with_db(subparsers.add_parser("set-status", help="Update an application's review status"))
    ss.add_argument("--id", required=True, help="Application ID")
    ss.add_argument("--status", required=True, choices=["pending", "reviewed", "accepted", "rejected"])
    ss.add_argument("--reviewed-by", help="Reviewer name")
    ss.add_argument("--notes", help="Review notes")
    ss.set_defaults(func=cmd_set_status)

    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (JOBBOARD_DB_PATH, JOBBOARD_LOG_LEVEL, etc.)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        try:
            args.func(args)
        except JobBoardError as e:
            get_logger().debug("Command failed", command=args.command, error=str(e))
            print(f"Error: {e}")
            raise SystemExit(2)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
