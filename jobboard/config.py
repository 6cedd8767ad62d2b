# jobboard/config.py
import os
from dataclasses import dataclass
from pathlib import Path

# --- Storage ---

DEFAULT_DB_PATH = "data/jobboard.db"

# --- Logging ---

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIR = "logs"

# --- Applications ---

DEFAULT_TOP_APPLICANTS_LIMIT = 10

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return default


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


@dataclass(frozen=True)
class Settings:
    db_path: Path
    log_level: str
    log_dir: Path
    log_to_file: bool
    # Fail closed on question types the scorer has no rule for.
    strict_question_types: bool
    top_applicants_limit: int


def load_settings() -> Settings:
    level = _env_str("JOBBOARD_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        level = DEFAULT_LOG_LEVEL

    limit = _env_int("JOBBOARD_TOP_APPLICANTS_LIMIT", DEFAULT_TOP_APPLICANTS_LIMIT)
    if limit < 1:
        limit = DEFAULT_TOP_APPLICANTS_LIMIT

    return Settings(
        db_path=Path(_env_str("JOBBOARD_DB_PATH", DEFAULT_DB_PATH)),
        log_level=level,
        log_dir=Path(_env_str("JOBBOARD_LOG_DIR", DEFAULT_LOG_DIR)),
        log_to_file=_env_bool("JOBBOARD_LOG_TO_FILE", False),
        strict_question_types=_env_bool("JOBBOARD_STRICT_QUESTION_TYPES", False),
        top_applicants_limit=limit,
    )
