"""
Answer scoring.

Responsibilities:
- Check that every answer maps to a known question, at most once, and has
  the shape its question type requires.
- Compute a per-answer score with a type-specific rule, clamped to
  [0, question.scoring].
- Aggregate totalScore, maxPossibleScore and scorePercentage.

Non-Responsibilities:
- No database access.
- No logging.
- No persistence decisions: callers must not store an application when
  scoring raises.

Invariant:
Given identical inputs, this module must always return the same result.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Sequence, Tuple

from .errors import DuplicateAnswer, InvalidAnswerShape, UnknownQuestion
from .models import Answer, ApplyJobData, Job, Question, QuestionType, ScoredApplication

TEXT_LENGTH_THRESHOLD = 50
SHORT_TEXT_FACTOR = 0.5
RATING_SCALE = 10


def clamp_score(score: float, ceiling: float) -> float:
    return max(0, min(score, ceiling))


def score_percentage(total: float, maximum: float) -> int:
    if maximum <= 0:
        return 0
    # Half-up rounding; round() would round 62.5 down to 62.
    return int(math.floor(total / maximum * 100 + 0.5))


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


# --- Answer shapes ---

def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


def _is_number(value: Any) -> bool:
    # bool is an int subclass; a True rating is a client bug, not a 1.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # math.isfinite overflows on ints beyond float range; ints are always finite.
    return isinstance(value, int) or math.isfinite(value)


_SHAPES: Dict[str, Tuple[Callable[[Any], bool], str]] = {
    QuestionType.MULTIPLE_CHOICE.value: (_is_string_list, "a list of strings"),
    QuestionType.SINGLE_CHOICE.value: (lambda v: isinstance(v, str), "a string"),
    QuestionType.TEXT.value: (lambda v: isinstance(v, str), "a string"),
    QuestionType.BOOLEAN.value: (lambda v: isinstance(v, bool), "a boolean"),
    QuestionType.RATING.value: (_is_number, "a finite number"),
}


# --- Scoring rules ---

def correct_choices(correct_answer: Any) -> Tuple[str, ...]:
    if correct_answer is None:
        return ()
    if isinstance(correct_answer, str):
        return (correct_answer,)
    if isinstance(correct_answer, (list, tuple)):
        return tuple(c for c in correct_answer if isinstance(c, str))
    return ()


def multiple_choice_score(answer: Sequence[str], correct_answer: Any, scoring: float) -> float:
    """
    Partial credit: scoring x (matched / |correct|).
    Matching is case-sensitive and counts each distinct choice once.
    An empty correct set is unscored.

    Both sides are treated as sets, so a repeated selection or a repeated
    correct value counts once. Counting every selected element against
    the raw correctAnswer length would let ["A", "A"] earn full credit on
    a two-answer question before the clamp.
    """
    correct = set(correct_choices(correct_answer))
    if not correct:
        return 0
    matched = len(set(answer) & correct)
    return scoring * matched / len(correct)


def single_choice_score(answer: str, correct_answer: Any, scoring: float) -> float:
    return scoring if isinstance(correct_answer, str) and answer == correct_answer else 0


def text_length_score(answer: str, scoring: float) -> float:
    return scoring if len(answer) > TEXT_LENGTH_THRESHOLD else math.floor(scoring * SHORT_TEXT_FACTOR)


def keyword_text_score(answer: str, keywords: Iterable[str], scoring: float) -> float:
    """
    Content-aware alternative to the length heuristic.

    Counts distinct keywords that occur as a case-insensitive substring of
    the answer: floor(scoring x hits / |keywords|). Without keywords it falls
    back to text_length_score.
    """
    wanted = sorted({k.lower() for k in keywords if k})
    if not wanted:
        return text_length_score(answer, scoring)
    haystack = answer.lower()
    hits = sum(1 for k in wanted if k in haystack)
    return math.floor(scoring * hits / len(wanted))


def boolean_score(answer: bool, correct_answer: Any, scoring: float) -> float:
    return scoring if isinstance(correct_answer, bool) and answer == correct_answer else 0


def rating_score(answer: float, scoring: float) -> float:
    # Assumes a 0-10 scale; out-of-range input is clamped by the caller.
    try:
        return math.floor((answer / RATING_SCALE) * scoring)
    except OverflowError:
        # Beyond float range in either direction.
        return scoring if answer > 0 else 0


def _score_text(q: Question, value: str) -> float:
    if q.keywords:
        return keyword_text_score(value, q.keywords, q.scoring)
    return text_length_score(value, q.scoring)


_RULES: Dict[str, Callable[[Question, Any], float]] = {
    QuestionType.MULTIPLE_CHOICE.value: lambda q, v: multiple_choice_score(v, q.correct_answer, q.scoring),
    QuestionType.SINGLE_CHOICE.value: lambda q, v: single_choice_score(v, q.correct_answer, q.scoring),
    QuestionType.TEXT.value: _score_text,
    QuestionType.BOOLEAN.value: lambda q, v: boolean_score(v, q.correct_answer, q.scoring),
    QuestionType.RATING.value: lambda q, v: rating_score(v, q.scoring),
}


@dataclass(frozen=True)
class AnswerScorer:
    """
    Stateless scoring service.

    strict_types: when False, a question type without a rule gets full
    credit so newer question types do not break older deployments. When
    True, answering such a question raises InvalidAnswerShape.
    """
    strict_types: bool = False

    def score(self, questions: Sequence[Question], answers: Sequence[Answer]) -> ScoredApplication:
        by_id = {q.id: q for q in questions}

        # Every answer is checked before any is scored so a bad answer
        # anywhere in the set yields no result at all.
        checked = [self._check(by_id, a) for a in answers]
        seen = set()
        for a, _ in checked:
            if a.question_id in seen:
                raise DuplicateAnswer(a.question_id)
            seen.add(a.question_id)

        scored = tuple(a.with_score(self._score_one(q, a.answer)) for a, q in checked)
        total = sum(a.score for a in scored)
        maximum = sum(q.scoring for q in questions)

        return ScoredApplication(
            answers=scored,
            total_score=total,
            max_possible_score=maximum,
            score_percentage=score_percentage(total, maximum),
        )

    def score_job(self, job: Job, data: ApplyJobData) -> ScoredApplication:
        return self.score(job.questions, data.answers)

    def _check(self, by_id: Dict[str, Question], answer: Answer) -> Tuple[Answer, Question]:
        question = by_id.get(answer.question_id)
        if question is None:
            raise UnknownQuestion(answer.question_id)
        if is_blank(answer.answer):
            return answer, question

        shape = _SHAPES.get(question.type)
        if shape is None:
            if self.strict_types:
                raise InvalidAnswerShape(
                    question.id, question.type, answer.answer,
                    expected="a known question type (" + ", ".join(QuestionType.values()) + ")",
                )
            return answer, question

        accepts, expected = shape
        if not accepts(answer.answer):
            raise InvalidAnswerShape(question.id, question.type, answer.answer, expected=expected)
        return answer, question

    def _score_one(self, question: Question, value: Any) -> float:
        if is_blank(value):
            return 0
        rule = _RULES.get(question.type)
        if rule is None:
            computed = question.scoring
        else:
            computed = rule(question, value)
        return clamp_score(computed, question.scoring)


def score_application(
    questions: Sequence[Question],
    answers: Sequence[Answer],
    strict_types: bool = False,
) -> ScoredApplication:
    """Score `answers` against `questions`. See AnswerScorer."""
    return AnswerScorer(strict_types=strict_types).score(questions, answers)
