# apps/assessment/grading.py
"""
Pure scoring rules for assignment grading.

Nothing in here touches the database: services load the rows, these functions
decide scores, letter grades and exam types.
"""
from dataclasses import dataclass
from decimal import Decimal

from .models import Assignment, ExamResult, Question


OBJECTIVE_TYPES = frozenset({
    Question.QuestionType.MCQ,
    Question.QuestionType.TRUE_FALSE,
})
SUBJECTIVE_TYPES = frozenset({
    Question.QuestionType.SHORT_ANSWER,
    Question.QuestionType.ESSAY,
})

# (minimum percentage, letter), checked top to bottom
GRADE_THRESHOLDS = (
    (Decimal('80'), 'A'),
    (Decimal('70'), 'B'),
    (Decimal('60'), 'C'),
    (Decimal('50'), 'D'),
    (Decimal('40'), 'E'),
)
FAILING_GRADE = 'F'

ZERO = Decimal('0')


@dataclass(frozen=True)
class Objective:
    """Mechanically gradable by comparing against the canonical answer."""
    question_type: str


@dataclass(frozen=True)
class Subjective:
    """Needs a score entered by a teacher."""
    question_type: str


def classify(question_type):
    """
    Map a stored question type onto its kind.

    Raises ``ValueError`` for a type this module does not know, so a new
    question type has to be given a grading rule before it can be graded.
    """
    if question_type in OBJECTIVE_TYPES:
        return Objective(question_type)
    if question_type in SUBJECTIVE_TYPES:
        return Subjective(question_type)
    raise ValueError(f"Unknown question type: {question_type!r}")


def _as_decimal(value):
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _normalize(answer):
    return answer.strip().lower()


def answers_match(student_answer, correct_answer):
    """Case-insensitive equality ignoring surrounding whitespace."""
    if student_answer is None or correct_answer is None:
        return False
    return _normalize(student_answer) == _normalize(correct_answer)


def score_objective(question, student_answer):
    """
    Return ``(is_correct, score)`` for an answer to an objective question.

    All or nothing: a match earns the question's full marks.
    """
    kind = classify(question.question_type)
    if not isinstance(kind, Objective):
        raise ValueError(f"{question.question_type} questions are not auto-gradable")

    is_correct = answers_match(student_answer, question.correct_answer)
    return is_correct, (question.marks if is_correct else ZERO)


def sum_scores(scores):
    """Sum scores, counting ungraded (``None``) entries as zero."""
    total = ZERO
    for score in scores:
        if score is not None:
            total += _as_decimal(score)
    return total


def compute_grade(score, max_score):
    if max_score is None or _as_decimal(max_score) <= 0:
        return FAILING_GRADE

    percentage = _as_decimal(score) / _as_decimal(max_score) * 100
    for minimum, letter in GRADE_THRESHOLDS:
        if percentage >= minimum:
            return letter
    return FAILING_GRADE


def exam_type_for(assignment_type):
    if assignment_type in Assignment.AssignmentType.values:
        return ExamResult.ExamType(assignment_type).value
    return ExamResult.ExamType.OTHER.value
