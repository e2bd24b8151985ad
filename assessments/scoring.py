# assessments/scoring.py
"""
Pure scoring for exam attempts.

Nothing here touches the database. ``objective_marks`` is the single rule for
an MCQ answer; the answer ledger calls it when an answer is written and
``score_attempt`` calls it again at submission, so both always agree.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Dict, Iterable, Optional

MCQ = "MCQ"
DESCRIPTIVE = "DESCRIPTIVE"

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def _dec(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps the supplied precision for floats like -0.66
    return Decimal(str(value))


@dataclass(frozen=True)
class ScoreResult:
    score: Decimal
    correct_answers: int
    incorrect_answers: int
    unattempted: int
    accuracy: Decimal
    # answer id -> marks for MCQ answers, written back on submission
    answer_marks: Dict[int, Decimal] = field(default_factory=dict)


DescriptivePolicy = Callable[[Decimal, Optional[Decimal]], bool]


def midpoint_policy(ratio="0.5") -> DescriptivePolicy:
    """A descriptive answer is correct when it earns at least ``ratio`` of its marks."""
    ratio = _dec(ratio)

    def is_correct(awarded: Decimal, available: Optional[Decimal]) -> bool:
        available = _dec(available) if available is not None else ONE
        return _dec(awarded) >= available * ratio

    return is_correct


def question_marks(question) -> Decimal:
    return _dec(question.marks) if question.marks is not None else ONE


def is_correct_choice(question, selected_option) -> bool:
    return bool(selected_option) and selected_option == question.correct_option


def objective_marks(exam, question, selected_option) -> Decimal:
    """Marks for one MCQ choice under the exam's marking scheme."""
    if is_correct_choice(question, selected_option):
        return question_marks(question)
    if exam.negative_marking:
        return _dec(exam.incorrect_mark or 0)
    return ZERO


def accuracy_of(correct: int, incorrect: int) -> Decimal:
    attempted = correct + incorrect
    if attempted == 0:
        return ZERO
    return (Decimal(correct) / Decimal(attempted) * HUNDRED).quantize(Decimal("0.01"))


def score_attempt(
    exam,
    answers: Iterable,
    questions: Iterable,
    descriptive_policy: Optional[DescriptivePolicy] = None,
) -> ScoreResult:
    """
    Score an attempt.

    ``answers`` carry ``id``, ``question_id``, ``selected_option`` and
    ``marks``; ``questions`` is every question of the exam. Descriptive
    answers only count once an evaluator has set their marks.
    """
    policy = descriptive_policy or midpoint_policy()
    by_id = {q.id: q for q in questions}
    answers = list(answers)

    score = ZERO
    correct = 0
    incorrect = 0
    answer_marks = {}

    for answer in answers:
        question = by_id.get(answer.question_id)
        if question is None:
            raise ValueError(f"Answer {answer.id} refers to question {answer.question_id} outside the exam")

        if question.question_type == MCQ:
            if not answer.selected_option:
                continue
            marks = objective_marks(exam, question, answer.selected_option)
            answer_marks[answer.id] = marks
            score += marks
            if is_correct_choice(question, answer.selected_option):
                correct += 1
            else:
                incorrect += 1

        elif question.question_type == DESCRIPTIVE and answer.marks is not None:
            awarded = _dec(answer.marks)
            score += awarded
            if policy(awarded, question.marks):
                correct += 1
            else:
                incorrect += 1

    return ScoreResult(
        score=max(ZERO, score),
        correct_answers=correct,
        incorrect_answers=incorrect,
        unattempted=max(0, len(by_id) - len(answers)),
        accuracy=accuracy_of(correct, incorrect),
        answer_marks=answer_marks,
    )
