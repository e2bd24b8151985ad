"""Tests for the pure scoring engine."""

import itertools
from decimal import Decimal
from types import SimpleNamespace

import pytest

from assessments.scoring import (
    accuracy_of,
    midpoint_policy,
    objective_marks,
    score_attempt,
)


def exam(negative_marking=True, incorrect_mark="-0.66"):
    return SimpleNamespace(negative_marking=negative_marking, incorrect_mark=Decimal(incorrect_mark))


def mcq(qid, marks="2", correct="a"):
    return SimpleNamespace(
        id=qid, question_type="MCQ", correct_option=correct,
        marks=Decimal(marks) if marks is not None else None,
    )


def descriptive(qid, marks="10"):
    return SimpleNamespace(id=qid, question_type="DESCRIPTIVE", correct_option="", marks=Decimal(marks))


def answer(aid, qid, selected=None, marks=None):
    return SimpleNamespace(id=aid, question_id=qid, selected_option=selected, marks=marks)


class TestScoreAttempt:

    def test_negative_marking_example(self):
        """3 right and 2 wrong at +2 / -0.66 gives 4.68 with 60% accuracy."""
        questions = [mcq(i) for i in range(1, 6)]
        answers = [
            answer(1, 1, "a"), answer(2, 2, "a"), answer(3, 3, "a"),
            answer(4, 4, "b"), answer(5, 5, "c"),
        ]

        result = score_attempt(exam(), answers, questions)

        assert result.score == Decimal("4.68")
        assert result.correct_answers == 3
        assert result.incorrect_answers == 2
        assert result.unattempted == 0
        assert result.accuracy == Decimal("60.00")

    def test_score_never_drops_below_zero(self):
        questions = [mcq(i) for i in range(1, 4)]
        answers = [answer(i, i, "d") for i in range(1, 4)]

        result = score_attempt(exam(incorrect_mark="-5"), answers, questions)

        assert result.score == Decimal("0")
        assert result.incorrect_answers == 3
        # per-answer marks keep their negative value
        assert result.answer_marks[1] == Decimal("-5")

    @pytest.mark.parametrize("negative", [True, False])
    def test_score_non_negative_and_accuracy_bounded_for_every_mix(self, negative):
        questions = [mcq(i) for i in range(1, 5)]
        for picks in itertools.product(["a", "b", None], repeat=4):
            answers = [answer(i, i, pick) for i, pick in enumerate(picks, start=1) if pick is not None]
            result = score_attempt(exam(negative_marking=negative), answers, questions)
            assert result.score >= 0
            assert Decimal("0") <= result.accuracy <= Decimal("100")

    def test_accuracy_is_zero_without_scorable_answers(self):
        questions = [mcq(1), descriptive(2)]
        answers = [answer(1, 2, marks=None)]

        result = score_attempt(exam(), answers, questions)

        assert result.accuracy == Decimal("0")
        assert result.correct_answers == result.incorrect_answers == 0
        assert result.unattempted == 1

    def test_no_negative_marking_ignores_incorrect_mark(self):
        questions = [mcq(1), mcq(2)]
        answers = [answer(1, 1, "a"), answer(2, 2, "b")]

        result = score_attempt(exam(negative_marking=False), answers, questions)

        assert result.score == Decimal("2")
        assert result.answer_marks == {1: Decimal("2"), 2: Decimal("0")}

    def test_question_without_marks_is_worth_one(self):
        result = score_attempt(exam(), [answer(1, 1, "a")], [mcq(1, marks=None)])
        assert result.score == Decimal("1")

    def test_blank_mcq_answer_counts_as_attempted_but_not_scored(self):
        questions = [mcq(1), mcq(2)]
        result = score_attempt(exam(), [answer(1, 1, "")], questions)

        assert result.correct_answers == result.incorrect_answers == 0
        assert result.unattempted == 1
        assert 1 not in result.answer_marks

    def test_descriptive_marks_use_midpoint(self):
        questions = [descriptive(1), descriptive(2), descriptive(3)]
        answers = [
            answer(1, 1, marks=Decimal("5")),
            answer(2, 2, marks=Decimal("4.9")),
            answer(3, 3, marks=None),
        ]

        result = score_attempt(exam(), answers, questions)

        assert result.score == Decimal("9.9")
        assert result.correct_answers == 1
        assert result.incorrect_answers == 1
        # evaluator marks are never rewritten by the engine
        assert result.answer_marks == {}

    def test_custom_descriptive_policy(self):
        answers = [answer(1, 1, marks=Decimal("6"))]
        strict = midpoint_policy("0.75")

        result = score_attempt(exam(), answers, [descriptive(1)], descriptive_policy=strict)

        assert result.correct_answers == 0
        assert result.incorrect_answers == 1

    def test_answer_outside_exam_is_rejected(self):
        with pytest.raises(ValueError):
            score_attempt(exam(), [answer(1, 99, "a")], [mcq(1)])

    def test_fractional_marks_keep_precision(self):
        questions = [mcq(1, marks="1.25"), mcq(2, marks="1.25")]
        answers = [answer(1, 1, "a"), answer(2, 2, "c")]

        result = score_attempt(exam(incorrect_mark="-0.333"), answers, questions)

        assert result.score == Decimal("0.917")


class TestObjectiveMarks:

    def test_matches_engine_per_answer_marks(self):
        questions = [mcq(1), mcq(2)]
        answers = [answer(10, 1, "a"), answer(11, 2, "b")]
        result = score_attempt(exam(), answers, questions)

        assert objective_marks(exam(), questions[0], "a") == result.answer_marks[10]
        assert objective_marks(exam(), questions[1], "b") == result.answer_marks[11]

    def test_wrong_choice_without_negative_marking_is_zero(self):
        assert objective_marks(exam(negative_marking=False), mcq(1), "b") == Decimal("0")


def test_accuracy_of_rounds_to_two_places():
    assert accuracy_of(1, 2) == Decimal("33.33")
    assert accuracy_of(0, 0) == Decimal("0")
