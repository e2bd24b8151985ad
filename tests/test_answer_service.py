from decimal import Decimal

import pytest
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from assessments.exceptions import AttemptLocked
from assessments.models import Answer
from assessments.scoring import objective_marks
from assessments.services import AnswerService, AttemptService
from assessments.transitions import AttemptStatus
from exams.models import Question

pytestmark = pytest.mark.django_db


@pytest.fixture
def attempt(student, negative_exam, start_attempt):
    return start_attempt(student, negative_exam)


@pytest.fixture
def questions(negative_exam):
    return list(negative_exam.questions.all())


class TestUpsert:

    def test_first_write_creates(self, student, attempt, questions):
        answer, created = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a", time_spent=30
        )

        assert created is True
        assert answer.selected_option == "a"
        assert answer.time_spent == 30

    def test_second_write_replaces_and_accumulates_time(self, student, attempt, questions):
        first, _ = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a", time_spent=30
        )
        second, created = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="c", time_spent=15
        )

        assert created is False
        assert second.id == first.id
        assert second.selected_option == "c"
        assert second.time_spent == 45
        assert Answer.objects.filter(attempt=attempt, question=questions[0]).count() == 1

    def test_time_only_save_keeps_choice(self, student, attempt, questions):
        AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a", time_spent=10
        )

        answer, created = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, time_spent=5
        )

        assert created is False
        answer.refresh_from_db()
        assert answer.selected_option == "a"
        assert answer.marks == Decimal("2")
        assert answer.time_spent == 15

    def test_time_only_save_keeps_essay(self, student, descriptive_exam, start_attempt):
        attempt = start_attempt(student, descriptive_exam)
        question = descriptive_exam.questions.first()
        AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=question.id, answer_text="my essay")

        answer, _ = AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=question.id, time_spent=5)

        answer.refresh_from_db()
        assert answer.answer_text == "my essay"
        assert answer.time_spent == 5

    def test_explicit_null_clears_choice(self, student, attempt, questions):
        AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a")

        answer, _ = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option=None
        )

        assert answer.selected_option is None
        assert answer.marks is None

    def test_provisional_marks_match_submission(self, student, attempt, questions):
        picks = ["a", "b", "a", "d", "a"]
        for question, pick in zip(questions, picks):
            AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=question.id, selected_option=pick)

        provisional = {a.id: a.marks for a in Answer.objects.filter(attempt=attempt)}
        for question, pick in zip(questions, picks):
            answer = Answer.objects.get(attempt=attempt, question=question)
            assert answer.marks == objective_marks(attempt.exam, question, pick)

        AttemptService.submit(attempt_id=attempt.id, user=student)

        final = {a.id: a.marks for a in Answer.objects.filter(attempt=attempt)}
        assert final == provisional

    def test_no_provisional_marks_without_negative_marking(self, student, make_exam, make_question, start_attempt):
        exam = make_exam(negative_marking=False)
        question = make_question(exam, 1, marks=Decimal("2"))
        attempt = start_attempt(student, exam)

        answer, _ = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=question.id, selected_option="a"
        )

        assert answer.marks is None

    def test_descriptive_answer_stores_text_only(self, student, descriptive_exam, start_attempt):
        attempt = start_attempt(student, descriptive_exam)
        question = descriptive_exam.questions.first()

        answer, _ = AnswerService.upsert(
            user=student,
            attempt_id=attempt.id,
            question_id=question.id,
            selected_option="a",
            answer_text="Federalism divides power between levels of government.",
        )

        assert answer.selected_option is None
        assert answer.answer_text.startswith("Federalism")
        assert answer.marks is None

    def test_question_from_another_exam(self, student, attempt, make_exam, make_question):
        stray = make_question(make_exam(title="Other"), 1)
        with pytest.raises(ValidationError):
            AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=stray.id, selected_option="a")

    def test_unknown_question(self, student, attempt):
        with pytest.raises(NotFound):
            AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=55555, selected_option="a")

    def test_invalid_option(self, student, attempt, questions):
        with pytest.raises(ValidationError):
            AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="z")

    def test_only_owner_writes(self, other_student, attempt, questions):
        with pytest.raises(PermissionDenied):
            AnswerService.upsert(
                user=other_student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a"
            )

    @pytest.mark.parametrize("close", ["submit", "complete"])
    def test_closed_attempt_rejects_writes(self, student, attempt, questions, close):
        AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a")
        if close == "submit":
            AttemptService.submit(attempt_id=attempt.id, user=student)
        else:
            AttemptService.student_update(attempt_id=attempt.id, user=student, status=AttemptStatus.COMPLETED)

        with pytest.raises(AttemptLocked):
            AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="b")
        with pytest.raises(AttemptLocked):
            AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=questions[1].id, selected_option="b")

        assert Answer.objects.get(attempt=attempt, question=questions[0]).selected_option == "a"
        assert not Answer.objects.filter(attempt=attempt, question=questions[1]).exists()


class TestUpdate:

    def test_changes_option_and_accumulates_time(self, student, attempt, questions):
        answer, _ = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a", time_spent=20
        )

        updated = AnswerService.update(
            answer_id=answer.id, user=student, data={"selected_option": "b", "time_spent": 10}
        )

        assert updated.selected_option == "b"
        assert updated.time_spent == 30
        assert updated.marks == Decimal("-0.66")

    def test_time_only_update_keeps_choice(self, student, attempt, questions):
        answer, _ = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a"
        )

        updated = AnswerService.update(answer_id=answer.id, user=student, data={"time_spent": 12})

        assert updated.selected_option == "a"
        assert updated.marks == Decimal("2")

    def test_descriptive_update_clears_option(self, student, descriptive_exam, start_attempt, write_answer):
        attempt = start_attempt(student, descriptive_exam)
        question = descriptive_exam.questions.first()
        answer = write_answer(attempt, question, selected_option="stale", answer_text="draft")

        updated = AnswerService.update(answer_id=answer.id, user=student, data={"answer_text": "final essay"})

        assert updated.answer_text == "final essay"
        assert updated.selected_option is None

    def test_locked_after_submit(self, student, attempt, questions):
        answer, _ = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a"
        )
        AttemptService.submit(attempt_id=attempt.id, user=student)

        with pytest.raises(AttemptLocked):
            AnswerService.update(answer_id=answer.id, user=student, data={"selected_option": "b"})

    def test_only_owner_updates(self, student, other_student, attempt, questions):
        answer, _ = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a"
        )
        with pytest.raises(PermissionDenied):
            AnswerService.update(answer_id=answer.id, user=other_student, data={"selected_option": "b"})

    def test_unknown_answer(self, student):
        with pytest.raises(NotFound):
            AnswerService.update(answer_id=31337, user=student, data={"time_spent": 1})


class TestRead:

    def test_staff_and_owner_can_read(self, student, teacher, attempt, questions):
        answer, _ = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a"
        )
        assert AnswerService.get(answer_id=answer.id, actor=student) == answer
        assert AnswerService.get(answer_id=answer.id, actor=teacher) == answer

    def test_other_student_sees_not_found(self, student, other_student, attempt, questions):
        answer, _ = AnswerService.upsert(
            user=student, attempt_id=attempt.id, question_id=questions[0].id, selected_option="a"
        )
        with pytest.raises(NotFound):
            AnswerService.get(answer_id=answer.id, actor=other_student)

    def test_list_is_ordered_by_question_number(self, student, attempt, questions):
        for question in reversed(questions):
            AnswerService.upsert(user=student, attempt_id=attempt.id, question_id=question.id, selected_option="a")

        listed = AnswerService.list_for_attempt(attempt_id=attempt.id, actor=student)

        assert [a.question.question_number for a in listed] == [1, 2, 3, 4, 5]

    def test_list_refuses_other_student(self, other_student, attempt):
        with pytest.raises(PermissionDenied):
            list(AnswerService.list_for_attempt(attempt_id=attempt.id, actor=other_student))


def test_question_type_constants_line_up():
    assert Question.QuestionType.MCQ == "MCQ"
    assert Question.QuestionType.DESCRIPTIVE == "DESCRIPTIVE"
