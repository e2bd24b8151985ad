import itertools
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from assessments.models import Answer
from assessments.services import AttemptService
from exams.models import Exam, Question
from exams import models as exam_models
from payments.models import Purchase
from users.models import User

OPTIONS = ["a", "b", "c", "d"]


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role=User.Role.STUDENT, **kwargs):
        n = next(counter)
        email = kwargs.pop("email", f"{role}{n}@example.com")
        return User.objects.create_user(
            username=email,
            email=email,
            password="pass12345",
            first_name=str(role).title(),
            last_name=str(n),
            role=role,
            **kwargs,
        )

    return _make


@pytest.fixture
def student(make_user):
    return make_user()


@pytest.fixture
def other_student(make_user):
    return make_user()


@pytest.fixture
def teacher(make_user):
    return make_user(User.Role.TEACHER)


@pytest.fixture
def other_teacher(make_user):
    return make_user(User.Role.TEACHER)


@pytest.fixture
def platform_admin(make_user):
    return make_user(User.Role.ADMIN)


@pytest.fixture
def make_exam(db, teacher):
    def _make(**kwargs):
        kwargs.setdefault("title", "Mock Test")
        kwargs.setdefault("teacher", teacher)
        kwargs.setdefault("total_marks", Decimal("10"))
        kwargs.setdefault("is_free", True)
        return Exam.objects.create(**kwargs)

    return _make


@pytest.fixture
def make_test_series(db, teacher):
    def _make(**kwargs):
        kwargs.setdefault("title", "Prelims Series")
        kwargs.setdefault("teacher", teacher)
        return exam_models.TestSeries.objects.create(**kwargs)

    return _make


@pytest.fixture
def make_question(db):
    def _make(exam, number, question_type=Question.QuestionType.MCQ, **kwargs):
        if question_type == Question.QuestionType.MCQ:
            kwargs.setdefault("options", OPTIONS)
            kwargs.setdefault("correct_option", "a")
        return Question.objects.create(
            exam=exam,
            question_number=number,
            text=f"Question {number}",
            question_type=question_type,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_purchase(db):
    counter = itertools.count(1)

    def _make(user, **kwargs):
        kwargs.setdefault("status", Purchase.Status.COMPLETED)
        kwargs.setdefault("reference", f"REF-{next(counter)}")
        return Purchase.objects.create(user=user, **kwargs)

    return _make


@pytest.fixture
def negative_exam(make_exam, make_question):
    """10 marks, 5 MCQs worth 2 each, -0.66 per wrong answer. Correct option is 'a'."""
    exam = make_exam(
        title="Negative Marking Test",
        negative_marking=True,
        correct_mark=Decimal("2"),
        incorrect_mark=Decimal("-0.66"),
    )
    for number in range(1, 6):
        make_question(exam, number, marks=Decimal("2"))
    return exam


@pytest.fixture
def descriptive_exam(make_exam, make_question):
    exam = make_exam(title="Essay Paper", total_marks=Decimal("20"))
    for number in range(1, 3):
        make_question(exam, number, Question.QuestionType.DESCRIPTIVE, marks=Decimal("10"), word_limit=300)
    return exam


@pytest.fixture
def start_attempt(db):
    def _start(user, exam):
        return AttemptService.create(user=user, exam_id=exam.id)

    return _start


@pytest.fixture
def write_answer(db):
    """Insert an answer row directly, bypassing the ledger rules."""
    def _write(attempt, question, **kwargs):
        return Answer.objects.create(attempt=attempt, question=question, **kwargs)

    return _write


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client
