# assessments/services/answer_service.py
import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from exams.models import Question

from ..exceptions import AttemptLocked
from ..models import Answer
from ..scoring import objective_marks
from ..transitions import STAFF_ROLES
from .attempt_service import get_attempt

logger = logging.getLogger(__name__)

# Marks a field the caller did not send
UNSET = object()


def _provisional_marks(exam, question, selected_option):
    # Only negative-marking exams carry marks before submission
    if selected_option and exam.negative_marking:
        return objective_marks(exam, question, selected_option)
    return None


def _check_option(question, selected_option):
    if selected_option and question.options and selected_option not in question.options:
        raise ValidationError("Selected option is not valid for this question")


def _content_changes(exam, question, selected_option=UNSET, answer_text=UNSET):
    """
    Fields to write for a student's answer. Fields the caller did not send
    are left out, so the stored choice or text survives a time-only save.
    """
    changes = {}
    if question.is_mcq:
        if selected_option is not UNSET:
            _check_option(question, selected_option)
            changes["selected_option"] = selected_option or None
            changes["marks"] = _provisional_marks(exam, question, selected_option)
            if selected_option:
                changes["answer_text"] = None
    elif answer_text is not UNSET:
        changes["answer_text"] = answer_text
        changes["marks"] = None
        if answer_text:
            changes["selected_option"] = None
    return changes


def _ensure_owner_can_write(attempt, user):
    if attempt.user_id != user.id:
        raise PermissionDenied("You can only submit answers to your own attempts")
    if not attempt.is_writable:
        raise AttemptLocked("Cannot modify answers for a submitted or evaluated attempt")


def _can_read(attempt, actor):
    return attempt.user_id == actor.id or actor.acting_role in STAFF_ROLES


class AnswerService:
    """One answer per (attempt, question); student writes only while the attempt runs."""

    @staticmethod
    def upsert(*, user, attempt_id, question_id, selected_option=UNSET, answer_text=UNSET, time_spent=None):
        """
        Create the answer for a question or revise the existing one.

        Only the fields passed in are written. Returns ``(answer, created)``.
        """
        with transaction.atomic():
            attempt = get_attempt(attempt_id, for_update=True)
            _ensure_owner_can_write(attempt, user)

            question = Question.objects.filter(id=question_id).first()
            if question is None:
                raise NotFound(f"Question with ID {question_id} not found")
            if question.exam_id != attempt.exam_id:
                raise ValidationError("Question does not belong to the exam being attempted")

            content = _content_changes(attempt.exam, question, selected_option, answer_text)

            created = False
            answer = Answer.objects.filter(attempt=attempt, question=question).first()
            if answer is None:
                try:
                    with transaction.atomic():
                        answer = Answer.objects.create(
                            attempt=attempt, question=question, time_spent=time_spent or 0, **content
                        )
                    return answer, True
                except IntegrityError:
                    # Lost a race with a concurrent insert; fall through to update it
                    answer = Answer.objects.get(attempt=attempt, question=question)

            for name, value in content.items():
                setattr(answer, name, value)
            answer.time_spent += time_spent or 0
            answer.save()
        return answer, created

    @staticmethod
    def update(*, answer_id, user, data):
        """Revise an existing answer. ``data`` holds only the fields being changed."""
        with transaction.atomic():
            answer = Answer.objects.select_related("question").filter(id=answer_id).first()
            if answer is None:
                raise NotFound(f"Answer with ID {answer_id} not found")

            attempt = get_attempt(answer.attempt_id, for_update=True)
            if attempt.user_id != user.id:
                raise PermissionDenied("You can only update answers for your own attempts")
            if not attempt.is_writable:
                raise AttemptLocked("Cannot update answers for a completed or submitted attempt")

            changes = _content_changes(
                attempt.exam,
                answer.question,
                data.get("selected_option", UNSET),
                data.get("answer_text", UNSET),
            )
            for name, value in changes.items():
                setattr(answer, name, value)

            if data.get("time_spent") is not None:
                answer.time_spent += data["time_spent"]

            answer.save()
        return answer

    @staticmethod
    def get(*, answer_id, actor):
        answer = Answer.objects.select_related("question", "attempt").filter(id=answer_id).first()
        if answer is None or not _can_read(answer.attempt, actor):
            raise NotFound(f"Answer with ID {answer_id} not found")
        return answer

    @staticmethod
    def list_for_attempt(*, attempt_id, actor):
        attempt = get_attempt(attempt_id)
        if not _can_read(attempt, actor):
            raise PermissionDenied("You can only view answers for your own attempts")
        return (
            attempt.answers.select_related("question")
            .order_by("question__question_number", "question_id")
        )
