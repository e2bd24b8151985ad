# assessments/services/evaluation_service.py
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from notifications import dispatch as notify

from ..exceptions import AttemptLocked
from ..models import Answer
from ..transitions import AttemptStatus, ensure_transition
from .attempt_service import get_attempt

logger = logging.getLogger(__name__)


def _ensure_exam_owner(exam, teacher):
    if exam.teacher_id != teacher.id:
        raise PermissionDenied("You can only evaluate answers for your own exams")


def _check_marks(marks):
    if marks is None or Decimal(str(marks)) < 0:
        raise ValidationError("Marks must be zero or more")


class EvaluationService:
    """
    Manual grading of answers by the teacher who owns the exam.

    Grading errors always reach the caller; nothing here degrades silently.
    """

    @staticmethod
    def evaluate_single(*, answer_id, teacher, marks, feedback="") -> Answer:
        """Grade one answer. The attempt's aggregate score is left alone."""
        answer = Answer.objects.select_related("attempt__exam").filter(id=answer_id).first()
        if answer is None:
            raise NotFound(f"Answer with ID {answer_id} not found")
        _ensure_exam_owner(answer.attempt.exam, teacher)
        _check_marks(marks)

        with transaction.atomic():
            attempt = get_attempt(answer.attempt_id, for_update=True)
            if attempt.status == AttemptStatus.EVALUATED:
                raise AttemptLocked("This attempt has already been evaluated")

            answer.marks = marks
            answer.feedback = feedback or ""
            answer.evaluated_by = teacher
            answer.evaluated_at = timezone.now()
            answer.save(update_fields=["marks", "feedback", "evaluated_by", "evaluated_at", "updated_at"])

        logger.info(f"Answer {answer.id} evaluated by {teacher.id}: {marks}")
        return answer

    @staticmethod
    def bulk_evaluate(*, attempt_id, teacher, evaluations):
        """
        Grade many answers of one attempt and finalize it.

        ``evaluations`` is a list of ``{"question_id", "marks", "feedback"}``.
        Evaluations for questions the student never answered are ignored, not
        errors. The summed marks replace the attempt score. Everything is
        written in one transaction.
        """
        attempt = get_attempt(attempt_id)
        _ensure_exam_owner(attempt.exam, teacher)
        for evaluation in evaluations:
            _check_marks(evaluation.get("marks"))

        # A repeated question id keeps its last evaluation
        latest = {}
        for evaluation in evaluations:
            latest[evaluation["question_id"]] = evaluation

        with transaction.atomic():
            attempt = get_attempt(attempt_id, for_update=True)
            ensure_transition(attempt.status, AttemptStatus.EVALUATED, teacher.acting_role)

            answers = {
                answer.question_id: answer
                for answer in attempt.answers.filter(question_id__in=list(latest))
            }

            now = timezone.now()
            total = Decimal("0")
            count = 0
            for question_id, evaluation in latest.items():
                answer = answers.get(question_id)
                if answer is None:
                    continue
                answer.marks = evaluation["marks"]
                answer.feedback = evaluation.get("feedback") or ""
                answer.evaluated_by = teacher
                answer.evaluated_at = now
                answer.save(update_fields=["marks", "feedback", "evaluated_by", "evaluated_at", "updated_at"])
                total += Decimal(str(evaluation["marks"]))
                count += 1

            attempt.status = AttemptStatus.EVALUATED
            attempt.score = total
            attempt.percentage = attempt.percentage_for(total)
            attempt.evaluated_by = teacher
            attempt.save()
            notify.attempt_evaluated(attempt)

        logger.info(f"Attempt {attempt.id} bulk evaluated by {teacher.id}: {count} answers, score {total}")
        return {"count": count, "score": total}
