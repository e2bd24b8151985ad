# assessments/services/attempt_service.py
import logging
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from exams.models import Exam
from notifications import dispatch as notify
from payments.entitlements import has_access

from ..exceptions import AttemptConflict, AttemptLocked
from ..models import Answer, Attempt
from ..scoring import midpoint_policy, score_attempt
from ..transitions import STAFF_ROLES, STUDENT_TARGETS, AttemptStatus, Role, ensure_transition

logger = logging.getLogger(__name__)

User = get_user_model()

ASSIGNED = "Assigned"

# Attempt fields a teacher/admin may overwrite directly
EVALUATOR_FIELDS = (
    "evaluation_status",
    "feedback",
    "correct_answers",
    "incorrect_answers",
    "unattempted",
    "accuracy",
    "rank",
    "answer_sheet_url",
)


def descriptive_policy():
    return midpoint_policy(getattr(settings, "DESCRIPTIVE_CORRECT_RATIO", "0.5"))


def get_attempt(attempt_id, *, for_update=False):
    qs = Attempt.objects.select_related("exam")
    if for_update:
        qs = qs.select_for_update(of=("self",))
    attempt = qs.filter(id=attempt_id).first()
    if attempt is None:
        raise NotFound(f"Attempt with ID {attempt_id} not found")
    return attempt


class AttemptService:
    """
    Attempt lifecycle: creation, student submission, evaluator overrides,
    removal and evaluator assignment.
    """

    @staticmethod
    def create(*, user, exam_id, time_spent=0) -> Attempt:
        exam = Exam.objects.filter(id=exam_id, is_active=True).first()
        if exam is None:
            raise NotFound(f"Exam with ID {exam_id} not found or is inactive")

        if not has_access(user, exam.id):
            raise PermissionDenied("You do not have access to this exam")

        if Attempt.objects.filter(user=user, exam=exam, status=AttemptStatus.IN_PROGRESS).exists():
            raise AttemptConflict()

        grace = timedelta(seconds=getattr(settings, "ATTEMPT_START_GRACE_SECONDS", 120))
        try:
            # The partial unique constraint closes the race between the check above and this insert
            with transaction.atomic():
                attempt = Attempt.objects.create(
                    user=user,
                    exam=exam,
                    status=AttemptStatus.IN_PROGRESS,
                    max_score=exam.total_marks,
                    start_time=timezone.now() + grace,
                    time_spent=time_spent or 0,
                )
        except IntegrityError:
            raise AttemptConflict()

        logger.info(f"Attempt {attempt.id} started by user {user.id} on exam {exam.id}")
        return attempt

    @staticmethod
    def _score(attempt):
        """
        Run the scoring engine for ``attempt``.

        Returns ``(result, answers)`` or ``(None, [])`` when scoring fails;
        a failure is logged and must not stop the submission.
        """
        try:
            with transaction.atomic():
                answers = list(attempt.answers.all())
                questions = list(attempt.exam.questions.all())
                result = score_attempt(attempt.exam, answers, questions, descriptive_policy())
        except Exception:
            logger.exception(f"Scoring failed for attempt {attempt.id}; leaving score unset")
            return None, []
        return result, answers

    @staticmethod
    def _close(attempt, status):
        """Move an in-progress attempt to SUBMITTED/COMPLETED and write its score."""
        now = timezone.now()
        attempt.status = status
        if status == AttemptStatus.SUBMITTED:
            attempt.submit_time = now
        else:
            attempt.end_time = now

        result, answers = AttemptService._score(attempt)
        if result is None:
            return

        attempt.score = result.score
        attempt.percentage = attempt.percentage_for(result.score)
        attempt.correct_answers = result.correct_answers
        attempt.incorrect_answers = result.incorrect_answers
        attempt.unattempted = result.unattempted
        attempt.accuracy = result.accuracy

        # Submission-time marks replace whatever was computed when answers were written
        rescored = []
        for answer in answers:
            if answer.id in result.answer_marks:
                answer.marks = result.answer_marks[answer.id]
                rescored.append(answer)
        if rescored:
            Answer.objects.bulk_update(rescored, ["marks"])

    @staticmethod
    def submit(*, attempt_id, user, time_spent=None) -> Attempt:
        with transaction.atomic():
            attempt = get_attempt(attempt_id, for_update=True)
            if attempt.user_id != user.id:
                raise PermissionDenied("You can only submit your own attempts")
            ensure_transition(attempt.status, AttemptStatus.SUBMITTED, Role.STUDENT)

            if time_spent is not None:
                attempt.time_spent = time_spent
            AttemptService._close(attempt, AttemptStatus.SUBMITTED)
            attempt.save()

        logger.info(f"Attempt {attempt.id} submitted with score {attempt.score}")
        return attempt

    @staticmethod
    def student_update(*, attempt_id, user, status=None, time_spent=None) -> Attempt:
        if status is not None and status not in STUDENT_TARGETS:
            raise ValidationError("Invalid status update")

        if status == AttemptStatus.SUBMITTED:
            return AttemptService.submit(attempt_id=attempt_id, user=user, time_spent=time_spent)

        with transaction.atomic():
            attempt = get_attempt(attempt_id, for_update=True)
            if attempt.user_id != user.id:
                raise PermissionDenied("You can only update your own attempts")
            if not attempt.is_writable:
                raise AttemptLocked("This attempt is no longer in progress")

            if time_spent is not None:
                attempt.time_spent = time_spent
            if status == AttemptStatus.COMPLETED:
                ensure_transition(attempt.status, AttemptStatus.COMPLETED, Role.STUDENT)
                AttemptService._close(attempt, AttemptStatus.COMPLETED)
            attempt.save()
        return attempt

    @staticmethod
    def evaluator_update(*, attempt_id, actor, data) -> Attempt:
        role = actor.acting_role
        if role not in STAFF_ROLES:
            raise PermissionDenied("Only teachers and admins can evaluate attempts")

        status = data.get("status")
        if status is not None and status not in (AttemptStatus.EVALUATED, AttemptStatus.COMPLETED):
            raise ValidationError("Evaluators can only set status to EVALUATED or COMPLETED")

        with transaction.atomic():
            attempt = get_attempt(attempt_id, for_update=True)

            if status == AttemptStatus.COMPLETED:
                # Force-close a running attempt
                ensure_transition(attempt.status, AttemptStatus.COMPLETED, role)
                AttemptService._close(attempt, AttemptStatus.COMPLETED)

            for name in EVALUATOR_FIELDS:
                if name in data:
                    setattr(attempt, name, data[name])

            if "score" in data:
                attempt.score = data["score"]
                attempt.percentage = attempt.percentage_for(attempt.score)

            newly_evaluated = False
            if status == AttemptStatus.EVALUATED:
                if attempt.status != AttemptStatus.EVALUATED:
                    ensure_transition(attempt.status, AttemptStatus.EVALUATED, role)
                    newly_evaluated = True
                attempt.status = AttemptStatus.EVALUATED
                attempt.evaluated_by = actor

            attempt.save()
            if newly_evaluated:
                notify.attempt_evaluated(attempt)

        if newly_evaluated:
            logger.info(f"Attempt {attempt.id} marked evaluated by {actor.id}")
        return attempt

    @staticmethod
    def remove(*, attempt_id, actor) -> int:
        attempt = get_attempt(attempt_id)
        if not actor.is_admin and attempt.user_id != actor.id:
            raise PermissionDenied("You can only delete your own attempts")

        removed_id = attempt.id
        attempt.delete()
        logger.info(f"Attempt {removed_id} deleted by user {actor.id}")
        return removed_id

    @staticmethod
    def assign_evaluator(*, attempt_id, evaluator_id, admin) -> Attempt:
        if not admin.is_admin:
            raise PermissionDenied("Only admins can assign attempts to evaluators")

        with transaction.atomic():
            attempt = get_attempt(attempt_id, for_update=True)

            evaluator = User.objects.filter(id=evaluator_id).first()
            if evaluator is None:
                raise NotFound(f"Evaluator with ID {evaluator_id} not found")
            if evaluator.role != User.Role.TEACHER:
                raise ValidationError("Evaluator must be a teacher")

            attempt.evaluated_by = evaluator
            attempt.evaluation_status = ASSIGNED
            attempt.save(update_fields=["evaluated_by", "evaluation_status", "updated_at"])
            notify.evaluation_assigned(attempt, evaluator)

        logger.info(f"Attempt {attempt.id} assigned to evaluator {evaluator.id}")
        return attempt
