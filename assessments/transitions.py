# assessments/transitions.py
"""
Attempt lifecycle.

    IN_PROGRESS --student--> SUBMITTED --teacher/admin--> EVALUATED
    IN_PROGRESS --any role-> COMPLETED --teacher/admin--> EVALUATED
    IN_PROGRESS --teacher/admin---------------------> EVALUATED

Every mutating attempt operation asks ``can_transition`` (or
``ensure_transition``) before touching the row.
"""
from django.db import models

from cores.exceptions import ConflictError
from users.models import User


class AttemptStatus(models.TextChoices):
    IN_PROGRESS = "IN_PROGRESS", "In Progress"
    SUBMITTED = "SUBMITTED", "Submitted"
    COMPLETED = "COMPLETED", "Completed"
    EVALUATED = "EVALUATED", "Evaluated"


Role = User.Role


STAFF_ROLES = frozenset({Role.TEACHER, Role.ADMIN})
ALL_ROLES = frozenset({Role.STUDENT, Role.TEACHER, Role.ADMIN})

TRANSITIONS = {
    (AttemptStatus.IN_PROGRESS, AttemptStatus.SUBMITTED): frozenset({Role.STUDENT}),
    (AttemptStatus.IN_PROGRESS, AttemptStatus.COMPLETED): ALL_ROLES,
    # Evaluators may finalize an attempt the student never closed
    (AttemptStatus.IN_PROGRESS, AttemptStatus.EVALUATED): STAFF_ROLES,
    (AttemptStatus.SUBMITTED, AttemptStatus.EVALUATED): STAFF_ROLES,
    (AttemptStatus.COMPLETED, AttemptStatus.EVALUATED): STAFF_ROLES,
}

# Statuses a student may request through an attempt update
STUDENT_TARGETS = frozenset({AttemptStatus.SUBMITTED, AttemptStatus.COMPLETED})


class InvalidTransition(ConflictError):
    default_detail = "This status change is not allowed."
    default_code = "invalid_transition"


def can_transition(from_status, to_status, role):
    return role in TRANSITIONS.get((from_status, to_status), ())


def ensure_transition(from_status, to_status, role):
    if not can_transition(from_status, to_status, role):
        raise InvalidTransition(
            f"Cannot move attempt from {from_status} to {to_status} as {role}"
        )
