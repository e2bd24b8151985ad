# payments/entitlements.py
"""
Exam access checks backed by the purchase ledger.

Access is always derived from the current purchase rows; nothing is cached
on the attempt, so a refund or expiry takes effect on the next attempt.
"""
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound

from exams.models import Exam
from .models import Purchase


def active_purchases(user, now=None):
    """Completed purchases of ``user`` whose validity has not ended."""
    now = now or timezone.now()
    return Purchase.objects.filter(
        user=user,
        status=Purchase.Status.COMPLETED,
    ).filter(Q(valid_till__isnull=True) | Q(valid_till__gte=now))


def has_access(user, exam_id, now=None):
    """
    True when ``user`` may start an attempt on the exam.

    Free exams are open to everyone. Paid exams need an active purchase of
    either the exam itself or the test series it belongs to.
    """
    exam = Exam.objects.filter(id=exam_id).only('id', 'is_free', 'test_series_id').first()
    if exam is None:
        raise NotFound(f"Exam with ID {exam_id} not found")

    if exam.is_free:
        return True

    coverage = Q(type=Purchase.Type.INDIVIDUAL_EXAM, exam_id=exam.id)
    if exam.test_series_id:
        coverage |= Q(type=Purchase.Type.TEST_SERIES, test_series_id=exam.test_series_id)

    return active_purchases(user, now=now).filter(coverage).exists()
