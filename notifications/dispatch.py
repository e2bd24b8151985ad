"""
Best-effort notification sink.

Every entry point here swallows and logs its own failures: a notification
must never roll back or fail the request that triggered it.
"""
import logging
from functools import partial

import requests
from django.conf import settings
from django.db import transaction

from .models import Notification

logger = logging.getLogger(__name__)


def _post_webhook(payload):
    url = getattr(settings, 'NOTIFICATION_WEBHOOK_URL', '')
    if not url:
        return
    timeout = getattr(settings, 'NOTIFICATION_WEBHOOK_TIMEOUT', 5)
    try:
        resp = requests.post(url, json=payload, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.Timeout:
        logger.error(f"Notification webhook timed out for user {payload.get('user_id')}")
    except requests.exceptions.RequestException as e:
        logger.error(f"Notification webhook failed: {e}")


def dispatch(user_id, title, message, type=Notification.Type.SYSTEM, action_data=None):
    """Store an in-app notification and forward it to the webhook, if configured."""
    try:
        notification = Notification.objects.create(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            action_data=action_data or {},
        )
    except Exception:
        logger.exception(f"Could not store notification '{title}' for user {user_id}")
        return None

    _post_webhook({
        "id": notification.id,
        "user_id": user_id,
        "title": title,
        "message": message,
        "type": type,
        "action_data": action_data or {},
    })
    return notification


def dispatch_on_commit(user_id, title, message, type=Notification.Type.SYSTEM, action_data=None):
    """Queue ``dispatch`` to run once the surrounding transaction commits."""
    transaction.on_commit(partial(dispatch, user_id, title, message, type, action_data))


def attempt_evaluated(attempt):
    dispatch_on_commit(
        attempt.user_id,
        "Exam evaluated",
        f"Your attempt at {attempt.exam.title} has been evaluated. Score: {attempt.score}",
        Notification.Type.ATTEMPT_EVALUATED,
        {"attempt_id": attempt.id, "exam_id": attempt.exam_id},
    )


def evaluation_assigned(attempt, evaluator):
    dispatch_on_commit(
        evaluator.id,
        "New evaluation assigned",
        f"An attempt at {attempt.exam.title} is waiting for your evaluation.",
        Notification.Type.EVALUATION_ASSIGNED,
        {"attempt_id": attempt.id, "exam_id": attempt.exam_id},
    )
