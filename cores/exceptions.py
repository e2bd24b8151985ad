# cores/exceptions.py
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state of the resource."
    default_code = "conflict"


def _first_message(detail):
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else ""
    if isinstance(detail, dict):
        return _first_message(next(iter(detail.values()), ""))
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render API errors as {"error": "..."}.

    Field validation errors keep their per-field breakdown under "details".
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data.get('detail') if isinstance(response.data, dict) else None
    if detail is not None:
        response.data = {"error": str(detail)}
    else:
        response.data = {"error": _first_message(response.data), "details": response.data}

    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"API error in {context.get('view').__class__.__name__}: {exc}")
    return response
