import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger("ktpscan.errors")


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ""
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def envelope_exception_handler(exc, context):
    """
    Toutes les erreurs au format {"status": "error", "message": ...}.
    - exceptions DRF (validation, parse, 404...) : code d'origine, détail dans "errors"
    - le reste (réseau OCR, bug) : 500, trace loguée
    """
    response = exception_handler(exc, context)
    if response is not None:
        response.data = {
            "status": "error",
            "message": _first_message(response.data),
            "errors": response.data,
        }
        return response

    view = context.get("view")
    logger.error("Unhandled error in %s", type(view).__name__ if view else "view", exc_info=exc)
    return Response(
        {"status": "error", "message": "Internal server error", "error": str(exc)},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
