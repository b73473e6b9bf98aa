import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from accounts.auth_client import AuthError
from dispatch.state_machines.ride_state import RideStateException
from rides.models import RecordDecodeError
from store.document_store import StoreError
from store.repository import RecordNotFound

logger = logging.getLogger(__name__)


def exception_handler(exc, context):
    """
    DRF's handler first; then map the project's own exceptions to responses.
    """
    response = drf_exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, RideStateException):
        return Response({"error": str(exc)}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, RecordNotFound):
        return Response({"error": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, AuthError):
        return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, RecordDecodeError):
        logger.error(f"Unreadable record: {exc}")
        return Response({"error": str(exc)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)
    if isinstance(exc, StoreError):
        logger.error(f"Store failure: {exc}")
        return Response({"error": "Backend store unavailable"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return None
