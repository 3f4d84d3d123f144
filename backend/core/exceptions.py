"""
Error taxonomy shared by every app.

All domain errors are DRF ``APIException`` subclasses so they can be raised
from services and rendered by ``api_exception_handler`` without any
try/except in the views.
"""
import logging

from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class NotFound(APIException):
    """Referenced entity is absent."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'not_found'


class Conflict(APIException):
    """Uniqueness or referential-integrity violation."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Request conflicts with the current state of the resource.'
    default_code = 'conflict'


class Forbidden(APIException):
    """Authenticated caller is outside the required store scope."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to access this store.'
    default_code = 'forbidden'


class InvalidInput(APIException):
    """Malformed filter, pagination or payload values."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'invalid_input'


DOMAIN_ERRORS = (NotFound, Conflict, Forbidden, InvalidInput)


def conflict_from_integrity_error(exc, message):
    """Translate a racing unique insert into a Conflict."""
    logger.warning(f"IntegrityError translated to conflict: {exc}")
    return Conflict(message)


def api_exception_handler(exc, context):
    """
    Render domain errors as ``{'error': ..., 'code': ...}``.

    Serializer validation errors keep DRF's field -> messages body. Unhandled
    IntegrityErrors (a unique constraint lost a race) become 409s.
    """
    if isinstance(exc, IntegrityError):
        exc = conflict_from_integrity_error(exc, 'A record with these values already exists.')

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, DOMAIN_ERRORS):
        response.data = {'error': str(exc.detail), 'code': exc.get_codes()}
    elif not isinstance(exc, ValidationError) and isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {'error': str(response.data['detail'])}

    return response
