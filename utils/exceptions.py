import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class RegionAccessDenied(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Access denied. You do not have access to this region.'
    default_code = 'region_access_denied'


class WorkflowError(APIException):
    """Raised when a record cannot move to the requested state."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This operation is not allowed in the current state.'
    default_code = 'invalid_state'


def _first_message(detail):
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ''
    return str(detail)


def registry_exception_handler(exc, context):
    """
    Wrap DRF's default error responses in the API envelope:
    {"success": false, "message": "...", "errors": {...}}
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    body = {'success': False}

    if isinstance(exc, ValidationError):
        body['message'] = _first_message(data) or 'Validation failed'
        body['errors'] = data if isinstance(data, dict) else {'non_field_errors': data}
    elif isinstance(data, dict) and 'detail' in data:
        body['message'] = str(data['detail'])
    else:
        body['message'] = _first_message(data)

    if response.status_code >= 500:
        logger.error("API error in %s: %s", context.get('view').__class__.__name__, body['message'])

    response.data = body
    return response
