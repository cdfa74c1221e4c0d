import logging

from rest_framework import status
from rest_framework.exceptions import PermissionDenied, NotAuthenticated
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class RoleDenied(PermissionDenied):
    """Permission failure that tells the client where to send the user."""

    def __init__(self, detail=None, redirect_to='/home'):
        super().__init__(detail)
        self.redirect_to = redirect_to


def first_message(detail):
    """Return the first human readable message from a DRF error detail."""
    if isinstance(detail, dict):
        if 'error' in detail:
            return first_message(detail['error'])
        for key, value in detail.items():
            message = first_message(value)
            if key in ('non_field_errors', 'detail'):
                return message
            return f"{key}: {message}"
        return ''
    if isinstance(detail, (list, tuple)):
        return first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None

    details = response.data
    body = {'error': first_message(details), 'details': details}

    if isinstance(exc, RoleDenied):
        body['redirect_to'] = exc.redirect_to
    elif isinstance(exc, NotAuthenticated):
        body['redirect_to'] = '/'

    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"Unhandled API error in {context.get('view').__class__.__name__}: {body['error']}")

    response.data = body
    return response
