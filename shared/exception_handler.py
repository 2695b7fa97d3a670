"""
Handler personnalisé pour les exceptions Django REST Framework
"""
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

from .exceptions import QualiteError

logger = logging.getLogger(__name__)

DRF_CODES = {
    status.HTTP_400_BAD_REQUEST: 'INVALID_INPUT',
    status.HTTP_401_UNAUTHORIZED: 'UNAUTHENTICATED',
    status.HTTP_403_FORBIDDEN: 'FORBIDDEN',
    status.HTTP_404_NOT_FOUND: 'NOT_FOUND',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'METHOD_NOT_ALLOWED',
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: 'UNSUPPORTED_MEDIA_TYPE',
}


def error_response(code, message, details=None, http_status=status.HTTP_400_BAD_REQUEST):
    error = {'code': code, 'message': message}
    if details:
        error['details'] = details
    return Response({'success': False, 'error': error}, status=http_status)


def custom_exception_handler(exc, context):
    """
    Traduit les exceptions en réponse {'success': False, 'error': {...}}
    """
    view = context.get('view')
    view_name = getattr(view, '__name__', None) or type(view).__name__

    if isinstance(exc, QualiteError):
        if exc.status_code >= 500:
            logger.error(f"[{view_name}] {exc.code}: {exc.message}")
        else:
            logger.info(f"[{view_name}] {exc.code}: {exc.message}")
        return Response({'success': False, 'error': exc.as_dict()}, status=exc.status_code)

    response = exception_handler(exc, context)

    if response is None:
        logger.error(f"[{view_name}] Erreur inattendue: {exc}", exc_info=exc)
        return error_response(
            'INTERNAL_ERROR',
            'Une erreur interne est survenue',
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    code = DRF_CODES.get(response.status_code, 'ERROR')
    if isinstance(exc, drf_exceptions.ValidationError):
        return error_response(code, 'Données invalides', response.data, response.status_code)
    if isinstance(exc, Http404):
        return error_response(code, 'Ressource introuvable', http_status=response.status_code)

    message = response.data.get('detail', str(exc)) if isinstance(response.data, dict) else str(exc)
    return error_response(code, str(message), http_status=response.status_code)
