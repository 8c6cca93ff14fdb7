"""
Project-level error handlers.

Every URL under this project answers JSON, so Django's 400/403/404/500
pages are replaced with the same {"error", "code"} body the API uses.
"""
import logging

from django.http import JsonResponse

logger = logging.getLogger(__name__)


def _error(message, code, status):
    return JsonResponse({'error': message, 'code': code}, status=status)


def handler400(request, exception=None):
    return _error('Bad request', 'BadRequest', 400)


def handler403(request, exception=None):
    return _error('Forbidden', 'Forbidden', 403)


def handler404(request, exception=None):
    return _error(f'No endpoint at {request.path}', 'NotFound', 404)


def handler500(request):
    # Details stay in the server log
    logger.error('SERVER_ERROR | %s %s', request.method, request.path)
    return _error('Server error', 'ServerError', 500)
