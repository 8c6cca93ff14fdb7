"""
Middleware for the MeduAid portal: API error translation and security headers.
"""
import logging

from django.http import JsonResponse

from core.exceptions import PortalError

logger = logging.getLogger(__name__)


class ApiErrorMiddleware:
    """
    Turns domain errors (core.exceptions.PortalError) raised by a view into
    JSON responses carrying the error's message, code and HTTP status.

    Anything else propagates to Django's 500 handling untouched.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, PortalError):
            return None

        user = getattr(request, 'user', None)
        logger.info(
            'API_ERROR | code=%s | status=%s | user=%s | %s %s | %s',
            exception.code,
            exception.status_code,
            getattr(user, 'pk', None),
            request.method,
            request.path,
            exception.message,
        )
        return JsonResponse(exception.to_dict(), status=exception.status_code)


class SecurityHeadersMiddleware:
    """
    Hardening headers for every response.

    JSON responses get a deny-all Content-Security-Policy; the Django admin
    pages keep Django's defaults so their styles and scripts still load.
    """

    JSON_CSP = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"
    HEADERS = {
        'Referrer-Policy': 'strict-origin-when-cross-origin',
        'Permissions-Policy': 'camera=(), microphone=(), geolocation=(), payment=()',
        'Cross-Origin-Opener-Policy': 'same-origin',
    }

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        for name, value in self.HEADERS.items():
            response.setdefault(name, value)
        if response.get('Content-Type', '').startswith('application/json'):
            response.setdefault('Content-Security-Policy', self.JSON_CSP)
        return response
