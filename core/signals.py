"""
Login audit signal handlers.

Listens to Django's user_logged_in, user_login_failed and user_logged_out
signals and writes one line per authentication event to the
'meduaid.auth' logger.
"""
import logging

from django.contrib.auth.signals import user_logged_in, user_login_failed, user_logged_out
from django.dispatch import receiver

from core.utils.audit import get_client_ip

auth_logger = logging.getLogger('meduaid.auth')


@receiver(user_logged_in)
def log_successful_login(sender, request, user, **kwargs):
    """Record a successful login attempt."""
    user_agent = request.META.get('HTTP_USER_AGENT', '') if request else ''
    auth_logger.info(
        'LOGIN_SUCCESS | user=%s | role=%s | ip=%s | ua=%s',
        user.email,
        getattr(user, 'role', ''),
        get_client_ip(request),
        user_agent[:120],
    )


@receiver(user_login_failed)
def log_failed_login(sender, credentials, request=None, **kwargs):
    """Record a failed login attempt."""
    user_agent = request.META.get('HTTP_USER_AGENT', '') if request else ''
    auth_logger.warning(
        'LOGIN_FAILED | email=%s | ip=%s | ua=%s',
        credentials.get('email', credentials.get('username', '<unknown>')),
        get_client_ip(request),
        user_agent[:120],
    )


@receiver(user_logged_out)
def log_logout(sender, request, user, **kwargs):
    if user is None:
        return
    auth_logger.info(
        'LOGOUT | user=%s | ip=%s',
        user.email,
        get_client_ip(request),
    )
