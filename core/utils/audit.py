"""
Audit trail helpers: persist an AuditLog row for a request.
"""
from core.models.audit import AuditLog


def get_client_ip(request):
    """Client IP, preferring the first X-Forwarded-For hop."""
    if request is None:
        return None
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR') or None


def _actor(request):
    """(user, username) for the request; system actions have no user."""
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user, user.email
    return None, 'system'


def log_action(request, action, resource_type, resource_id='', description='', extra_data=None):
    """
    Record an audit row.

    `request` may be None for management commands. `resource_id` is stored
    as text so ids of any model fit the same column.
    """
    user, username = _actor(request)
    return AuditLog.objects.create(
        user=user,
        username=username,
        action=action,
        resource_type=resource_type,
        resource_id='' if resource_id is None else str(resource_id),
        description=description,
        ip_address=get_client_ip(request),
        user_agent=request.META.get('HTTP_USER_AGENT', '') if request else '',
        extra_data=extra_data,
    )
