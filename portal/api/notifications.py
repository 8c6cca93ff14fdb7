"""
Portal API – writer notification endpoints.
"""
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from core.models import Notification
from core.utils.http import api_login_required, get_or_not_found


@api_login_required
@require_GET
def get_notifications(request):
    """GET /api/writer/notifications – ?unread=true for unread only."""
    qs = Notification.objects.filter(user=request.user)
    if request.GET.get('unread', 'false').lower() == 'true':
        qs = qs.filter(read=False)
    return JsonResponse({
        'notifications': [n.to_dict() for n in qs],
        'unread_count': Notification.objects.filter(user=request.user, read=False).count(),
    })


@api_login_required
@require_POST
def mark_notification_read(request, notification_id):
    """POST /api/writer/notifications/<id>/read"""
    notification = get_or_not_found(
        Notification.objects.filter(user=request.user), 'Notification not found',
        pk=notification_id,
    )
    if not notification.read:
        notification.mark_read()
    return JsonResponse(notification.to_dict())
