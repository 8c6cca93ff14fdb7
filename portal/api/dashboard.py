"""
Portal API – dashboard statistics for admins and writers.
"""
from collections import Counter

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from core.models import User, STATUSES
from core.utils.http import api_login_required

from .content import merged_content
from .permissions import require_admin, require_writer


def _status_breakdown(items):
    counts = Counter(item.status for item in items)
    return {status: counts.get(status, 0) for status in STATUSES}


def _type_breakdown(items):
    counts = Counter(item.CONTENT_TYPE for item in items)
    return {'SBA': counts.get('SBA', 0), 'OSCE': counts.get('OSCE', 0)}


@api_login_required
@require_GET
def admin_stats(request):
    """GET /api/admin/stats"""
    caller = require_admin(request)
    items = merged_content(caller)
    recent_limit = getattr(settings, 'PORTAL_RECENT_LIMIT', 5)

    return JsonResponse({
        'total_users': User.objects.count(),
        'total_writers': User.objects.filter(role=User.ROLE_WRITER, is_superuser=False).count(),
        'total_submissions': len(items),
        'submissions_by_status': _status_breakdown(items),
        'submissions_by_type': _type_breakdown(items),
        'recent_submissions': [item.to_dict() for item in items[:recent_limit]],
    })


@api_login_required
@require_GET
def all_submissions(request):
    """GET /api/admin/submissions – SBA + OSCE merged, ?status=&writer=&category="""
    caller = require_admin(request)
    items = merged_content(caller, request.GET)
    return JsonResponse({'submissions': [item.to_dict() for item in items]})


@api_login_required
@require_GET
def get_writers(request):
    """GET /api/admin/writers"""
    require_admin(request)
    writers = User.objects.filter(
        role=User.ROLE_WRITER, is_superuser=False, is_active=True,
    ).order_by('name')
    return JsonResponse([w.to_summary() for w in writers], safe=False)


@api_login_required
@require_GET
def writer_stats(request):
    """GET /api/writer/stats"""
    caller = require_writer(request)
    items = merged_content(caller)
    recent_limit = getattr(settings, 'PORTAL_RECENT_LIMIT', 5)

    return JsonResponse({
        'total_submissions': len(items),
        'submissions_by_status': _status_breakdown(items),
        'submissions_by_type': _type_breakdown(items),
        'recent_submissions': [item.to_dict() for item in items[:recent_limit]],
        'penalty_count': request.user.penalties.count(),
        'unread_notifications': request.user.notifications.filter(read=False).count(),
    })
