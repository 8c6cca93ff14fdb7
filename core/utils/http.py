"""
Request helpers shared by the JSON API views.
"""
import json
from functools import wraps

from django.http import JsonResponse

from core.exceptions import InvalidPayload, NotFound


def parse_json_body(request):
    """Parse the request body as a JSON object; raise InvalidPayload otherwise."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, ValueError):
        raise InvalidPayload()
    if not isinstance(data, dict):
        raise InvalidPayload('Request body must be a JSON object')
    return data


def get_or_not_found(queryset_or_model, label='Not found', **lookup):
    """Like get_object_or_404, but raises the portal's NotFound error."""
    manager = getattr(queryset_or_model, '_default_manager', queryset_or_model)
    try:
        return manager.get(**lookup)
    except (manager.model.DoesNotExist, ValueError):
        raise NotFound(label)


def api_login_required(view_func):
    """login_required for JSON endpoints: 401 instead of a redirect."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse(
                {'error': 'Authentication required', 'code': 'NotAuthenticated'},
                status=401,
            )
        return view_func(request, *args, **kwargs)
    return wrapper
