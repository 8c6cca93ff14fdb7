"""
Portal API – OSCE station endpoints.
"""
from django.views.decorators.http import require_http_methods

from core.models import OsceStation
from core.policy import STATION_RULES
from core.utils.http import api_login_required

from . import content


@api_login_required
@require_http_methods(['GET', 'POST'])
def stations_collection(request):
    """
    GET  /api/osce-stations/   ?status=pending,rejected&category=&writer=
    POST /api/osce-stations/   create (writers for themselves, admins for anyone)
    """
    if request.method == 'POST':
        return content.create_content(request, OsceStation, STATION_RULES)
    return content.list_content(request, OsceStation)


@api_login_required
@require_http_methods(['GET', 'PATCH', 'DELETE'])
def station_detail(request, station_id):
    """GET / PATCH / DELETE /api/osce-stations/<id>"""
    if request.method == 'PATCH':
        return content.update_content(request, OsceStation, STATION_RULES, station_id)
    if request.method == 'DELETE':
        return content.delete_content(request, OsceStation, STATION_RULES, station_id)
    return content.get_content(request, OsceStation, STATION_RULES, station_id)
