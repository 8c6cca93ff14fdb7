"""
Portal API – SBA question submission endpoints.
"""
from django.views.decorators.http import require_http_methods

from core.models import Submission
from core.policy import SUBMISSION_RULES
from core.utils.http import api_login_required

from . import content


@api_login_required
@require_http_methods(['GET', 'POST'])
def submissions_collection(request):
    """
    GET  /api/submissions/   ?status=&category=&subject=&topic=&writer=
    POST /api/submissions/
    """
    if request.method == 'POST':
        return content.create_content(request, Submission, SUBMISSION_RULES)
    return content.list_content(request, Submission)


@api_login_required
@require_http_methods(['GET', 'PATCH', 'DELETE'])
def submission_detail(request, submission_id):
    """GET / PATCH / DELETE /api/submissions/<id>"""
    if request.method == 'PATCH':
        return content.update_content(request, Submission, SUBMISSION_RULES, submission_id)
    if request.method == 'DELETE':
        return content.delete_content(request, Submission, SUBMISSION_RULES, submission_id)
    return content.get_content(request, Submission, SUBMISSION_RULES, submission_id)
