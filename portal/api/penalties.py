"""
Portal API – writer penalty endpoints.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from core.exceptions import InvalidField, NotFound
from core.models import Penalty, User
from core.utils.audit import log_action
from core.utils.http import api_login_required, get_or_not_found, parse_json_body

from .permissions import require_admin, require_writer

audit_logger = logging.getLogger('meduaid.audit')


def _find_writer(reference):
    """Writers are referenced by id or by email."""
    reference = str(reference).strip()
    lookup = Q(email__iexact=reference)
    if reference.isdigit():
        lookup |= Q(pk=int(reference))
    writer = User.objects.filter(lookup, role=User.ROLE_WRITER).first()
    if writer is None:
        raise NotFound('Writer not found')
    return writer


def _parse_amount(value):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidField(f'amount must be a number (got {value})')
    if not amount.is_finite() or amount < 0:
        raise InvalidField('amount must be a non-negative number')
    return amount.quantize(Decimal('0.01'))


def _create_penalty(request):
    data = parse_json_body(request)
    writer_ref = data.get('writer')
    reason = str(data.get('reason') or '').strip()
    penalty_type = data.get('type') or Penalty.TYPE_WARNING

    if not writer_ref or not reason:
        raise InvalidField('Missing required fields: writer and reason')
    if penalty_type not in dict(Penalty.TYPE_CHOICES):
        raise InvalidField(f'Invalid penalty type "{penalty_type}"')

    amount = None
    if penalty_type == Penalty.TYPE_MONETARY:
        if data.get('amount') in (None, ''):
            raise InvalidField('Amount is required for monetary penalties')
        amount = _parse_amount(data['amount'])

    writer = _find_writer(writer_ref)
    with transaction.atomic():
        penalty = Penalty.objects.create(
            writer=writer, reason=reason, penalty_type=penalty_type, amount=amount,
        )
        log_action(request, 'CREATE', 'Penalty', penalty.id,
                   f'{penalty_type} penalty for {writer.email}: {reason}')

    audit_logger.info(
        'PENALTY_CREATED | admin=%s | writer=%s | type=%s | amount=%s',
        request.user.email, writer.email, penalty_type, amount,
    )
    return JsonResponse(penalty.to_dict(), status=201)


@api_login_required
@require_http_methods(['GET', 'POST'])
def admin_penalties(request):
    """
    GET  /api/admin/penalties   newest first
    POST /api/admin/penalties   {writer: id|email, reason, type: warning|monetary, amount}
    """
    require_admin(request)
    if request.method == 'POST':
        return _create_penalty(request)

    penalties = Penalty.objects.select_related('writer')
    return JsonResponse({'penalties': [p.to_dict() for p in penalties]})


@api_login_required
@require_http_methods(['DELETE'])
def delete_penalty(request, penalty_id):
    """DELETE /api/admin/penalties/<id>"""
    require_admin(request)
    penalty = get_or_not_found(Penalty, 'Penalty not found', pk=penalty_id)

    with transaction.atomic():
        penalty.delete()
        log_action(request, 'DELETE', 'Penalty', penalty_id, 'Penalty removed')

    audit_logger.info(
        'PENALTY_DELETED | admin=%s | penalty=%s', request.user.email, penalty_id,
    )
    return JsonResponse({'message': 'Penalty removed'})


@api_login_required
@require_GET
def writer_penalties(request):
    """GET /api/writer/penalties – the caller's own penalties."""
    require_writer(request)
    penalties = Penalty.objects.filter(writer=request.user).select_related('writer')
    return JsonResponse({'penalties': [p.to_dict() for p in penalties]})
