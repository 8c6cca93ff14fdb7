"""
Shared CRUD handlers for reviewable content (OSCE stations and SBA submissions).

The station and submission endpoints differ only in the model and the field
rules; both run every request through core.policy before touching the ORM.
"""
import logging

from django.db import transaction
from django.http import JsonResponse

from core.exceptions import InvalidField, ScoringError
from core.models import OsceStation, Submission, User
from core.policy import (
    Caller,
    check_delete,
    check_view,
    listing_filter,
    parse_status_filter,
    resolve_create,
    resolve_update,
)
from core.utils.audit import log_action
from core.utils.http import get_or_not_found, parse_json_body
from core.utils.notifications import notify_review_decision

audit_logger = logging.getLogger('meduaid.audit')
scoring_logger = logging.getLogger('meduaid.scoring')

# Plain equality filters accepted on list endpoints
TEXT_FILTERS = ('category', 'subject', 'topic')


def parse_writer_param(value):
    if value in (None, ''):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidField(f'writer must be a user id (got {value})')


def filtered_queryset(caller, model, params):
    """Apply the caller's visibility rules plus the request's filters."""
    listing = listing_filter(
        caller,
        statuses=parse_status_filter(params.get('status')),
        writer=parse_writer_param(params.get('writer')),
    )
    qs = model.objects.select_related('writer').filter(**listing.filters)
    if listing.excludes:
        qs = qs.exclude(**listing.excludes)
    for name in TEXT_FILTERS:
        if params.get(name):
            qs = qs.filter(**{name: params[name]})
    return qs


def list_content(request, model):
    caller = Caller.from_user(request.user)
    items = filtered_queryset(caller, model, request.GET).order_by('-created_at', '-id')
    return JsonResponse([item.to_dict() for item in items], safe=False)


def _label(rules):
    return rules.label[:1].upper() + rules.label[1:]


def _log_scoring_rejection(request, model, exc, content_id=None):
    scoring_logger.info(
        'SCORING_REJECTED | user=%s | type=%s | id=%s | code=%s | %s',
        request.user.pk, model.CONTENT_TYPE, content_id or '-', exc.code, exc.message,
    )


def create_content(request, model, rules):
    caller = Caller.from_user(request.user)
    data = parse_json_body(request)

    try:
        applied = resolve_create(caller, rules, data)
    except ScoringError as exc:
        _log_scoring_rejection(request, model, exc)
        raise

    changes = applied.changes
    if str(changes['writer_id']) != str(caller.id):
        writer = get_or_not_found(
            User.objects.filter(is_active=True), 'Writer not found',
            pk=parse_writer_param(changes['writer_id']),
        )
        changes['writer_id'] = writer.pk

    with transaction.atomic():
        item = model()
        item.apply_changes(changes)
        item.save()
        log_action(
            request, 'CREATE', model.__name__, item.id,
            f'{_label(rules)} created for writer {item.writer_id} ({item.status})',
        )

    audit_logger.info(
        'CONTENT_CREATED | user=%s | type=%s | id=%s | writer=%s | status=%s',
        caller.id, model.CONTENT_TYPE, item.id, item.writer_id, item.status,
    )
    return JsonResponse(item.to_dict(), status=201)


def _load(model, rules, pk):
    return get_or_not_found(
        model.objects.select_related('writer'), f'{_label(rules)} not found', pk=pk,
    )


def get_content(request, model, rules, pk):
    caller = Caller.from_user(request.user)
    item = _load(model, rules, pk)
    check_view(caller, item.content_state())
    return JsonResponse(item.to_dict())


def update_content(request, model, rules, pk):
    caller = Caller.from_user(request.user)
    patch = parse_json_body(request)
    item = _load(model, rules, pk)
    previous_status = item.status

    try:
        applied = resolve_update(caller, rules, item.content_state(), patch)
    except ScoringError as exc:
        _log_scoring_rejection(request, model, exc, item.id)
        raise

    with transaction.atomic():
        item.apply_changes(applied.changes)
        item.save()
        status_changed = item.status != previous_status
        action = 'REVIEW' if caller.is_admin and status_changed else 'UPDATE'
        log_action(
            request, action, model.__name__, item.id,
            f'{_label(rules)} updated ({previous_status} -> {item.status})',
            extra_data={'fields': sorted(applied.changes), 'rescored': applied.rescored},
        )
        if caller.is_admin:
            notify_review_decision(item, previous_status)

    if status_changed:
        audit_logger.info(
            'STATUS_CHANGE | user=%s | type=%s | id=%s | %s -> %s',
            caller.id, model.CONTENT_TYPE, item.id, previous_status, item.status,
        )
    return JsonResponse(item.to_dict())


def delete_content(request, model, rules, pk):
    caller = Caller.from_user(request.user)
    item = _load(model, rules, pk)
    check_delete(caller, item.content_state())

    item_id, status = item.id, item.status
    with transaction.atomic():
        item.delete()
        log_action(
            request, 'DELETE', model.__name__, item_id,
            f'{_label(rules)} deleted (was {status})',
        )

    audit_logger.info(
        'CONTENT_DELETED | user=%s | type=%s | id=%s | status=%s',
        caller.id, model.CONTENT_TYPE, item_id, status,
    )
    return JsonResponse({'message': f'{_label(rules)} deleted'})


def merged_content(caller, params=None):
    """SBA submissions and OSCE stations the caller can see, newest first."""
    params = params or {}
    items = list(filtered_queryset(caller, Submission, params))
    items += list(filtered_queryset(caller, OsceStation, params))
    items.sort(key=lambda item: (item.created_at or 0, item.id), reverse=True)
    return items

