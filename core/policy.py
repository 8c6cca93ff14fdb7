"""
Access and mutation rules for reviewable content.

Every create / update / delete / read of an OSCE station or SBA submission
goes through the functions below before the ORM is touched. They take a
Caller and plain data, return the change set to persist, and raise a
core.exceptions error when the request is not allowed:

    caller   admin        any status         whitelist + status + rejection_reason
    caller   owner        draft              content; status pending|draft
    caller   owner        rejected           content; forced back to pending
    caller   owner        pending/approved   Forbidden
    caller   other        any                Forbidden

Scored content (OSCE stations) is re-validated and its total_marks
recomputed from the merged marking scheme / follow-ups whenever either
changes.
"""
from collections import namedtuple

from core.exceptions import (
    Forbidden,
    InvalidField,
    InvalidStatus,
    MissingRejectionReason,
)
from core.models.content import (
    STATUSES, STATUS_APPROVED, STATUS_DRAFT, STATUS_PENDING, STATUS_REJECTED,
)
from core.models.user import User
from core.scoring import compute_total_marks, validate_scoring_data

ROLE_ADMIN = User.ROLE_ADMIN
ROLE_WRITER = User.ROLE_WRITER

SCORING_FIELDS = ('marking_scheme', 'follow_ups')

NoneType = type(None)


class Caller(namedtuple('Caller', ['id', 'role'])):
    """Identity of the user making the request."""

    __slots__ = ()

    @classmethod
    def from_user(cls, user):
        role = ROLE_ADMIN if user.is_superuser else getattr(user, 'role', None)
        return cls(id=user.pk, role=role)

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @property
    def is_writer(self):
        return self.role == ROLE_WRITER

    def owns(self, state):
        return state.writer_id is not None and str(state.writer_id) == str(self.id)


# Persisted values the rules need; scoring fields are None for SBA submissions
ContentState = namedtuple(
    'ContentState',
    ['writer_id', 'status', 'rejection_reason', 'marking_scheme', 'follow_ups'],
    defaults=('', None, None),
)

# changes: field -> value ready for setattr; rescored: total_marks was recomputed
AppliedPatch = namedtuple('AppliedPatch', ['changes', 'rescored'])

# Keyword arguments for QuerySet.filter() / .exclude()
ListingFilter = namedtuple('ListingFilter', ['filters', 'excludes'])


class ContentRules:
    """
    Field whitelist for one content type.

    `fields` maps each writable field to the Python type(s) it accepts.
    Anything outside the whitelist is dropped; a whitelisted field with the
    wrong type raises InvalidField.
    """

    def __init__(self, label, fields, required=(), choices=None, scored=False):
        self.label = label
        self.fields = fields
        self.required = required
        self.choices = choices or {}
        self.scored = scored

    def clean(self, patch):
        cleaned = {}
        for name, types in self.fields.items():
            if name not in patch:
                continue
            if not isinstance(types, tuple):
                types = (types,)
            value = patch[name]
            if isinstance(value, bool) and bool not in types:
                raise InvalidField(f'{name} has an invalid type')
            if not isinstance(value, types):
                raise InvalidField(f'{name} has an invalid type')
            if name in self.choices and value not in self.choices[name]:
                raise InvalidField(
                    f'{name} must be one of: {", ".join(self.choices[name])}'
                )
            if name in self.required and isinstance(value, str) and not value.strip():
                raise InvalidField(f'{name} cannot be empty')
            if value is None and list in types:
                value = []
            cleaned[name] = value
        return cleaned

    def missing_required(self, cleaned):
        return [name for name in self.required if not cleaned.get(name)]


STATION_RULES = ContentRules(
    'OSCE station',
    fields={
        'category': str,
        'subject': str,
        'topic': str,
        'subtopic': (str, NoneType),
        'title': str,
        'station_type': str,
        'case_description': str,
        'history_sections': (dict, NoneType),
        'marking_scheme': (list, NoneType),
        'follow_ups': (list, NoneType),
        'images': list,
    },
    required=('category', 'subject', 'topic', 'title', 'station_type', 'case_description'),
    choices={'station_type': ('history', 'examination')},
    scored=True,
)

SUBMISSION_RULES = ContentRules(
    'SBA submission',
    fields={
        'category': str,
        'subject': str,
        'topic': str,
        'subtopic': (str, NoneType),
        'question': str,
        'choices': list,
        'explanations': list,
        'correct_choice': int,
        'reference': str,
        'difficulty': str,
        'images': list,
    },
    required=('category', 'subject', 'topic', 'question'),
    choices={'difficulty': ('easy', 'normal', 'hard')},
)


def parse_status_filter(raw):
    """'rejected,draft' -> ['rejected', 'draft']; unknown values raise InvalidStatus."""
    if not raw:
        return []
    statuses = [part.strip() for part in str(raw).split(',') if part.strip()]
    for status in statuses:
        if status not in STATUSES:
            raise InvalidStatus(_invalid_status_message(status))
    return statuses


def _invalid_status_message(status):
    return f'Invalid status "{status}". Expected one of: {", ".join(STATUSES)}'


def _text_or_empty(value, name):
    if value is None:
        return ''
    if not isinstance(value, str):
        raise InvalidField(f'{name} has an invalid type')
    return value.strip()


def _require_role(caller):
    if not (caller.is_admin or caller.is_writer):
        raise Forbidden()


def _clean_subtopic(changes):
    if 'subtopic' in changes and changes['subtopic'] is None:
        changes['subtopic'] = ''


def resolve_create(caller, rules, data):
    """
    Decide what a new station/submission looks like.

    The writer is the caller, unless an admin names another writer in
    data['writer']; the view checks that writer exists.
    """
    _require_role(caller)

    changes = rules.clean(data)
    _clean_subtopic(changes)
    missing = rules.missing_required(changes)
    if missing:
        raise InvalidField(f'Missing required fields: {", ".join(missing)}')

    writer_id = caller.id
    if caller.is_admin and data.get('writer') not in (None, ''):
        writer_id = data['writer']
    changes['writer_id'] = writer_id

    requested = data.get('status')
    if caller.is_admin:
        status = requested or STATUS_PENDING
        if status not in STATUSES:
            raise InvalidStatus(_invalid_status_message(status))
    else:
        status = STATUS_DRAFT if requested == STATUS_DRAFT else STATUS_PENDING
    changes['status'] = status

    reason = _text_or_empty(data.get('rejection_reason'), 'rejection_reason') if caller.is_admin else ''
    if status == STATUS_REJECTED and not reason:
        raise MissingRejectionReason()
    changes['rejection_reason'] = reason if status == STATUS_REJECTED else ''

    if rules.scored:
        marking_scheme = changes.setdefault('marking_scheme', [])
        follow_ups = changes.setdefault('follow_ups', [])
        validate_scoring_data(marking_scheme, follow_ups, data.get('total_marks'))
        changes['total_marks'] = compute_total_marks(marking_scheme, follow_ups)

    return AppliedPatch(changes, rules.scored)


def resolve_update(caller, rules, current, patch):
    """
    Filter `patch` down to what `caller` may change on content in state
    `current`, apply the status rules, and rescore when needed.
    Raises before anything is applied.
    """
    _require_role(caller)

    if caller.is_admin:
        changes = _admin_changes(rules, current, patch)
    elif caller.owns(current):
        changes = _owner_changes(rules, current, patch)
    else:
        raise Forbidden(f'You can only edit your own {rules.label}s')

    rescored = False
    if rules.scored and (any(f in changes for f in SCORING_FIELDS) or 'total_marks' in patch):
        marking_scheme = changes.get('marking_scheme', current.marking_scheme)
        follow_ups = changes.get('follow_ups', current.follow_ups)
        validate_scoring_data(marking_scheme, follow_ups, patch.get('total_marks'))
        changes['total_marks'] = compute_total_marks(marking_scheme, follow_ups)
        rescored = True

    return AppliedPatch(changes, rescored)


def _admin_changes(rules, current, patch):
    changes = rules.clean(patch)
    _clean_subtopic(changes)

    if 'status' in patch:
        status = patch['status']
        if status not in STATUSES:
            raise InvalidStatus(_invalid_status_message(status))
        changes['status'] = status

    reason_supplied = 'rejection_reason' in patch
    if reason_supplied:
        changes['rejection_reason'] = _text_or_empty(patch['rejection_reason'], 'rejection_reason')

    new_status = changes.get('status', current.status)
    if new_status == STATUS_REJECTED:
        if not changes.get('rejection_reason', current.rejection_reason):
            raise MissingRejectionReason()
    elif not reason_supplied:
        changes['rejection_reason'] = ''

    return changes


def _owner_changes(rules, current, patch):
    if current.status == STATUS_DRAFT:
        changes = rules.clean(patch)
        if 'status' in patch:
            changes['status'] = STATUS_PENDING if patch['status'] == STATUS_PENDING else STATUS_DRAFT
    elif current.status == STATUS_REJECTED:
        changes = rules.clean(patch)
        changes['status'] = STATUS_PENDING
        changes['rejection_reason'] = ''
    else:
        raise Forbidden(f'This {rules.label} is {current.status} and can no longer be edited')

    _clean_subtopic(changes)
    return changes


def check_view(caller, current):
    _require_role(caller)
    if not (caller.is_admin or caller.owns(current)):
        raise Forbidden()


def check_delete(caller, current):
    """Admins delete anything; owners delete their own unless approved."""
    _require_role(caller)
    if caller.is_admin:
        return
    if not caller.owns(current):
        raise Forbidden()
    if current.status == STATUS_APPROVED:
        raise Forbidden('Approved content cannot be deleted')


def listing_filter(caller, statuses=None, writer=None):
    """
    Writers only ever see their own content. Admins see everything except
    drafts, unless the status filter asks for drafts.
    """
    _require_role(caller)
    statuses = list(statuses or [])
    filters = {}
    excludes = {}

    if caller.is_admin:
        if writer not in (None, ''):
            filters['writer_id'] = writer
        if statuses:
            filters['status__in'] = statuses
        else:
            excludes['status'] = STATUS_DRAFT
    else:
        filters['writer_id'] = caller.id
        if statuses:
            filters['status__in'] = statuses

    return ListingFilter(filters, excludes)
