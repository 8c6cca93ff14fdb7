"""
Access policy tests – who may change what, and what the change becomes.
"""
from django.test import SimpleTestCase

from core.exceptions import (
    Forbidden,
    InvalidField,
    InvalidItemScore,
    InvalidStatus,
    MissingRejectionReason,
    MissingScoreContent,
    TotalMarksMismatch,
)
from core.policy import (
    STATION_RULES,
    SUBMISSION_RULES,
    Caller,
    ContentState,
    check_delete,
    check_view,
    listing_filter,
    parse_status_filter,
    resolve_create,
    resolve_update,
)

ADMIN = Caller(id=1, role='admin')
WRITER = Caller(id=2, role='writer')
OTHER_WRITER = Caller(id=3, role='writer')

SCHEME = [{'section': 'A', 'items': [{'desc': 'x', 'score': 2}, {'desc': 'y', 'score': 3}]}]
FOLLOW_UPS = [{'question': 'q1', 'answers': ['a'], 'score': 1}]


def station_state(status, writer_id=2, reason=''):
    return ContentState(
        writer_id=writer_id, status=status, rejection_reason=reason,
        marking_scheme=SCHEME, follow_ups=FOLLOW_UPS,
    )


def station_data(**overrides):
    data = {
        'category': 'Medicine',
        'subject': 'Cardiology',
        'topic': 'Chest pain',
        'title': 'Acute chest pain',
        'station_type': 'history',
        'case_description': '55 year old man with chest pain.',
        'marking_scheme': SCHEME,
        'follow_ups': FOLLOW_UPS,
    }
    data.update(overrides)
    return data


class CallerTest(SimpleTestCase):

    def test_owns_compares_ids_loosely(self):
        self.assertTrue(Caller(id=2, role='writer').owns(station_state('draft', writer_id='2')))
        self.assertFalse(WRITER.owns(station_state('draft', writer_id=None)))


class OwnerUpdateTest(SimpleTestCase):

    def test_draft_without_status_stays_draft(self):
        applied = resolve_update(WRITER, STATION_RULES, station_state('draft'), {'title': 'New'})
        self.assertEqual(applied.changes, {'title': 'New'})
        self.assertNotIn('status', applied.changes)

    def test_draft_submitted_for_review(self):
        applied = resolve_update(WRITER, STATION_RULES, station_state('draft'), {'status': 'pending'})
        self.assertEqual(applied.changes['status'], 'pending')

    def test_draft_cannot_self_approve(self):
        applied = resolve_update(WRITER, STATION_RULES, station_state('draft'), {'status': 'approved'})
        self.assertEqual(applied.changes['status'], 'draft')

    def test_rejected_always_returns_to_pending(self):
        current = station_state('rejected', reason='Too vague')
        for patch in ({}, {'status': 'draft'}, {'status': 'approved', 'rejection_reason': 'x'}):
            applied = resolve_update(WRITER, STATION_RULES, current, patch)
            self.assertEqual(applied.changes['status'], 'pending')
            self.assertEqual(applied.changes['rejection_reason'], '')

    def test_pending_and_approved_are_locked(self):
        for status in ('pending', 'approved'):
            with self.assertRaises(Forbidden):
                resolve_update(WRITER, STATION_RULES, station_state(status), {'title': 'New'})

    def test_other_writer_is_forbidden(self):
        for status in ('draft', 'pending', 'approved', 'rejected'):
            with self.assertRaises(Forbidden):
                resolve_update(OTHER_WRITER, STATION_RULES, station_state(status), {'title': 'x'})

    def test_unknown_fields_are_dropped(self):
        applied = resolve_update(
            WRITER, STATION_RULES, station_state('draft'),
            {'title': 'New', 'writer_id': 99, 'total_marks_override': 50, 'id': 4},
        )
        self.assertEqual(applied.changes, {'title': 'New'})

    def test_wrong_field_type(self):
        with self.assertRaises(InvalidField):
            resolve_update(WRITER, STATION_RULES, station_state('draft'), {'title': 12})
        with self.assertRaises(InvalidField):
            resolve_update(WRITER, SUBMISSION_RULES, station_state('draft'), {'correct_choice': True})

    def test_scoring_change_recomputes_total(self):
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': 4}]}]
        applied = resolve_update(WRITER, STATION_RULES, station_state('draft'), {'marking_scheme': scheme})
        self.assertTrue(applied.rescored)
        self.assertEqual(applied.changes['total_marks'], 5)

    def test_invalid_scoring_change_is_rejected(self):
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': -1}]}]
        with self.assertRaises(InvalidItemScore):
            resolve_update(WRITER, STATION_RULES, station_state('draft'), {'marking_scheme': scheme})

    def test_supplied_total_must_match(self):
        with self.assertRaises(TotalMarksMismatch):
            resolve_update(WRITER, STATION_RULES, station_state('draft'), {'total_marks': 10})

    def test_non_scoring_change_is_not_rescored(self):
        applied = resolve_update(WRITER, STATION_RULES, station_state('draft'), {'topic': 'ACS'})
        self.assertFalse(applied.rescored)
        self.assertNotIn('total_marks', applied.changes)


class AdminUpdateTest(SimpleTestCase):

    def test_approve(self):
        applied = resolve_update(ADMIN, STATION_RULES, station_state('pending'), {'status': 'approved'})
        self.assertEqual(applied.changes['status'], 'approved')
        self.assertEqual(applied.changes['rejection_reason'], '')

    def test_reject_requires_reason(self):
        with self.assertRaises(MissingRejectionReason):
            resolve_update(ADMIN, STATION_RULES, station_state('pending'), {'status': 'rejected'})
        applied = resolve_update(
            ADMIN, STATION_RULES, station_state('pending'),
            {'status': 'rejected', 'rejection_reason': ' Missing vitals '},
        )
        self.assertEqual(applied.changes['rejection_reason'], 'Missing vitals')

    def test_reject_keeps_existing_reason(self):
        applied = resolve_update(
            ADMIN, STATION_RULES, station_state('rejected', reason='Old'), {'title': 'Fixed'},
        )
        self.assertNotIn('rejection_reason', applied.changes)

    def test_invalid_status(self):
        with self.assertRaises(InvalidStatus):
            resolve_update(ADMIN, STATION_RULES, station_state('pending'), {'status': 'archived'})

    def test_admin_edits_any_writer_content(self):
        applied = resolve_update(ADMIN, SUBMISSION_RULES, station_state('approved', writer_id=9),
                                 {'question': 'Which drug?', 'difficulty': 'hard'})
        self.assertEqual(applied.changes['question'], 'Which drug?')
        self.assertEqual(applied.changes['difficulty'], 'hard')

    def test_invalid_choice(self):
        with self.assertRaises(InvalidField):
            resolve_update(ADMIN, SUBMISSION_RULES, station_state('pending'), {'difficulty': 'extreme'})

    def test_caller_without_role_is_forbidden(self):
        with self.assertRaises(Forbidden):
            resolve_update(Caller(id=5, role=None), STATION_RULES, station_state('pending'), {})


class CreateTest(SimpleTestCase):

    def test_writer_creates_pending_station_with_total(self):
        applied = resolve_create(WRITER, STATION_RULES, station_data(status='approved', writer=7))
        self.assertEqual(applied.changes['writer_id'], 2)
        self.assertEqual(applied.changes['status'], 'pending')
        self.assertEqual(applied.changes['total_marks'], 6)

    def test_writer_may_save_draft(self):
        applied = resolve_create(WRITER, STATION_RULES, station_data(status='draft'))
        self.assertEqual(applied.changes['status'], 'draft')

    def test_admin_creates_for_writer(self):
        applied = resolve_create(ADMIN, STATION_RULES, station_data(writer=7, status='approved'))
        self.assertEqual(applied.changes['writer_id'], 7)
        self.assertEqual(applied.changes['status'], 'approved')

    def test_admin_rejected_needs_reason(self):
        with self.assertRaises(MissingRejectionReason):
            resolve_create(ADMIN, STATION_RULES, station_data(status='rejected'))

    def test_missing_required_fields(self):
        data = station_data()
        del data['title']
        with self.assertRaises(InvalidField) as ctx:
            resolve_create(WRITER, STATION_RULES, data)
        self.assertIn('title', ctx.exception.message)

    def test_station_needs_scoring_content(self):
        with self.assertRaises(MissingScoreContent):
            resolve_create(WRITER, STATION_RULES, station_data(marking_scheme=[], follow_ups=[]))

    def test_submission_is_not_scored(self):
        applied = resolve_create(WRITER, SUBMISSION_RULES, {
            'category': 'Medicine', 'subject': 'Pharmacology', 'topic': 'Beta blockers',
            'question': 'Which drug?', 'choices': ['A', 'B'], 'correct_choice': 1,
        })
        self.assertNotIn('total_marks', applied.changes)
        self.assertEqual(applied.changes['correct_choice'], 1)


class ViewDeleteTest(SimpleTestCase):

    def test_view(self):
        check_view(ADMIN, station_state('draft', writer_id=9))
        check_view(WRITER, station_state('pending'))
        with self.assertRaises(Forbidden):
            check_view(OTHER_WRITER, station_state('pending'))

    def test_delete(self):
        for status in ('draft', 'pending', 'rejected'):
            check_delete(WRITER, station_state(status))
        check_delete(ADMIN, station_state('approved'))
        with self.assertRaises(Forbidden):
            check_delete(WRITER, station_state('approved'))
        with self.assertRaises(Forbidden):
            check_delete(OTHER_WRITER, station_state('draft'))


class ListingTest(SimpleTestCase):

    def test_parse_status_filter(self):
        self.assertEqual(parse_status_filter('rejected, draft'), ['rejected', 'draft'])
        self.assertEqual(parse_status_filter(None), [])
        with self.assertRaises(InvalidStatus):
            parse_status_filter('pending,archived')

    def test_writer_sees_only_own(self):
        listing = listing_filter(WRITER, ['draft'], writer=9)
        self.assertEqual(listing.filters, {'writer_id': 2, 'status__in': ['draft']})
        self.assertEqual(listing.excludes, {})

    def test_admin_hides_drafts_by_default(self):
        listing = listing_filter(ADMIN)
        self.assertEqual(listing.filters, {})
        self.assertEqual(listing.excludes, {'status': 'draft'})

    def test_admin_filters(self):
        listing = listing_filter(ADMIN, ['draft', 'pending'], writer=9)
        self.assertEqual(listing.filters, {'writer_id': 9, 'status__in': ['draft', 'pending']})
        self.assertEqual(listing.excludes, {})
