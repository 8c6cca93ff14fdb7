"""
Portal API tests – auth flow, content review workflow, dashboards, penalties.
"""
import json

from django.test import TestCase, Client
from django.urls import reverse

from core.models import AuditLog, Notification, OsceStation, Penalty, Submission, User

SCHEME = [{'section': 'A', 'items': [{'desc': 'x', 'score': 2}, {'desc': 'y', 'score': 3}]}]
FOLLOW_UPS = [{'question': 'q1', 'answers': ['a'], 'score': 1}]


def station_payload(**overrides):
    data = {
        'category': 'Medicine',
        'subject': 'Cardiology',
        'topic': 'Chest pain',
        'title': 'Acute chest pain',
        'station_type': 'history',
        'case_description': '55 year old man with central chest pain.',
        'marking_scheme': SCHEME,
        'follow_ups': FOLLOW_UPS,
    }
    data.update(overrides)
    return data


class PortalTestBase(TestCase):
    """Shared test fixtures for portal API tests."""

    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_user(
            email='admin@meduaid.local', password='AdminPass123!',
            name='Admin User', role='admin',
        )
        cls.writer = User.objects.create_user(
            email='writer@meduaid.local', password='WriterPass123!', name='Wendy Writer',
        )
        cls.other_writer = User.objects.create_user(
            email='other@meduaid.local', password='OtherPass123!', name='Oscar Other',
        )

    def setUp(self):
        self.client = Client()

    def login(self, user):
        self.client.force_login(user)

    def make_station(self, writer=None, status='pending', **kwargs):
        defaults = dict(
            writer=writer or self.writer, category='Medicine', subject='Cardiology',
            topic='Chest pain', title='Station', station_type='history',
            case_description='Case', marking_scheme=SCHEME, follow_ups=FOLLOW_UPS,
            total_marks=6, status=status,
        )
        defaults.update(kwargs)
        return OsceStation.objects.create(**defaults)

    def make_submission(self, writer=None, status='pending', **kwargs):
        defaults = dict(
            writer=writer or self.writer, category='Medicine', subject='Pharmacology',
            topic='Beta blockers', question='Which drug is cardioselective?',
            choices=['Propranolol', 'Bisoprolol'], correct_choice=1, status=status,
        )
        defaults.update(kwargs)
        return Submission.objects.create(**defaults)

    def post_json(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def patch_json(self, url, data):
        return self.client.patch(url, data=json.dumps(data), content_type='application/json')


# ── Auth ──────────────────────────────────────────────────────────────────

class AuthApiTests(PortalTestBase):

    def test_register_creates_writer(self):
        r = self.post_json(reverse('auth_api:register'), {
            'name': 'New Writer', 'email': 'New@MeduAid.local', 'password': 'Qb-portal-2024!',
        })
        self.assertEqual(r.status_code, 201)
        user = User.objects.get(email='new@meduaid.local')
        self.assertEqual(user.role, 'writer')
        self.assertEqual(r.json()['user']['email'], 'new@meduaid.local')

    def test_register_duplicate_email(self):
        r = self.post_json(reverse('auth_api:register'), {
            'name': 'Again', 'email': 'writer@meduaid.local', 'password': 'Qb-portal-2024!',
        })
        self.assertEqual(r.status_code, 400)
        self.assertIn('already exists', r.json()['error'])

    def test_login_and_me(self):
        r = self.post_json(reverse('auth_api:login'), {
            'email': 'writer@meduaid.local', 'password': 'WriterPass123!',
        })
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()['user']['role'], 'writer')

        r = self.client.get(reverse('auth_api:me'))
        self.assertEqual(r.json()['user']['email'], 'writer@meduaid.local')
        self.assertTrue(AuditLog.objects.filter(action='LOGIN', user=self.writer).exists())

    def test_login_wrong_password(self):
        r = self.post_json(reverse('auth_api:login'), {
            'email': 'writer@meduaid.local', 'password': 'nope',
        })
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()['code'], 'InvalidCredentials')

    def test_logout(self):
        self.login(self.writer)
        r = self.client.post(reverse('auth_api:logout'))
        self.assertEqual(r.status_code, 200)
        r = self.client.get(reverse('auth_api:me'))
        self.assertEqual(r.status_code, 401)

    def test_change_password(self):
        self.login(self.writer)
        r = self.post_json(reverse('auth_api:change_password'), {
            'current_password': 'WriterPass123!', 'new_password': 'Fresh-pass-2024!',
        })
        self.assertEqual(r.status_code, 200)
        self.writer.refresh_from_db()
        self.assertTrue(self.writer.check_password('Fresh-pass-2024!'))
        # Session survives the password change
        self.assertEqual(self.client.get(reverse('auth_api:me')).status_code, 200)

    def test_change_password_wrong_current(self):
        self.login(self.writer)
        r = self.post_json(reverse('auth_api:change_password'), {
            'current_password': 'wrong', 'new_password': 'Fresh-pass-2024!',
        })
        self.assertEqual(r.status_code, 400)


# ── OSCE stations ─────────────────────────────────────────────────────────

class StationApiTests(PortalTestBase):

    def test_requires_login(self):
        r = self.client.get(reverse('portal_api:stations'))
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()['code'], 'NotAuthenticated')

    def test_writer_creates_station_with_computed_total(self):
        self.login(self.writer)
        r = self.post_json(reverse('portal_api:stations'), station_payload(status='approved'))
        self.assertEqual(r.status_code, 201)
        data = r.json()
        self.assertEqual(data['total_marks'], 6)
        self.assertEqual(data['status'], 'pending')
        self.assertEqual(data['writer']['id'], self.writer.id)
        self.assertTrue(AuditLog.objects.filter(action='CREATE', resource_type='OsceStation').exists())

    def test_total_mismatch_is_rejected(self):
        self.login(self.writer)
        r = self.post_json(reverse('portal_api:stations'), station_payload(total_marks=10))
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'TotalMarksMismatch')
        self.assertIn('provided 10', r.json()['error'])
        self.assertIn('calculated 6', r.json()['error'])
        self.assertFalse(OsceStation.objects.exists())

    def test_negative_score_is_rejected(self):
        self.login(self.writer)
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': -1}]}]
        r = self.post_json(reverse('portal_api:stations'), station_payload(marking_scheme=scheme))
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'InvalidItemScore')
        self.assertIn('"x"', r.json()['error'])

    def test_empty_station_is_rejected(self):
        self.login(self.writer)
        r = self.post_json(reverse('portal_api:stations'),
                           station_payload(marking_scheme=[], follow_ups=[]))
        self.assertEqual(r.json()['code'], 'MissingScoreContent')

    def test_invalid_json(self):
        self.login(self.writer)
        r = self.client.post(reverse('portal_api:stations'), data='{not json',
                             content_type='application/json')
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'InvalidPayload')

    def test_admin_creates_for_missing_writer(self):
        self.login(self.admin)
        r = self.post_json(reverse('portal_api:stations'), station_payload(writer=99999))
        self.assertEqual(r.status_code, 404)

    def test_admin_creates_for_writer(self):
        self.login(self.admin)
        r = self.post_json(reverse('portal_api:stations'),
                           station_payload(writer=self.writer.id, status='approved'))
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()['writer']['id'], self.writer.id)
        self.assertEqual(r.json()['status'], 'approved')

    def test_writer_lists_only_own(self):
        self.make_station()
        self.make_station(writer=self.other_writer)
        self.login(self.writer)
        r = self.client.get(reverse('portal_api:stations'))
        self.assertEqual(len(r.json()), 1)
        self.assertEqual(r.json()[0]['writer']['id'], self.writer.id)

    def test_admin_listing_hides_drafts_unless_asked(self):
        self.make_station(status='draft')
        self.make_station(status='pending')
        self.login(self.admin)
        r = self.client.get(reverse('portal_api:stations'))
        self.assertEqual([s['status'] for s in r.json()], ['pending'])
        r = self.client.get(reverse('portal_api:stations'), {'status': 'draft,pending'})
        self.assertEqual(len(r.json()), 2)

    def test_invalid_status_filter(self):
        self.login(self.admin)
        r = self.client.get(reverse('portal_api:stations'), {'status': 'archived'})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'InvalidStatus')

    def test_get_missing_station(self):
        self.login(self.admin)
        r = self.client.get(reverse('portal_api:station_detail', args=[99999]))
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()['code'], 'NotFound')

    def test_writer_cannot_view_others(self):
        station = self.make_station(writer=self.other_writer)
        self.login(self.writer)
        r = self.client.get(reverse('portal_api:station_detail', args=[station.id]))
        self.assertEqual(r.status_code, 403)

    def test_draft_edit_keeps_draft(self):
        station = self.make_station(status='draft')
        self.login(self.writer)
        r = self.patch_json(reverse('portal_api:station_detail', args=[station.id]), {'title': 'Renamed'})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()['status'], 'draft')
        self.assertEqual(r.json()['title'], 'Renamed')

        r = self.patch_json(reverse('portal_api:station_detail', args=[station.id]), {'status': 'pending'})
        self.assertEqual(r.json()['status'], 'pending')

    def test_pending_station_is_locked_for_writer(self):
        station = self.make_station(status='pending')
        self.login(self.writer)
        r = self.patch_json(reverse('portal_api:station_detail', args=[station.id]), {'title': 'Renamed'})
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()['code'], 'Forbidden')

    def test_other_writer_cannot_edit(self):
        station = self.make_station(status='draft')
        self.login(self.other_writer)
        r = self.patch_json(reverse('portal_api:station_detail', args=[station.id]), {'title': 'Mine'})
        self.assertEqual(r.status_code, 403)
        station.refresh_from_db()
        self.assertEqual(station.title, 'Station')

    def test_rescore_on_edit(self):
        station = self.make_station(status='draft')
        self.login(self.writer)
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': 4}, {'desc': 'y', 'score': 4}]}]
        r = self.patch_json(reverse('portal_api:station_detail', args=[station.id]),
                            {'marking_scheme': scheme})
        self.assertEqual(r.json()['total_marks'], 9)

    def test_failed_rescore_leaves_station_untouched(self):
        station = self.make_station(status='draft')
        self.login(self.writer)
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': -1}]}]
        r = self.patch_json(reverse('portal_api:station_detail', args=[station.id]),
                            {'title': 'New', 'status': 'pending', 'marking_scheme': scheme})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'InvalidItemScore')

        station.refresh_from_db()
        self.assertEqual(station.title, 'Station')
        self.assertEqual(station.status, 'draft')
        self.assertEqual(station.total_marks, 6)
        self.assertEqual(station.marking_scheme, SCHEME)
        self.assertFalse(AuditLog.objects.filter(resource_type='OsceStation').exists())

    def test_huge_integer_score_is_a_client_error(self):
        self.login(self.writer)
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': 10 ** 400}]}]
        r = self.post_json(reverse('portal_api:stations'), station_payload(marking_scheme=scheme))
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'InvalidItemScore')

        r = self.post_json(reverse('portal_api:stations'), station_payload(total_marks=10 ** 400))
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'InvalidField')
        self.assertFalse(OsceStation.objects.exists())

    def test_owner_deletes_pending_and_draft(self):
        pending = self.make_station(status='pending')
        draft = self.make_station(status='draft')
        self.login(self.writer)
        for station in (pending, draft):
            r = self.client.delete(reverse('portal_api:station_detail', args=[station.id]))
            self.assertEqual(r.status_code, 200)
        self.assertFalse(OsceStation.objects.exists())

    def test_review_cycle(self):
        station = self.make_station(status='pending')
        url = reverse('portal_api:station_detail', args=[station.id])

        self.login(self.admin)
        r = self.patch_json(url, {'status': 'rejected'})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'MissingRejectionReason')

        r = self.patch_json(url, {'status': 'rejected', 'rejection_reason': 'Add vitals'})
        self.assertEqual(r.json()['status'], 'rejected')
        self.assertEqual(r.json()['rejection_reason'], 'Add vitals')
        self.assertTrue(AuditLog.objects.filter(action='REVIEW', resource_id=str(station.id)).exists())
        notification = Notification.objects.get(user=self.writer)
        self.assertIn('Add vitals', notification.message)

        self.login(self.writer)
        r = self.patch_json(url, {'case_description': 'Now with vitals', 'status': 'draft'})
        self.assertEqual(r.json()['status'], 'pending')
        self.assertIsNone(r.json()['rejection_reason'])

        self.login(self.admin)
        r = self.patch_json(url, {'status': 'approved'})
        self.assertEqual(r.json()['status'], 'approved')
        self.assertEqual(Notification.objects.filter(user=self.writer).count(), 2)

    def test_delete_rules(self):
        approved = self.make_station(status='approved')
        rejected = self.make_station(status='rejected', rejection_reason='No')
        self.login(self.writer)
        r = self.client.delete(reverse('portal_api:station_detail', args=[approved.id]))
        self.assertEqual(r.status_code, 403)
        r = self.client.delete(reverse('portal_api:station_detail', args=[rejected.id]))
        self.assertEqual(r.status_code, 200)
        self.assertFalse(OsceStation.objects.filter(pk=rejected.id).exists())

        self.login(self.admin)
        r = self.client.delete(reverse('portal_api:station_detail', args=[approved.id]))
        self.assertEqual(r.status_code, 200)

    def test_method_not_allowed(self):
        self.login(self.writer)
        r = self.client.put(reverse('portal_api:stations'))
        self.assertEqual(r.status_code, 405)


# ── SBA submissions ───────────────────────────────────────────────────────

class SubmissionApiTests(PortalTestBase):

    def test_writer_creates_submission(self):
        self.login(self.writer)
        r = self.post_json(reverse('portal_api:submissions'), {
            'category': 'Medicine', 'subject': 'Pharmacology', 'topic': 'Beta blockers',
            'question': 'Which drug?', 'choices': ['A', 'B', 'C'], 'correct_choice': 2,
            'difficulty': 'hard', 'status': 'draft',
        })
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()['status'], 'draft')
        self.assertEqual(r.json()['type'], 'SBA')

    def test_missing_required_fields(self):
        self.login(self.writer)
        r = self.post_json(reverse('portal_api:submissions'), {'category': 'Medicine'})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()['code'], 'InvalidField')

    def test_filter_by_subject(self):
        self.make_submission(subject='Pharmacology')
        self.make_submission(subject='Anatomy')
        self.login(self.writer)
        r = self.client.get(reverse('portal_api:submissions'), {'subject': 'Anatomy'})
        self.assertEqual(len(r.json()), 1)

    def test_admin_approves(self):
        submission = self.make_submission()
        self.login(self.admin)
        r = self.patch_json(reverse('portal_api:submission_detail', args=[submission.id]),
                            {'status': 'approved'})
        self.assertEqual(r.json()['status'], 'approved')
        self.assertIn('SBA question', Notification.objects.get(user=self.writer).message)


# ── Dashboards ────────────────────────────────────────────────────────────

class DashboardApiTests(PortalTestBase):

    def test_admin_stats(self):
        self.make_station(status='approved')
        self.make_submission(status='pending')
        self.make_submission(status='draft')
        self.login(self.admin)
        r = self.client.get(reverse('portal_api:admin_stats'))
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertEqual(data['total_users'], 3)
        self.assertEqual(data['total_writers'], 2)
        self.assertEqual(data['total_submissions'], 2)
        self.assertEqual(data['submissions_by_status']['draft'], 0)
        self.assertEqual(data['submissions_by_type'], {'SBA': 1, 'OSCE': 1})

    def test_admin_endpoints_forbid_writers(self):
        self.login(self.writer)
        for name in ('admin_stats', 'admin_submissions', 'admin_writers', 'admin_penalties'):
            r = self.client.get(reverse(f'portal_api:{name}'))
            self.assertEqual(r.status_code, 403, name)

    def test_all_submissions_merges_types(self):
        self.make_station(status='pending')
        self.make_submission(status='rejected', rejection_reason='Bad')
        self.login(self.admin)
        r = self.client.get(reverse('portal_api:admin_submissions'))
        types = sorted(item['type'] for item in r.json()['submissions'])
        self.assertEqual(types, ['OSCE', 'SBA'])

        r = self.client.get(reverse('portal_api:admin_submissions'), {'status': 'rejected'})
        self.assertEqual([item['type'] for item in r.json()['submissions']], ['SBA'])

    def test_writers_list(self):
        self.login(self.admin)
        r = self.client.get(reverse('portal_api:admin_writers'))
        emails = [w['email'] for w in r.json()]
        self.assertEqual(emails, ['other@meduaid.local', 'writer@meduaid.local'])

    def test_writer_stats(self):
        self.make_station(status='draft')
        self.make_submission(status='approved')
        self.make_submission(writer=self.other_writer)
        Penalty.objects.create(writer=self.writer, reason='Late')
        Notification.objects.create(user=self.writer, message='Hello')
        self.login(self.writer)
        r = self.client.get(reverse('portal_api:writer_stats'))
        data = r.json()
        self.assertEqual(data['total_submissions'], 2)
        self.assertEqual(data['submissions_by_status']['draft'], 1)
        self.assertEqual(data['penalty_count'], 1)
        self.assertEqual(data['unread_notifications'], 1)

    def test_export_xlsx(self):
        self.make_station(status='approved')
        self.login(self.admin)
        r = self.client.get(reverse('portal_api:export_submissions_xlsx'))
        self.assertEqual(r.status_code, 200)
        self.assertIn('spreadsheetml', r['Content-Type'])
        self.assertIn('meduaid_submissions_', r['Content-Disposition'])
        self.assertTrue(r.content.startswith(b'PK'))
        self.assertTrue(AuditLog.objects.filter(action='EXPORT').exists())


# ── Penalties & notifications ─────────────────────────────────────────────

class PenaltyNotificationApiTests(PortalTestBase):

    def test_admin_issues_penalty_by_email(self):
        self.login(self.admin)
        r = self.post_json(reverse('portal_api:admin_penalties'), {
            'writer': 'WRITER@meduaid.local', 'reason': 'Copied question',
            'type': 'monetary', 'amount': 12.5,
        })
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()['amount'], 12.5)
        self.assertEqual(r.json()['writer']['id'], self.writer.id)

    def test_monetary_penalty_needs_amount(self):
        self.login(self.admin)
        r = self.post_json(reverse('portal_api:admin_penalties'), {
            'writer': self.writer.id, 'reason': 'Copied', 'type': 'monetary',
        })
        self.assertEqual(r.status_code, 400)

    def test_penalty_unknown_writer(self):
        self.login(self.admin)
        r = self.post_json(reverse('portal_api:admin_penalties'), {
            'writer': 'ghost@meduaid.local', 'reason': 'Copied',
        })
        self.assertEqual(r.status_code, 404)

    def test_delete_penalty_and_writer_view(self):
        penalty = Penalty.objects.create(writer=self.writer, reason='Late')
        Penalty.objects.create(writer=self.other_writer, reason='Late too')

        self.login(self.writer)
        r = self.client.get(reverse('portal_api:writer_penalties'))
        self.assertEqual(len(r.json()['penalties']), 1)

        self.login(self.admin)
        r = self.client.delete(reverse('portal_api:delete_penalty', args=[penalty.id]))
        self.assertEqual(r.status_code, 200)
        self.assertFalse(Penalty.objects.filter(pk=penalty.id).exists())

    def test_notifications(self):
        own = Notification.objects.create(user=self.writer, message='Approved')
        Notification.objects.create(user=self.writer, message='Seen', read=True)
        others = Notification.objects.create(user=self.other_writer, message='Not yours')

        self.login(self.writer)
        r = self.client.get(reverse('portal_api:notifications'), {'unread': 'true'})
        self.assertEqual(len(r.json()['notifications']), 1)
        self.assertEqual(r.json()['unread_count'], 1)

        r = self.client.post(reverse('portal_api:mark_notification_read', args=[own.id]))
        self.assertTrue(r.json()['read'])

        r = self.client.post(reverse('portal_api:mark_notification_read', args=[others.id]))
        self.assertEqual(r.status_code, 404)


# ── Error bodies & headers ────────────────────────────────────────────────

class ErrorAndHeaderTests(PortalTestBase):

    def test_unknown_url_is_json(self):
        r = self.client.get('/api/does-not-exist')
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()['code'], 'NotFound')

    def test_json_responses_carry_security_headers(self):
        r = self.client.get(reverse('auth_api:csrf'))
        self.assertIn('csrf_token', r.json())
        self.assertIn("default-src 'none'", r['Content-Security-Policy'])
        self.assertEqual(r['Referrer-Policy'], 'strict-origin-when-cross-origin')
