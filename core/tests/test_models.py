"""
Core model tests – verify model creation, relationships, and methods.
"""
from io import StringIO

from django.core.management import CommandError, call_command
from django.test import TestCase

from core.models import AuditLog, Notification, OsceStation, Penalty, Submission, User
from core.utils.notifications import notify_review_decision


class UserModelTest(TestCase):
    """Test the custom email-keyed User model."""

    def test_create_writer(self):
        u = User.objects.create_user(
            email='writer@meduaid.local', password='TestPass123!', name='Test Writer',
        )
        self.assertEqual(u.email, 'writer@meduaid.local')
        self.assertTrue(u.check_password('TestPass123!'))
        self.assertTrue(u.is_writer)
        self.assertFalse(u.is_admin)
        self.assertFalse(u.is_staff)
        self.assertIsNotNone(u.created_at)

    def test_create_superuser_is_admin(self):
        u = User.objects.create_superuser(email='root@meduaid.local', password='RootPass123!')
        self.assertTrue(u.is_admin)
        self.assertTrue(u.verified)
        self.assertEqual(u.to_dict()['role'], 'admin')
        self.assertEqual(u.name, 'root')

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='x')


class ContentModelTest(TestCase):
    """Test OSCE stations and SBA submissions."""

    @classmethod
    def setUpTestData(cls):
        cls.writer = User.objects.create_user(
            email='writer@meduaid.local', password='TestPass123!', name='Test Writer',
        )

    def test_station_defaults_and_dict(self):
        station = OsceStation.objects.create(
            writer=self.writer, category='Medicine', subject='Cardiology',
            topic='Chest pain', title='Acute chest pain', station_type='history',
            case_description='55M with chest pain',
            marking_scheme=[{'section': 'A', 'items': [{'desc': 'x', 'score': 2}, {'desc': 'y', 'score': 3}]}],
            total_marks=5,
        )
        data = station.to_dict()
        self.assertEqual(station.status, 'pending')
        self.assertEqual(data['type'], 'OSCE')
        self.assertEqual(data['item_count'], 2)
        self.assertEqual(data['follow_ups'], [])
        self.assertIsNone(data['rejection_reason'])
        self.assertEqual(data['writer']['email'], 'writer@meduaid.local')
        self.assertEqual(self.writer.oscestations.count(), 1)

    def test_content_state(self):
        submission = Submission.objects.create(
            writer=self.writer, category='Medicine', subject='Pharmacology',
            topic='Beta blockers', question='Which drug?', status='rejected',
            rejection_reason='Ambiguous stem',
        )
        state = submission.content_state()
        self.assertEqual(state.writer_id, self.writer.id)
        self.assertEqual(state.status, 'rejected')
        self.assertEqual(state.rejection_reason, 'Ambiguous stem')
        self.assertIsNone(state.marking_scheme)

    def test_review_notification(self):
        submission = Submission.objects.create(
            writer=self.writer, category='Medicine', subject='Pharmacology',
            topic='Beta blockers', question='Which drug?',
        )
        self.assertIsNone(notify_review_decision(submission, 'pending'))

        submission.status = 'approved'
        notification = notify_review_decision(submission, 'pending')
        self.assertIn('approved', notification.message)
        self.assertEqual(self.writer.notifications.filter(read=False).count(), 1)

        notification.mark_read()
        notification.refresh_from_db()
        self.assertTrue(notification.read)


class PenaltyAuditTest(TestCase):

    def test_penalty_dict(self):
        writer = User.objects.create_user(email='w@meduaid.local', password='x', name='W')
        penalty = Penalty.objects.create(writer=writer, reason='Plagiarism', penalty_type='monetary', amount='25.50')
        penalty.refresh_from_db()
        self.assertEqual(penalty.to_dict()['amount'], 25.5)
        self.assertEqual(writer.penalties.count(), 1)

    def test_audit_timestamp(self):
        log = AuditLog.objects.create(action='EXPORT', resource_type='Submission')
        self.assertTrue(log.timestamp > 0)
        self.assertIn('EXPORT', str(log))


class RecomputeTotalMarksCommandTest(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.writer = User.objects.create_user(email='w@meduaid.local', password='x', name='W')

    def _station(self, **kwargs):
        defaults = dict(
            writer=self.writer, category='Medicine', subject='Cardiology', topic='Chest pain',
            title='Station', station_type='examination', case_description='Case',
        )
        defaults.update(kwargs)
        return OsceStation.objects.create(**defaults)

    def test_backfills_total_and_upgrades_legacy_follow_ups(self):
        station = self._station(
            marking_scheme=[{'section': 'A', 'items': [{'desc': 'x', 'score': 2}]}],
            follow_ups=[{'question': 'q1', 'answer': 'a'}],
            total_marks=0,
        )
        out = StringIO()
        call_command('recompute_total_marks', stdout=out)

        station.refresh_from_db()
        self.assertEqual(station.total_marks, 3)
        self.assertEqual(station.follow_ups, [{'question': 'q1', 'answers': ['a'], 'score': 1}])
        self.assertIn('Updated 1 station(s)', out.getvalue())

    def test_dry_run_saves_nothing(self):
        station = self._station(
            marking_scheme=[{'section': 'A', 'items': [{'desc': 'x', 'score': 4}]}],
            total_marks=0,
        )
        out = StringIO()
        call_command('recompute_total_marks', '--dry-run', stdout=out)

        station.refresh_from_db()
        self.assertEqual(station.total_marks, 0)
        self.assertIn('Would update 1 station(s)', out.getvalue())

    def test_negative_scores_are_skipped(self):
        station = self._station(
            marking_scheme=[{'section': 'A', 'items': [{'desc': 'x', 'score': -3}]}],
            total_marks=7,
        )
        out = StringIO()
        call_command('recompute_total_marks', stdout=out)

        station.refresh_from_db()
        self.assertEqual(station.total_marks, 7)
        self.assertIn('1 skipped', out.getvalue())


class CreateAdminCommandTest(TestCase):

    def test_creates_admin(self):
        out = StringIO()
        call_command('create_admin', '--email', 'Chief@MeduAid.local',
                     '--password', 'Sturdy-admin-pass-1', stdout=out)
        user = User.objects.get(email='chief@meduaid.local')
        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_superuser)
        self.assertTrue(AuditLog.objects.filter(action='CREATE', resource_id=str(user.id)).exists())

    def test_existing_user_needs_promote(self):
        writer = User.objects.create_user(email='w@meduaid.local', password='x', name='W')
        with self.assertRaises(CommandError):
            call_command('create_admin', '--email', 'w@meduaid.local', stdout=StringIO())

        call_command('create_admin', '--email', 'w@meduaid.local', '--promote', stdout=StringIO())
        writer.refresh_from_db()
        self.assertEqual(writer.role, 'admin')
        self.assertTrue(writer.is_admin)

    def test_weak_password_is_rejected(self):
        with self.assertRaises(CommandError):
            call_command('create_admin', '--email', 'a@meduaid.local', '--password', '123',
                         stdout=StringIO())
        self.assertFalse(User.objects.filter(email='a@meduaid.local').exists())
