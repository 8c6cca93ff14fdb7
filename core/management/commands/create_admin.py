"""
Management command: create_admin

Creates a portal admin, or promotes an existing writer with --promote.

Usage:
    python manage.py create_admin --email admin@meduaid.org
    python manage.py create_admin --email writer@meduaid.org --promote
"""
import getpass

from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from core.models import User
from core.utils.audit import log_action


class Command(BaseCommand):
    help = 'Create a portal admin account (or promote an existing user)'

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, required=True)
        parser.add_argument('--name', type=str, default='Portal Administrator')
        parser.add_argument('--password', type=str, default=None,
                            help='Prompted for when omitted')
        parser.add_argument('--promote', action='store_true',
                            help='Give an existing account the admin role')

    def handle(self, *args, **options):
        email = User.objects.normalize_email(options['email']).lower()
        existing = User.objects.filter(email__iexact=email).first()

        if existing is not None:
            if not options['promote']:
                raise CommandError(f'{email} already exists; pass --promote to make it an admin.')
            existing.role = User.ROLE_ADMIN
            existing.is_staff = True
            existing.verified = True
            existing.save(update_fields=['role', 'is_staff', 'verified'])
            log_action(None, 'UPDATE', 'User', existing.id, f'{email} promoted to admin')
            self.stdout.write(self.style.SUCCESS(f'Promoted {email} to admin.'))
            return

        password = options['password'] or self._prompt_password()
        candidate = User(email=email, name=options['name'])
        try:
            password_validation.validate_password(password, candidate)
        except ValidationError as exc:
            raise CommandError(' '.join(exc.messages))

        user = User.objects.create_superuser(email=email, password=password, name=options['name'])
        log_action(None, 'CREATE', 'User', user.id, f'Admin {email} created from the command line')
        self.stdout.write(self.style.SUCCESS(f'Admin account created: {user.name} ({user.email})'))

    def _prompt_password(self):
        password = getpass.getpass('Password: ')
        if password != getpass.getpass('Confirm password: '):
            raise CommandError('Passwords do not match.')
        return password
