"""
User model – writers and admins of the question bank portal.
"""
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from .mixins import TimestampMixin


class UserManager(BaseUserManager):
    """Custom manager for the email-keyed User model."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        email = self.normalize_email(email)
        extra_fields.setdefault('name', email.split('@')[0])
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('verified', True)
        extra_fields.setdefault('role', User.ROLE_ADMIN)
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin, TimestampMixin):
    """
    Portal account.

    Writers author SBA questions and OSCE stations; admins review them.
    AUTH_USER_MODEL = 'core.User'
    """

    ROLE_WRITER = 'writer'
    ROLE_ADMIN  = 'admin'
    ROLE_CHOICES = [
        (ROLE_WRITER, 'Writer'),
        (ROLE_ADMIN,  'Admin'),
    ]

    id = models.AutoField(primary_key=True)
    email = models.EmailField(max_length=254, unique=True)
    name = models.CharField(max_length=150)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_WRITER)
    verified = models.BooleanField(default=False)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        """Superusers are treated as admins everywhere in the portal."""
        return self.is_superuser or self.role == self.ROLE_ADMIN

    @property
    def is_writer(self):
        return not self.is_admin and self.role == self.ROLE_WRITER

    @property
    def role_display(self):
        if self.is_superuser:
            return 'Superuser'
        return dict(self.ROLE_CHOICES).get(self.role, self.role.capitalize())

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': User.ROLE_ADMIN if self.is_admin else self.role,
            'verified': self.verified,
        }

    def to_summary(self):
        """Compact form embedded in content listings."""
        return {'id': self.id, 'name': self.name, 'email': self.email}
