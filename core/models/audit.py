"""
AuditLog model – who did what to which writer, question or station.
"""
from django.conf import settings
from django.db import models

from .mixins import utc_timestamp


class AuditLog(models.Model):
    """One row per mutation, review decision, login or export."""

    ACTION_CHOICES = [
        ('CREATE', 'Create'),
        ('UPDATE', 'Update'),
        ('DELETE', 'Delete'),
        ('REVIEW', 'Review decision'),
        ('LOGIN', 'Login'),
        ('LOGOUT', 'Logout'),
        ('EXPORT', 'Export'),
    ]

    id = models.BigAutoField(primary_key=True)
    # Kept after the account is deleted; username preserves who it was
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='audit_logs'
    )
    username = models.CharField(max_length=254, blank=True, default='')

    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    resource_type = models.CharField(max_length=50)  # 'OsceStation', 'Submission', 'Penalty', 'User'
    resource_id = models.CharField(max_length=36, blank=True, default='')

    description = models.TextField(blank=True, default='')
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default='')
    extra_data = models.JSONField(null=True, blank=True)

    timestamp = models.IntegerField(default=utc_timestamp, db_index=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['user', 'action'], name='idx_audit_user_action'),
            models.Index(fields=['resource_type', 'resource_id'], name='idx_audit_resource'),
        ]

    def __str__(self):
        target = f'{self.resource_type} {self.resource_id}'.strip()
        return f'[{self.action}] {self.username or "system"} on {target}'
