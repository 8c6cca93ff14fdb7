"""
Notification model – messages shown to a user on their dashboard.
"""
from django.conf import settings
from django.db import models
from .mixins import TimestampMixin


class Notification(TimestampMixin):
    """In-app message, e.g. "Your OSCE station was approved"."""

    id = models.AutoField(primary_key=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
        related_name='notifications', db_index=True
    )
    message = models.TextField()
    read = models.BooleanField(default=False)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'read'], name='idx_notification_user_read'),
        ]

    def __str__(self):
        return f'Notification {self.id} for {self.user_id}'

    def mark_read(self):
        self.read = True
        self.save(update_fields=['read', 'updated_at'])

    def to_dict(self):
        return {
            'id': self.id,
            'message': self.message,
            'read': self.read,
            'created_at': self.created_at,
        }
