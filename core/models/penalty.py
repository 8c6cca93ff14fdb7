"""
Penalty model – disciplinary records admins attach to writers.
"""
from django.conf import settings
from django.db import models
from .mixins import TimestampMixin


class Penalty(TimestampMixin):
    """A warning or monetary deduction issued to a writer."""

    TYPE_WARNING = 'warning'
    TYPE_MONETARY = 'monetary'
    TYPE_CHOICES = [
        (TYPE_WARNING, 'Warning'),
        (TYPE_MONETARY, 'Monetary'),
    ]

    id = models.AutoField(primary_key=True)
    writer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
        related_name='penalties', db_index=True
    )
    reason = models.TextField()
    penalty_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_WARNING)
    amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    class Meta:
        db_table = 'penalties'
        ordering = ['-created_at']

    def __str__(self):
        return f'Penalty {self.id}: {self.writer_id} ({self.penalty_type})'

    def to_dict(self):
        return {
            'id': self.id,
            'writer': self.writer.to_summary() if self.writer_id else None,
            'reason': self.reason,
            'type': self.penalty_type,
            'amount': float(self.amount) if self.amount is not None else None,
            'created_at': self.created_at,
        }
