"""
Base model mixins shared by the portal models.
"""
from datetime import datetime, timezone

from django.db import models


def utc_timestamp():
    """Current UTC time as whole Unix seconds."""
    return int(datetime.now(timezone.utc).timestamp())


class TimestampMixin(models.Model):
    """
    Integer Unix timestamps, as the portal's JSON payloads expose them.

    `updated_at` is refreshed on every save, including partial saves
    through `update_fields`.
    """

    created_at = models.IntegerField(
        default=None, blank=True, null=True,
        help_text="UTC Unix timestamp when created"
    )
    updated_at = models.IntegerField(
        default=None, blank=True, null=True,
        help_text="UTC Unix timestamp when last updated"
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        now = utc_timestamp()
        if self.created_at is None:
            self.created_at = now
        self.updated_at = now

        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'updated_at' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['updated_at']
        super().save(*args, **kwargs)
