"""
Core models package – all portal domain models.
"""
from .mixins import TimestampMixin
from .user import User
from .content import (
    ReviewableContent, Submission, OsceStation,
    STATUS_DRAFT, STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED,
    STATUS_CHOICES, STATUSES,
)
from .penalty import Penalty
from .notification import Notification
from .audit import AuditLog

__all__ = [
    # Base
    'TimestampMixin',
    # Accounts
    'User',
    # Reviewable content
    'ReviewableContent', 'Submission', 'OsceStation',
    'STATUS_DRAFT', 'STATUS_PENDING', 'STATUS_APPROVED', 'STATUS_REJECTED',
    'STATUS_CHOICES', 'STATUSES',
    # Writer discipline & messaging
    'Penalty', 'Notification',
    # Audit
    'AuditLog',
]
