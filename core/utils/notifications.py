"""
Writer notifications for review decisions.
"""
import logging

from core.models import Notification, STATUS_APPROVED, STATUS_REJECTED

logger = logging.getLogger('meduaid.audit')


def describe(content):
    """Short human label: 'OSCE station "Chest pain"' / 'SBA question #12'."""
    title = getattr(content, 'title', '')
    if title:
        return f'OSCE station "{title}"'
    return f'SBA question #{content.id}'


def notify_review_decision(content, previous_status):
    """
    Tell the writer when an admin approves or rejects their content.
    Returns the Notification, or None when the status did not move to a decision.
    """
    if content.status == previous_status:
        return None

    if content.status == STATUS_APPROVED:
        message = f'Your {describe(content)} was approved.'
    elif content.status == STATUS_REJECTED:
        message = f'Your {describe(content)} was rejected: {content.rejection_reason}'
    else:
        return None

    notification = Notification.objects.create(user_id=content.writer_id, message=message)
    logger.info(
        'NOTIFY | user=%s | content=%s:%s | status=%s',
        content.writer_id, content.CONTENT_TYPE, content.id, content.status,
    )
    return notification
