"""
Reviewable content – SBA question submissions and OSCE stations.
"""
from django.conf import settings
from django.db import models
from .mixins import TimestampMixin

STATUS_DRAFT = 'draft'
STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'
STATUS_REJECTED = 'rejected'
STATUS_CHOICES = [
    (STATUS_DRAFT, 'Draft'),
    (STATUS_PENDING, 'Pending review'),
    (STATUS_APPROVED, 'Approved'),
    (STATUS_REJECTED, 'Rejected'),
]
STATUSES = tuple(value for value, _ in STATUS_CHOICES)


class ReviewableContent(TimestampMixin):
    """Fields and helpers shared by everything a writer submits for review."""

    # 'SBA' or 'OSCE' – tags merged admin listings
    CONTENT_TYPE = ''

    writer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
        related_name='%(class)ss', db_index=True
    )

    category = models.CharField(max_length=100)
    subject = models.CharField(max_length=150)
    topic = models.CharField(max_length=200)
    subtopic = models.CharField(max_length=200, blank=True, default='')
    images = models.JSONField(default=list, blank=True)

    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True
    )
    rejection_reason = models.TextField(blank=True, default='')

    class Meta:
        abstract = True

    def content_state(self):
        """Snapshot consumed by core.policy."""
        from core.policy import ContentState
        return ContentState(
            writer_id=self.writer_id,
            status=self.status,
            rejection_reason=self.rejection_reason,
            marking_scheme=getattr(self, 'marking_scheme', None),
            follow_ups=getattr(self, 'follow_ups', None),
        )

    def apply_changes(self, changes):
        """Assign an already-authorised change set; the caller saves."""
        for field, value in changes.items():
            setattr(self, field, value)

    def _base_dict(self):
        return {
            'id': self.id,
            'type': self.CONTENT_TYPE,
            'writer': self.writer.to_summary() if self.writer_id else None,
            'category': self.category,
            'subject': self.subject,
            'topic': self.topic,
            'subtopic': self.subtopic,
            'images': self.images or [],
            'status': self.status,
            'rejection_reason': self.rejection_reason or None,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }


class Submission(ReviewableContent):
    """Single-best-answer (SBA) multiple choice question."""

    CONTENT_TYPE = 'SBA'

    DIFFICULTY_CHOICES = [
        ('easy', 'Easy'),
        ('normal', 'Normal'),
        ('hard', 'Hard'),
    ]

    question = models.TextField()
    choices = models.JSONField(default=list)
    explanations = models.JSONField(default=list)
    correct_choice = models.IntegerField(default=0)
    reference = models.TextField(blank=True, default='')
    difficulty = models.CharField(max_length=10, choices=DIFFICULTY_CHOICES, default='normal')

    class Meta:
        db_table = 'submissions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['writer', 'status'], name='idx_submission_writer_status'),
        ]

    def __str__(self):
        return f'SBA {self.id}: {self.question[:40]}'

    def to_dict(self):
        data = self._base_dict()
        data.update({
            'question': self.question,
            'choices': self.choices or [],
            'explanations': self.explanations or [],
            'correct_choice': self.correct_choice,
            'reference': self.reference,
            'difficulty': self.difficulty,
        })
        return data


class OsceStation(ReviewableContent):
    """OSCE station with a marking scheme and scored follow-up questions."""

    CONTENT_TYPE = 'OSCE'

    TYPE_CHOICES = [
        ('history', 'History taking'),
        ('examination', 'Examination'),
    ]

    title = models.CharField(max_length=200)
    station_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    case_description = models.TextField()
    history_sections = models.JSONField(null=True, blank=True)

    # [{'section': str, 'items': [{'desc': str, 'score': number}]}]
    marking_scheme = models.JSONField(default=list, blank=True)
    # [{'question': str, 'answers': [str], 'score': number}]
    follow_ups = models.JSONField(default=list, blank=True)
    total_marks = models.FloatField(default=0)

    class Meta:
        db_table = 'osce_stations'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['writer', 'status'], name='idx_station_writer_status'),
        ]

    def __str__(self):
        return f'OSCE {self.id}: {self.title}'

    def get_item_count(self):
        return sum(
            len(section.get('items') or [])
            for section in self.marking_scheme or []
            if isinstance(section, dict)
        )

    def to_dict(self):
        data = self._base_dict()
        data.update({
            'title': self.title,
            'station_type': self.station_type,
            'case_description': self.case_description,
            'history_sections': self.history_sections,
            'marking_scheme': self.marking_scheme or [],
            'follow_ups': self.follow_ups or [],
            'total_marks': self.total_marks,
            'item_count': self.get_item_count(),
        })
        return data
