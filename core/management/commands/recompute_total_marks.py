"""
Management command: recompute_total_marks

Back-fills OsceStation.total_marks from the stored marking scheme and
follow-ups. Older stations stored a single ``answer`` string and no score
on follow-ups; those are rewritten to ``answers`` with a score of 1.

Usage:
    python manage.py recompute_total_marks
    python manage.py recompute_total_marks --dry-run
"""
import logging

from django.core.management.base import BaseCommand
from django.db import transaction

from core.exceptions import ScoringError
from core.models import OsceStation
from core.scoring import compute_total_marks, format_marks

logger = logging.getLogger('meduaid.scoring')

LEGACY_FOLLOW_UP_SCORE = 1


def normalize_follow_ups(follow_ups):
    """Return (follow_ups, changed) with legacy entries upgraded."""
    if not isinstance(follow_ups, list):
        return follow_ups, False

    changed = False
    result = []
    for follow_up in follow_ups:
        if not isinstance(follow_up, dict):
            result.append(follow_up)
            continue
        entry = dict(follow_up)
        if 'answers' not in entry and 'answer' in entry:
            legacy = entry.pop('answer')
            entry['answers'] = [legacy] if isinstance(legacy, str) and legacy.strip() else []
            changed = True
        if entry.get('score') is None:
            entry['score'] = LEGACY_FOLLOW_UP_SCORE
            changed = True
        result.append(entry)
    return result, changed


class Command(BaseCommand):
    help = 'Recompute total marks for every OSCE station'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run', action='store_true',
            help='Report what would change without saving',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        updated = skipped = 0

        for station in OsceStation.objects.order_by('id').iterator():
            follow_ups, follow_ups_changed = normalize_follow_ups(station.follow_ups)
            try:
                total = compute_total_marks(station.marking_scheme, follow_ups)
            except ScoringError as exc:
                skipped += 1
                self.stdout.write(self.style.WARNING(
                    f'Station {station.id}: skipped ({exc.message})'
                ))
                continue

            if not follow_ups_changed and station.total_marks == total:
                continue

            updated += 1
            self.stdout.write(
                f'Station {station.id}: {format_marks(station.total_marks or 0)} -> {format_marks(total)}'
                + (' (follow-ups upgraded)' if follow_ups_changed else '')
            )
            if dry_run:
                continue

            with transaction.atomic():
                station.follow_ups = follow_ups
                station.total_marks = total
                station.save(update_fields=['follow_ups', 'total_marks', 'updated_at'])
            logger.info(
                'TOTAL_RECOMPUTED | station=%s | total=%s | upgraded=%s',
                station.id, format_marks(total), follow_ups_changed,
            )

        verb = 'Would update' if dry_run else 'Updated'
        self.stdout.write(self.style.SUCCESS(
            f'{verb} {updated} station(s); {skipped} skipped.'
        ))
