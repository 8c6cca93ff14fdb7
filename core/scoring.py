"""
OSCE station scoring – total marks computation and marking scheme validation.

A station is scored from two structures stored as JSON on the model:

    marking_scheme = [{'section': 'History', 'items': [{'desc': ..., 'score': 2}, ...]}, ...]
    follow_ups     = [{'question': ..., 'answers': ['...'], 'score': 1}, ...]

The total is always the plain sum of every item score and every follow-up
score. Nothing here touches the database.
"""
import math

from django.conf import settings

from core.exceptions import (
    InvalidField,
    InvalidFollowUpScore,
    InvalidItemScore,
    InvalidSectionName,
    InvalidSectionShape,
    MissingFollowUpAnswer,
    MissingFollowUpQuestion,
    MissingItemDescription,
    MissingScoreContent,
    TotalMarksMismatch,
)

TOTAL_MARKS_TOLERANCE = 0.01


def _to_number(value):
    """Return value as a float, or None when it is not numeric."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int):
        # JSON integers are unbounded; too large for a float means infinite
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


def _coerce_score(value):
    """Lenient coercion: anything non-numeric (or NaN) scores 0."""
    number = _to_number(value)
    if number is None or math.isnan(number):
        return 0.0
    return number


def format_marks(value) -> str:
    """Render marks without a trailing '.0' for whole numbers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return str(round(value, 4))


def _section_label(index, section):
    name = section.get('section') if isinstance(section, dict) else None
    if isinstance(name, str) and name.strip():
        return f'section "{name}"'
    return f'section {index + 1}'


def _item_label(index, item):
    desc = item.get('desc') if isinstance(item, dict) else None
    if isinstance(desc, str) and desc.strip():
        return f'item "{desc}"'
    return f'item {index + 1}'


def _follow_up_label(index, follow_up):
    question = follow_up.get('question') if isinstance(follow_up, dict) else None
    if isinstance(question, str) and question.strip():
        return f'follow-up {index + 1} ("{question}")'
    return f'follow-up {index + 1}'


def _sentence(label):
    return label[:1].upper() + label[1:]


def _items_of(section):
    if not isinstance(section, dict):
        return []
    items = section.get('items')
    return items if isinstance(items, list) else []


def compute_total_marks(marking_scheme, follow_ups) -> float:
    """
    Sum every marking scheme item score and every follow-up score.

    Missing structures contribute 0 and non-numeric scores coerce to 0.
    A negative (or infinite) score raises InvalidItemScore /
    InvalidFollowUpScore naming the offending entry.
    """
    total = 0.0

    for s_index, section in enumerate(marking_scheme or []):
        for i_index, item in enumerate(_items_of(section)):
            if not isinstance(item, dict):
                continue
            score = _coerce_score(item.get('score'))
            if score < 0 or math.isinf(score):
                raise InvalidItemScore(
                    f'Score for {_item_label(i_index, item)} in '
                    f'{_section_label(s_index, section)} must be a non-negative number '
                    f'(got {item.get("score")})'
                )
            total += score

    for f_index, follow_up in enumerate(follow_ups or []):
        if not isinstance(follow_up, dict):
            continue
        score = _coerce_score(follow_up.get('score'))
        if score < 0 or math.isinf(score):
            raise InvalidFollowUpScore(
                f'Score for {_follow_up_label(f_index, follow_up)} must be a '
                f'non-negative number (got {follow_up.get("score")})'
            )
        total += score

    return total


def _has_scorable_content(marking_scheme, follow_ups):
    for section in marking_scheme or []:
        if any(isinstance(item, dict) for item in _items_of(section)):
            return True
    for follow_up in follow_ups or []:
        if not isinstance(follow_up, dict):
            continue
        question = follow_up.get('question')
        answers = follow_up.get('answers')
        if (isinstance(question, str) and question.strip()
                and isinstance(answers, list) and _has_answer(answers)):
            return True
    return False


def _has_answer(answers):
    return any(isinstance(a, str) and a.strip() for a in answers)


def _valid_score(value):
    if isinstance(value, bool):
        return False
    number = _to_number(value)
    return number is not None and math.isfinite(number) and number >= 0


def _validate_sections(marking_scheme):
    if marking_scheme is None:
        return
    if not isinstance(marking_scheme, list):
        raise InvalidField('marking_scheme must be a list of sections')

    for s_index, section in enumerate(marking_scheme):
        label = _section_label(s_index, section)
        if not isinstance(section, dict):
            raise InvalidSectionShape(
                f'{_sentence(label)} must be an object with "section" and "items"'
            )

        name = section.get('section')
        if not isinstance(name, str) or not name.strip():
            raise InvalidSectionName(f'{_sentence(label)} must have a non-empty name')

        items = section.get('items')
        if not isinstance(items, list):
            raise InvalidSectionShape(f'Items of {label} must be a list')

        for i_index, item in enumerate(items):
            if item is None:
                continue
            if not isinstance(item, dict):
                raise InvalidSectionShape(
                    f'Item {i_index + 1} in {label} must be an object with "desc" and "score"'
                )
            desc = item.get('desc')
            if not isinstance(desc, str) or not desc.strip():
                raise MissingItemDescription(
                    f'Item {i_index + 1} in {label} is missing a description'
                )
            if not _valid_score(item.get('score')):
                raise InvalidItemScore(
                    f'Score for {_item_label(i_index, item)} in {label} must be a '
                    f'non-negative number (got {item.get("score")})'
                )


def _validate_follow_ups(follow_ups):
    if follow_ups is None:
        return
    if not isinstance(follow_ups, list):
        raise InvalidField('follow_ups must be a list of follow-up questions')

    for f_index, follow_up in enumerate(follow_ups):
        label = _follow_up_label(f_index, follow_up)
        if not isinstance(follow_up, dict):
            raise MissingFollowUpQuestion(f'{_sentence(label)} must be an object')

        question = follow_up.get('question')
        if not isinstance(question, str) or not question.strip():
            raise MissingFollowUpQuestion(f'{_sentence(label)} is missing a question')

        answers = follow_up.get('answers')
        if not isinstance(answers, list) or not _has_answer(answers):
            raise MissingFollowUpAnswer(f'{_sentence(label)} needs at least one answer')

        if not _valid_score(follow_up.get('score')):
            raise InvalidFollowUpScore(
                f'Score for {label} must be a non-negative number '
                f'(got {follow_up.get("score")})'
            )


def validate_scoring_data(marking_scheme, follow_ups, total_marks=None):
    """
    Validate a station's scoring structures; raise a ScoringError on the
    first problem found. When total_marks is given it must match the
    computed sum within PORTAL_TOTAL_MARKS_TOLERANCE.
    """
    if not _has_scorable_content(marking_scheme, follow_ups):
        raise MissingScoreContent()

    _validate_sections(marking_scheme)
    _validate_follow_ups(follow_ups)

    if total_marks is None:
        return

    supplied = None if isinstance(total_marks, bool) else _to_number(total_marks)
    if supplied is None or not math.isfinite(supplied):
        raise InvalidField(f'total_marks must be a number (got {total_marks})')

    computed = compute_total_marks(marking_scheme, follow_ups)
    tolerance = getattr(settings, 'PORTAL_TOTAL_MARKS_TOLERANCE', TOTAL_MARKS_TOLERANCE)
    if abs(supplied - computed) > tolerance:
        raise TotalMarksMismatch(
            f'Total marks mismatch: provided {format_marks(supplied)}, '
            f'calculated {format_marks(computed)}'
        )
