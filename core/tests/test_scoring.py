"""
Scoring tests – total marks computation and marking scheme validation.
"""
import random

from django.test import SimpleTestCase, override_settings

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
from core.scoring import compute_total_marks, format_marks, validate_scoring_data


def sample_scheme():
    return [
        {'section': 'A', 'items': [
            {'desc': 'x', 'score': 2},
            {'desc': 'y', 'score': 3},
        ]},
    ]


def sample_follow_ups():
    return [{'question': 'q1', 'answers': ['a'], 'score': 1}]


class ComputeTotalMarksTest(SimpleTestCase):

    def test_sample_station_totals_six(self):
        self.assertEqual(compute_total_marks(sample_scheme(), sample_follow_ups()), 6)

    def test_missing_structures_score_zero(self):
        self.assertEqual(compute_total_marks(None, None), 0)
        self.assertEqual(compute_total_marks([], []), 0)

    def test_sum_is_order_independent(self):
        scheme = [
            {'section': f'S{i}', 'items': [{'desc': f'd{i}{j}', 'score': i + j} for j in range(4)]}
            for i in range(5)
        ]
        follow_ups = [
            {'question': f'q{i}', 'answers': ['a'], 'score': i * 0.5} for i in range(6)
        ]
        expected = sum(i + j for i in range(5) for j in range(4)) + sum(i * 0.5 for i in range(6))

        rng = random.Random(7)
        for _ in range(5):
            rng.shuffle(scheme)
            rng.shuffle(follow_ups)
            for section in scheme:
                rng.shuffle(section['items'])
            self.assertAlmostEqual(compute_total_marks(scheme, follow_ups), expected)

    def test_repeated_calls_return_same_value(self):
        scheme, follow_ups = sample_scheme(), sample_follow_ups()
        first = compute_total_marks(scheme, follow_ups)
        self.assertEqual(compute_total_marks(scheme, follow_ups), first)
        self.assertEqual(scheme, sample_scheme())

    def test_numeric_strings_count_and_garbage_scores_zero(self):
        scheme = [{'section': 'A', 'items': [
            {'desc': 'x', 'score': '2.5'},
            {'desc': 'y', 'score': 'abc'},
            {'desc': 'z'},
        ]}]
        self.assertEqual(compute_total_marks(scheme, []), 2.5)

    def test_negative_item_score_raises(self):
        scheme = sample_scheme()
        scheme[0]['items'][0]['score'] = -1
        with self.assertRaises(InvalidItemScore) as ctx:
            compute_total_marks(scheme, [])
        self.assertIn('"x"', ctx.exception.message)
        self.assertIn('"A"', ctx.exception.message)

    def test_negative_follow_up_score_raises(self):
        follow_ups = sample_follow_ups()
        follow_ups[0]['score'] = -2
        with self.assertRaises(InvalidFollowUpScore) as ctx:
            compute_total_marks([], follow_ups)
        self.assertIn('q1', ctx.exception.message)

    def test_huge_integer_score_raises(self):
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': 10 ** 400}]}]
        with self.assertRaises(InvalidItemScore) as ctx:
            compute_total_marks(scheme, [])
        self.assertIn('"x"', ctx.exception.message)

    def test_format_marks(self):
        self.assertEqual(format_marks(6.0), '6')
        self.assertEqual(format_marks(2.5), '2.5')


class ValidateScoringDataTest(SimpleTestCase):

    def test_valid_station_passes(self):
        validate_scoring_data(sample_scheme(), sample_follow_ups())

    def test_empty_station_is_rejected(self):
        with self.assertRaises(MissingScoreContent):
            validate_scoring_data([], [])
        with self.assertRaises(MissingScoreContent):
            validate_scoring_data([{'section': 'A', 'items': []}], None)

    def test_either_part_alone_is_enough(self):
        validate_scoring_data(sample_scheme(), [])
        validate_scoring_data([], sample_follow_ups())

    def test_negative_item_score_names_item(self):
        scheme = sample_scheme()
        scheme[0]['items'][0]['score'] = -1
        with self.assertRaises(InvalidItemScore) as ctx:
            validate_scoring_data(scheme, sample_follow_ups())
        self.assertIn('"x"', ctx.exception.message)
        self.assertIn('non-negative', ctx.exception.message)

    def test_negative_follow_up_score_names_follow_up(self):
        follow_ups = sample_follow_ups()
        follow_ups[0]['score'] = -1
        with self.assertRaises(InvalidFollowUpScore) as ctx:
            validate_scoring_data(sample_scheme(), follow_ups)
        self.assertIn('q1', ctx.exception.message)

    def test_non_numeric_item_score_is_rejected(self):
        scheme = sample_scheme()
        scheme[0]['items'][1]['score'] = 'two'
        with self.assertRaises(InvalidItemScore) as ctx:
            validate_scoring_data(scheme, [])
        self.assertIn('"y"', ctx.exception.message)

    def test_section_without_name(self):
        scheme = [{'section': '  ', 'items': [{'desc': 'x', 'score': 1}]}]
        with self.assertRaises(InvalidSectionName):
            validate_scoring_data(scheme, [])

    def test_section_items_must_be_list(self):
        scheme = sample_scheme() + [{'section': 'B', 'items': 'nope'}]
        with self.assertRaises(InvalidSectionShape):
            validate_scoring_data(scheme, [])

    def test_item_without_description(self):
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': 1}, {'desc': '', 'score': 1}]}]
        with self.assertRaises(MissingItemDescription) as ctx:
            validate_scoring_data(scheme, [])
        self.assertIn('Item 2', ctx.exception.message)

    def test_follow_up_without_question(self):
        follow_ups = sample_follow_ups() + [{'question': '', 'answers': ['a'], 'score': 1}]
        with self.assertRaises(MissingFollowUpQuestion):
            validate_scoring_data(sample_scheme(), follow_ups)

    def test_follow_up_without_answers(self):
        follow_ups = sample_follow_ups() + [{'question': 'q2', 'answers': ['  '], 'score': 1}]
        with self.assertRaises(MissingFollowUpAnswer) as ctx:
            validate_scoring_data(sample_scheme(), follow_ups)
        self.assertIn('q2', ctx.exception.message)

    def test_non_list_marking_scheme(self):
        with self.assertRaises(InvalidField):
            validate_scoring_data({'section': 'A'}, sample_follow_ups())

    def test_matching_total_passes(self):
        validate_scoring_data(sample_scheme(), sample_follow_ups(), 6)
        validate_scoring_data(sample_scheme(), sample_follow_ups(), 6.005)
        validate_scoring_data(sample_scheme(), sample_follow_ups(), '6')

    def test_mismatched_total_is_rejected(self):
        with self.assertRaises(TotalMarksMismatch) as ctx:
            validate_scoring_data(sample_scheme(), sample_follow_ups(), 10)
        self.assertIn('provided 10', ctx.exception.message)
        self.assertIn('calculated 6', ctx.exception.message)

    def test_total_off_by_more_than_tolerance(self):
        with self.assertRaises(TotalMarksMismatch):
            validate_scoring_data(sample_scheme(), sample_follow_ups(), 6.05)

    @override_settings(PORTAL_TOTAL_MARKS_TOLERANCE=0.1)
    def test_tolerance_is_configurable(self):
        validate_scoring_data(sample_scheme(), sample_follow_ups(), 6.05)

    def test_huge_integer_scores_are_rejected(self):
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': 10 ** 400}]}]
        with self.assertRaises(InvalidItemScore) as ctx:
            validate_scoring_data(scheme, [])
        self.assertIn('"x"', ctx.exception.message)

        follow_ups = [{'question': 'q1', 'answers': ['a'], 'score': -10 ** 400}]
        with self.assertRaises(InvalidFollowUpScore):
            validate_scoring_data([], follow_ups)

    def test_huge_integer_total(self):
        with self.assertRaises(InvalidField):
            validate_scoring_data(sample_scheme(), sample_follow_ups(), 10 ** 400)

    def test_only_empty_items_is_not_content(self):
        with self.assertRaises(MissingScoreContent):
            validate_scoring_data([{'section': 'A', 'items': [None, None]}], [])
        validate_scoring_data([{'section': 'A', 'items': [None, {'desc': 'x', 'score': 1}]}], [])

    def test_boolean_scores_are_rejected(self):
        scheme = [{'section': 'A', 'items': [{'desc': 'x', 'score': True}]}]
        with self.assertRaises(InvalidItemScore):
            validate_scoring_data(scheme, [])
        follow_ups = [{'question': 'q1', 'answers': ['a'], 'score': False}]
        with self.assertRaises(InvalidFollowUpScore):
            validate_scoring_data([], follow_ups)
        with self.assertRaises(InvalidField):
            validate_scoring_data(sample_scheme(), sample_follow_ups(), True)

    def test_non_numeric_total(self):
        with self.assertRaises(InvalidField):
            validate_scoring_data(sample_scheme(), sample_follow_ups(), 'six')

    def test_error_carries_code(self):
        with self.assertRaises(MissingScoreContent) as ctx:
            validate_scoring_data([], [])
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.to_dict()['code'], 'MissingScoreContent')
