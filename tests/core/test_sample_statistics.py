"""
Tests for sample statistics and the half-up rounding helpers.
"""

import pytest

from mcq_breakdown.core import (
    calculate_median,
    calculate_sample_statistics,
    percent_of,
    round_half_up,
)


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value,places,expected",
        [
            (0.5, 0, 1.0),
            (1.5, 0, 2.0),
            (2.5, 0, 3.0),
            (2.25, 1, 2.3),
            (3.25, 1, 3.3),
            (66.666, 2, 66.67),
            (-0.5, 0, -1.0),
        ],
    )
    def test_rounds_halves_away_from_zero(self, value, places, expected):
        assert round_half_up(value, places) == expected


class TestPercentOf:
    def test_rounds_to_integer(self):
        assert percent_of(2, 3) == 67
        assert percent_of(1, 3) == 33

    def test_half_rounds_up(self):
        assert percent_of(1, 8) == 13

    def test_zero_total_is_none(self):
        assert percent_of(5, 0) is None


class TestMedian:
    def test_odd_count_returns_middle_unrounded(self):
        assert calculate_median([1.25, 2.75, 9.0]) == 2.75

    def test_even_count_mean_rounded_to_one_place(self):
        assert calculate_median([2.5, 4.0]) == 3.3

    def test_single_grade(self):
        assert calculate_median([7.0]) == 7.0

    def test_empty(self):
        assert calculate_median([]) == 0.0


class TestSampleStatistics:
    def test_summary_of_grades(self):
        stats = calculate_sample_statistics([4.0, 2.5], uncompleted_count=1, max_possible=5.0)

        assert stats.population_size == 3
        assert stats.completed_count == 2
        assert stats.not_completed_count == 1
        assert stats.completed_percent == 67
        assert stats.not_completed_percent == 33
        assert stats.max_grade == 4.0
        assert stats.mean_grade == 3.3
        assert stats.median_grade == 3.3
        assert stats.max_grade_percent == 80
        assert stats.mean_grade_percent == 66

    def test_unsorted_input(self):
        stats = calculate_sample_statistics([9.0, 1.0, 5.0], uncompleted_count=0, max_possible=10.0)

        assert stats.max_grade == 9.0
        assert stats.median_grade == 5.0
        assert stats.mean_grade == 5.0

    def test_nobody_completed(self):
        stats = calculate_sample_statistics([], uncompleted_count=4, max_possible=10.0)

        assert stats.completed_count == 0
        assert stats.completed_percent == 0
        assert stats.not_completed_percent == 100
        assert stats.max_grade == 0.0
        assert stats.mean_grade == 0.0
        assert stats.median_grade == 0.0

    def test_empty_population(self):
        stats = calculate_sample_statistics([], uncompleted_count=0, max_possible=10.0)

        assert stats.population_size == 0
        assert stats.completed_percent == 0
        assert stats.not_completed_percent == 0

    def test_zero_max_grade_has_no_percentages(self):
        stats = calculate_sample_statistics([0.0], uncompleted_count=0, max_possible=0.0)

        assert stats.max_grade_percent is None
        assert stats.mean_grade_percent is None
        assert stats.median_grade_percent is None
