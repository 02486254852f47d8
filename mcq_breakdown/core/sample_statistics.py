"""
Sample statistics and rounding helpers.

Grades are rounded half away from zero (0.5 -> 1, 2.25 -> 2.3), matching the
quiz platform's own grade display, rather than Python's round-half-to-even.
"""

import statistics
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from mcq_breakdown.schemas import SampleStatistics
from ._constants import SUMMARY_DECIMAL_PLACES


def round_half_up(value: float, places: int = 0) -> float:
    """Round ``value`` to ``places`` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percent_of(value: float, total: float) -> Optional[int]:
    """
    Integer percentage of ``value`` in ``total``.

    Returns None when ``total`` is zero instead of dividing by it.
    """
    if total == 0:
        return None
    return int(round_half_up(100 * value / total))


def calculate_median(sorted_grades: Sequence[float]) -> float:
    """
    Median of an ascending grade list.

    The middle grade is returned as-is for an odd count; for an even count the
    mean of the two middle grades is rounded to one decimal place.
    """
    count = len(sorted_grades)
    if count == 0:
        return 0.0
    if count % 2:
        return sorted_grades[count // 2]
    return round_half_up(statistics.median(sorted_grades), SUMMARY_DECIMAL_PLACES)


def calculate_sample_statistics(
    grades: Sequence[float],
    uncompleted_count: int,
    max_possible: float,
) -> SampleStatistics:
    """
    Summarize the grades of the selected attempts.

    Args:
        grades: One grade per student with a selected attempt.
        uncompleted_count: Students in the sample without a selected attempt.
        max_possible: Maximum grade for the quiz.

    Returns:
        SampleStatistics. An empty sample yields zero max/mean/median without
        any division.
    """
    completed = len(grades)
    population = completed + uncompleted_count
    # Empty population reports 0 (0%) rather than failing
    denominator = population or 1

    if completed > 0:
        ordered = sorted(grades)
        max_grade = ordered[-1]
        mean_grade = round_half_up(sum(ordered) / completed, SUMMARY_DECIMAL_PLACES)
        median_grade = calculate_median(ordered)
    else:
        max_grade = 0.0
        mean_grade = 0.0
        median_grade = 0.0

    return SampleStatistics(
        population_size=population,
        completed_count=completed,
        not_completed_count=uncompleted_count,
        completed_percent=percent_of(completed, denominator),
        not_completed_percent=percent_of(uncompleted_count, denominator),
        max_possible=max_possible,
        max_grade=max_grade,
        mean_grade=mean_grade,
        median_grade=median_grade,
        max_grade_percent=percent_of(max_grade, max_possible),
        mean_grade_percent=percent_of(mean_grade, max_possible),
        median_grade_percent=percent_of(median_grade, max_possible),
    )
