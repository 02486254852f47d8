r"""
MCQ breakdown core: attempt selection, response normalization, correctness
classification, sample filtering, aggregation and sorting.

Usage Example
-------------
    from mcq_breakdown.core import SortSpec, build_breakdown
    from mcq_breakdown.domain_types import RoleFilter

    report = build_breakdown(
        snapshot,
        group_ids=[0],
        role_filter=RoleFilter.ALL,
        sort=SortSpec.from_code(3),  # grade, highest first
    )

    if report.no_data:
        print(report.warnings[0])
    else:
        for summary in report.questions:
            print(f"Q{summary.number}: {summary.correct_count} correct "
                  f"({summary.correct_percent}%)")
"""

# =============================================================================
# Public API exports
# =============================================================================

from ._constants import (
    WHOLE_POPULATION_GROUP_ID,
    WARNING_AVERAGE_POLICY,
    WARNING_NO_MCQ,
    WARNING_NOT_ALL_MCQ,
    SORT_CODES,
)
from ._types import CanonicalQuestion, CorrectnessKey, build_correctness_key, prepare_question

# AttemptSelector
from .attempt_selection import AttemptSelection, select_attempts

# ResponseNormalizer
from .response_normalization import (
    NormalizedResponse,
    normalize_option_text,
    normalize_response,
)

# CorrectnessClassifier
from .classification import classify_positions, classify_response

# SampleFilter
from .sample_filter import (
    MembershipPredicates,
    SampleCriteria,
    default_group_selection,
    filter_sample,
    is_in_sample,
)

# Statistics
from .sample_statistics import (
    calculate_median,
    calculate_sample_statistics,
    percent_of,
    round_half_up,
)

# Sorter
from .sorting import SortSpec, natural_key, sort_rows

# AggregationEngine
from .aggregation import (
    AggregationContext,
    QuestionSelection,
    build_breakdown,
    build_student_row,
    calculate_grade,
    select_questions,
)

__all__ = [
    # Constants
    "WHOLE_POPULATION_GROUP_ID",
    "WARNING_AVERAGE_POLICY",
    "WARNING_NO_MCQ",
    "WARNING_NOT_ALL_MCQ",
    "SORT_CODES",
    # Prepared questions
    "CanonicalQuestion",
    "CorrectnessKey",
    "build_correctness_key",
    "prepare_question",
    # AttemptSelector
    "AttemptSelection",
    "select_attempts",
    # ResponseNormalizer
    "NormalizedResponse",
    "normalize_option_text",
    "normalize_response",
    # CorrectnessClassifier
    "classify_positions",
    "classify_response",
    # SampleFilter
    "MembershipPredicates",
    "SampleCriteria",
    "default_group_selection",
    "filter_sample",
    "is_in_sample",
    # Statistics
    "calculate_median",
    "calculate_sample_statistics",
    "percent_of",
    "round_half_up",
    # Sorter
    "SortSpec",
    "natural_key",
    "sort_rows",
    # AggregationEngine
    "AggregationContext",
    "QuestionSelection",
    "build_breakdown",
    "build_student_row",
    "calculate_grade",
    "select_questions",
]
