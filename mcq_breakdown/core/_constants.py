"""
Shared constants for the MCQ breakdown core.

Warning messages are informational strings returned alongside results; they
are never raised.
"""

from mcq_breakdown.domain_types import SortDirection, SortKey


# =============================================================================
# SAMPLE SELECTION
# =============================================================================

# Group id meaning "whole course / whole grouping" in a group selection
WHOLE_POPULATION_GROUP_ID = 0


# =============================================================================
# WARNINGS
# =============================================================================

WARNING_NO_MCQ = "There are no multiple-choice questions in this quiz."
WARNING_NOT_ALL_MCQ = (
    "Not all questions in this quiz are multiple-choice; "
    "only multiple-choice questions are included in this report."
)
WARNING_AVERAGE_POLICY = "average-grade policy approximated by last attempt"
WARNING_TEXT_FALLBACK = (
    "{count} responses were reconstructed from response summaries "
    "because no submitted step data was recorded."
)
WARNING_AMBIGUOUS_FALLBACK = (
    "{count} reconstructed responses may be inaccurate because the "
    "response summary could not be matched unambiguously to the options."
)


# =============================================================================
# RESPONSE NORMALIZATION
# =============================================================================

# Canonical positions used for true/false questions without a display order
TRUE_POSITION = 1
FALSE_POSITION = 2


# =============================================================================
# SORTING
# =============================================================================

# Report sort codes. Negating a code flips its direction.
SORT_CODES = {
    1: (SortKey.LASTNAME, SortDirection.ASC),
    2: (SortKey.FIRSTNAME, SortDirection.ASC),
    3: (SortKey.GRADE, SortDirection.DESC),
    4: (SortKey.ATTEMPTS, SortDirection.DESC),
}


# =============================================================================
# STATISTICS
# =============================================================================

# Decimal places for the mean and for the median of an even-sized sample
SUMMARY_DECIMAL_PLACES = 1
