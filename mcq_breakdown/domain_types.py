"""Shared domain enums for the MCQ breakdown engine.

This module is the single source of truth for the string enums used by the
input snapshot models, the aggregation core and the result schemas.

Usage:
    from mcq_breakdown.domain_types import GradingPolicy, Classification
"""

import enum

from mcq_breakdown.exceptions import InvalidParameterError


class QuestionType(str, enum.Enum):
    """Question types as stored by the quiz platform."""

    MULTICHOICE = "multichoice"
    TRUEFALSE = "truefalse"
    DESCRIPTION = "description"
    ESSAY = "essay"
    SHORTANSWER = "shortanswer"
    NUMERICAL = "numerical"
    MATCH = "match"
    OTHER = "other"

    @property
    def is_mcq(self) -> bool:
        return self in (QuestionType.MULTICHOICE, QuestionType.TRUEFALSE)


# Numeric grade-method codes stored on the quiz record
GRADE_METHOD_CODES = {
    1: "highest",
    2: "average",
    3: "first",
    4: "last",
}


class AttemptState(str, enum.Enum):
    """Quiz attempt lifecycle state."""

    IN_PROGRESS = "inprogress"
    OVERDUE = "overdue"
    FINISHED = "finished"
    ABANDONED = "abandoned"


class GradingPolicy(str, enum.Enum):
    """Rule used to pick which of a student's attempts represents them."""

    HIGHEST = "highest"
    AVERAGE = "average"
    FIRST = "first"
    LAST = "last"

    @classmethod
    def from_grade_method(cls, code: int) -> "GradingPolicy":
        """Map a numeric quiz grade-method code to a policy.

        Raises:
            InvalidParameterError: If the code is not one of 1-4.
        """
        try:
            return cls(GRADE_METHOD_CODES[code])
        except KeyError:
            raise InvalidParameterError(
                "Unknown grade method code",
                context={"grade_method": code},
            ) from None


class Classification(str, enum.Enum):
    """Correctness classification of a single response."""

    CORRECT = "correct"
    PARTIAL = "partial"
    INCORRECT = "incorrect"


class ResponseSource(str, enum.Enum):
    """Where a normalized response was reconstructed from."""

    STEP_DATA = "step_data"
    TRUE_FALSE = "true_false"
    TEXT_FALLBACK = "text_fallback"
    NONE = "none"


class RoleFilter(str, enum.Enum):
    """Role restriction applied to the sample."""

    ALL = "all"
    REGISTERED = "registered"


class SortKey(str, enum.Enum):
    """Column used to order student rows."""

    LASTNAME = "lastname"
    FIRSTNAME = "firstname"
    GRADE = "grade"
    ATTEMPTS = "attempts"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


__all__ = [
    "QuestionType",
    "AttemptState",
    "GradingPolicy",
    "Classification",
    "ResponseSource",
    "RoleFilter",
    "SortKey",
    "SortDirection",
]
