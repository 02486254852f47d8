"""MCQ breakdown: per-question, per-student analysis of multiple-choice quiz responses.

Usage:
    from mcq_breakdown import QuizSnapshot, build_breakdown

    report = build_breakdown(QuizSnapshot.model_validate_json(raw_json))
"""

from mcq_breakdown.core import SortSpec, build_breakdown
from mcq_breakdown.exceptions import (
    BreakdownError,
    InvalidParameterError,
    MalformedResponseError,
    PreconditionError,
)
from mcq_breakdown.models import QuizSnapshot
from mcq_breakdown.schemas import BreakdownReport

__version__ = "0.1.0"

__all__ = [
    "BreakdownError",
    "BreakdownReport",
    "InvalidParameterError",
    "MalformedResponseError",
    "PreconditionError",
    "QuizSnapshot",
    "SortSpec",
    "build_breakdown",
]
