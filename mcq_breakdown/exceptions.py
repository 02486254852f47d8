"""
Error taxonomy for the MCQ breakdown engine.

Only precondition violations are fatal. Data-quality problems (missing step
data, ambiguous text matching) are reported as warnings and per-cell flags,
and empty samples produce zero-filled statistics rather than errors.
"""
from typing import Any, Dict, Optional


class BreakdownError(Exception):
    """Base exception for breakdown computation errors.

    Attributes:
        message: Human-readable error description
        context: Structured details about where the error occurred
            (e.g., {"question_id": 12, "attempt_id": 40})
        original_error: The underlying exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.context = context or {}
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context."""
        msg = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            msg = f"{msg} (context: {ctx_str})"
        if self.original_error:
            msg = f"{msg} - caused by: {str(self.original_error)}"
        return msg


class PreconditionError(BreakdownError):
    """Raised when the input snapshot cannot produce a meaningful report.

    Examples are a quiz whose sum of possible grades is zero, or a
    multiple-choice question without any options. The whole computation is
    aborted so that no partial or misleading percentages are produced.
    """


class MalformedResponseError(PreconditionError):
    """Raised when recorded response data does not link to the question's options."""


class InvalidParameterError(BreakdownError, ValueError):
    """Raised for unknown grading-policy or sort codes."""
