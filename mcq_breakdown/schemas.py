"""
Pydantic schemas for the breakdown report handed to the rendering layer.

These models carry data only; table layout, highlighting and labels are the
renderer's concern.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mcq_breakdown.domain_types import Classification, SortDirection, SortKey


class ResponseCell(BaseModel):
    """One student's response to one question."""

    model_config = ConfigDict(frozen=True)

    positions: List[int] = Field(
        default_factory=list,
        description="Chosen options as sorted 1-based canonical positions",
    )
    classification: Classification = Field(
        ...,
        description="Correctness of the response; unanswered cells are incorrect",
    )
    degraded: bool = Field(
        default=False,
        description="Reconstructed from the response summary instead of step data",
    )

    @property
    def answered(self) -> bool:
        return bool(self.positions)

    @property
    def display(self) -> str:
        """Comma-separated positions, e.g. "1,3"; empty when unanswered."""
        return ",".join(str(position) for position in self.positions)


class StudentRow(BaseModel):
    """Per-student row of the options-chosen table."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    lastname: str
    firstname: str
    attempt_id: int
    grade: float = Field(..., description="Quiz grade of the selected attempt")
    grade_percent: Optional[int] = Field(
        None, description="Grade as a percentage of the quiz maximum"
    )
    questions_attempted: int = Field(
        ..., ge=0, description="Number of MCQs with at least one option chosen"
    )
    questions_attempted_percent: Optional[int] = None
    responses: List[ResponseCell] = Field(
        default_factory=list,
        description="One cell per MCQ, in question order",
    )


class QuestionSummary(BaseModel):
    """Per-question key and totals."""

    question_id: int
    number: int = Field(..., description="1-based question number in the quiz")
    is_single_answer: bool
    option_count: int
    fully_correct: List[int] = Field(default_factory=list)
    any_correct: List[int] = Field(default_factory=list)
    correct_key: List[int] = Field(
        default_factory=list,
        description="Fully correct positions (single answer) or any-correct positions (multi answer)",
    )
    correct_count: int = 0
    answered_count: int = Field(
        0, description="Students in the sample who chose at least one option"
    )
    correct_percent: int = Field(
        0, description="Correct responses as a percentage of answering students"
    )


class OptionCountMatrix(BaseModel):
    """
    Option selection counts per question.

    ``counts[q][0]`` is the number of students making no choice on question
    ``q``; ``counts[q][k]`` the number whose choice included canonical
    position ``k``. Positions a question does not have are None.
    """

    max_options: int = 0
    counts: List[List[Optional[int]]] = Field(default_factory=list)


class SampleStatistics(BaseModel):
    """Summary statistics for the selected sample."""

    population_size: int = 0
    completed_count: int = 0
    not_completed_count: int = 0
    completed_percent: Optional[int] = 0
    not_completed_percent: Optional[int] = 0
    max_possible: float = 0.0
    max_grade: float = 0.0
    mean_grade: float = 0.0
    median_grade: float = 0.0
    max_grade_percent: Optional[int] = None
    mean_grade_percent: Optional[int] = None
    median_grade_percent: Optional[int] = None


class UncompletedStudent(BaseModel):
    """Sample member without a selected attempt."""

    user_id: int
    lastname: str
    firstname: str


class BreakdownReport(BaseModel):
    """Complete result of one breakdown run."""

    quiz_id: int
    time_close: Optional[datetime] = None
    no_data: bool = False
    warnings: List[str] = Field(default_factory=list)
    questions: List[QuestionSummary] = Field(default_factory=list)
    option_counts: OptionCountMatrix = Field(default_factory=OptionCountMatrix)
    rows: List[StudentRow] = Field(default_factory=list)
    statistics: SampleStatistics = Field(default_factory=SampleStatistics)
    uncompleted: List[UncompletedStudent] = Field(default_factory=list)
    sort_key: SortKey = SortKey.LASTNAME
    sort_direction: SortDirection = SortDirection.ASC
