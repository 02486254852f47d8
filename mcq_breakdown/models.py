"""
Pydantic models for the input snapshot consumed by the breakdown engine.

The snapshot is fully materialized by the caller (quiz settings, questions,
finished attempts, roster, raw response data) and treated as read-only. All
models are frozen so the engine cannot mutate caller-owned data.

Raw response data mirrors what the quiz platform stores per question attempt:
the display order of the options ("_order"), the final submitted step
("answer" for single-answer questions, "choiceN" flags for multi-answer
questions) and a plain-text response summary.
"""
import re
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mcq_breakdown.domain_types import AttemptState, GradingPolicy, QuestionType

_CHOICE_FIELD_PATTERN = re.compile(r"^choice(\d+)$")


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Option(_FrozenModel):
    """A single answer option of a question."""

    id: int = Field(..., description="Option identifier; ascending id is canonical order")
    fraction: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Credit awarded when this option is chosen (0.0-1.0)",
    )
    text: str = Field(default="", description="Authored option text, may contain HTML")

    @property
    def fully_correct(self) -> bool:
        return self.fraction == 1.0

    @property
    def any_correct(self) -> bool:
        return self.fraction > 0.0


class Question(_FrozenModel):
    """A quiz question with its options in any stored order."""

    id: int
    slot: int = Field(..., ge=0, description="Position of the question in the quiz")
    qtype: QuestionType = QuestionType.MULTICHOICE
    single: bool = Field(default=True, description="Single-answer (radio) question")
    default_mark: float = Field(default=1.0, ge=0.0)
    options: List[Option] = Field(default_factory=list)

    @property
    def canonical_options(self) -> List[Option]:
        """Options in canonical (authored, unshuffled) order."""
        return sorted(self.options, key=lambda option: option.id)


class Attempt(_FrozenModel):
    """One attempt by one student at the quiz."""

    id: int = Field(..., description="Unique attempt (question usage) identifier")
    user_id: int
    attempt: int = Field(..., ge=1, description="Attempt number per student, 1-based")
    sum_grades: float = Field(default=0.0, description="Sum of question grades")
    state: AttemptState = AttemptState.FINISHED


class ChoiceFlag(_FrozenModel):
    """Selection state of one displayed slot of a multi-answer question."""

    slot_index: int = Field(..., ge=0, description="0-based index into the display order")
    selected: bool


class SubmittedStep(_FrozenModel):
    """The final submitted step of a question attempt.

    Single-answer questions record ``answer`` (an index into the display
    order, or 1/0 for true/false). Multi-answer questions record one
    ``ChoiceFlag`` per displayed slot.
    """

    answer: Optional[int] = None
    choices: List[ChoiceFlag] = Field(default_factory=list)

    @property
    def has_answer(self) -> bool:
        return self.answer is not None

    @classmethod
    def from_step_data(cls, data: Mapping[str, str]) -> "SubmittedStep":
        """
        Build a submitted step from raw step data name/value pairs.

        Example:
            {"answer": "2"} -> SubmittedStep(answer=2)
            {"choice0": "1", "choice1": "0"} -> two ChoiceFlags

        Names other than "answer" and "choiceN" are ignored.
        """
        answer: Optional[int] = None
        choices: List[ChoiceFlag] = []
        for name, value in data.items():
            if name == "answer":
                answer = int(value)
                continue
            match = _CHOICE_FIELD_PATTERN.match(name)
            if match:
                choices.append(
                    ChoiceFlag(slot_index=int(match.group(1)), selected=int(value) > 0)
                )
        choices.sort(key=lambda flag: flag.slot_index)
        return cls(answer=answer, choices=choices)


class QuestionResponse(_FrozenModel):
    """Raw recorded data for one (attempt, question) pair."""

    attempt_id: int
    question_id: int
    order: Optional[List[int]] = Field(
        default=None,
        description="Option ids in the order displayed to the student",
    )
    submitted: Optional[SubmittedStep] = None
    response_summary: Optional[str] = None

    @field_validator("order", mode="before")
    @classmethod
    def _split_order_string(cls, value):
        # Stored as a comma-separated string, e.g. "31,29,30"
        if isinstance(value, str):
            value = [int(part) for part in value.split(",") if part.strip()]
        return value


class Student(_FrozenModel):
    """A roster entry for a student able to attempt the quiz."""

    id: int
    firstname: str = ""
    lastname: str = ""
    group_ids: List[int] = Field(default_factory=list)
    grouping_ids: List[int] = Field(
        default_factory=list,
        description="Groupings containing at least one of the student's groups",
    )
    is_registered: bool = Field(
        default=True,
        description="Holds the registered-student role (as opposed to e.g. auditing)",
    )


class QuizSettings(_FrozenModel):
    """Quiz-level settings needed for grading and sampling."""

    id: int
    name: str = ""
    grade: float = Field(..., ge=0.0, description="Maximum grade for the quiz")
    sum_grades: float = Field(..., description="Sum of the possible question grades")
    grading_policy: GradingPolicy = GradingPolicy.HIGHEST
    decimal_points: int = Field(default=2, ge=0)
    time_close: Optional[datetime] = None
    group_members_only: bool = False
    grouping_id: int = 0


class QuizSnapshot(_FrozenModel):
    """Everything one report run needs, pre-fetched by the caller."""

    quiz: QuizSettings
    questions: List[Question] = Field(default_factory=list)
    attempts: List[Attempt] = Field(default_factory=list)
    students: List[Student] = Field(default_factory=list)
    responses: List[QuestionResponse] = Field(default_factory=list)

    def response_index(self) -> Dict[tuple, QuestionResponse]:
        """Index raw responses by (attempt_id, question_id)."""
        return {
            (response.attempt_id, response.question_id): response
            for response in self.responses
        }
