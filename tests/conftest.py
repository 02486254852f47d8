"""
Shared factories and fixtures for breakdown tests.

Factories build frozen snapshot models with sensible defaults so each test
only spells out the fields it cares about.
"""
from typing import Dict, List, Optional, Sequence

import pytest

from mcq_breakdown.domain_types import AttemptState, GradingPolicy, QuestionType
from mcq_breakdown.models import (
    Attempt,
    ChoiceFlag,
    Option,
    Question,
    QuestionResponse,
    QuizSettings,
    QuizSnapshot,
    Student,
    SubmittedStep,
)


# =============================================================================
# FACTORIES
# =============================================================================


def make_question(
    question_id: int,
    fractions: Sequence[float],
    single: bool = True,
    slot: Optional[int] = None,
    qtype: QuestionType = QuestionType.MULTICHOICE,
    texts: Optional[Sequence[str]] = None,
    first_option_id: Optional[int] = None,
) -> Question:
    """
    Create a question whose option ids ascend from ``first_option_id``.

    Option ids default to question_id * 100 + 1, + 2, ... so canonical
    position k has id question_id * 100 + k.
    """
    base = first_option_id if first_option_id is not None else question_id * 100 + 1
    texts = texts or [f"Option {chr(ord('A') + i)}" for i in range(len(fractions))]
    return Question(
        id=question_id,
        slot=slot if slot is not None else question_id,
        qtype=qtype,
        single=single,
        options=[
            Option(id=base + i, fraction=fraction, text=texts[i])
            for i, fraction in enumerate(fractions)
        ],
    )


def make_attempt(
    attempt_id: int,
    user_id: int,
    attempt: int = 1,
    sum_grades: float = 0.0,
    state: AttemptState = AttemptState.FINISHED,
) -> Attempt:
    return Attempt(
        id=attempt_id,
        user_id=user_id,
        attempt=attempt,
        sum_grades=sum_grades,
        state=state,
    )


def make_student(
    user_id: int,
    lastname: str,
    firstname: str = "Test",
    group_ids: Sequence[int] = (),
    grouping_ids: Sequence[int] = (),
    is_registered: bool = True,
) -> Student:
    return Student(
        id=user_id,
        lastname=lastname,
        firstname=firstname,
        group_ids=list(group_ids),
        grouping_ids=list(grouping_ids),
        is_registered=is_registered,
    )


def single_response(
    attempt_id: int,
    question: Question,
    display_order: Sequence[int],
    answer_index: int,
) -> QuestionResponse:
    """Single-answer response choosing display slot ``answer_index``."""
    return QuestionResponse(
        attempt_id=attempt_id,
        question_id=question.id,
        order=list(display_order),
        submitted=SubmittedStep(answer=answer_index),
    )


def multi_response(
    attempt_id: int,
    question: Question,
    display_order: Sequence[int],
    selected_slots: Sequence[int],
) -> QuestionResponse:
    """Multi-answer response selecting the given display slots."""
    return QuestionResponse(
        attempt_id=attempt_id,
        question_id=question.id,
        order=list(display_order),
        submitted=SubmittedStep(
            choices=[
                ChoiceFlag(slot_index=slot, selected=slot in selected_slots)
                for slot in range(len(display_order))
            ]
        ),
    )


def option_ids(question: Question) -> List[int]:
    """Option ids of a question in canonical order."""
    return [option.id for option in question.canonical_options]


def make_snapshot(
    questions: Sequence[Question],
    students: Sequence[Student],
    attempts: Sequence[Attempt] = (),
    responses: Sequence[QuestionResponse] = (),
    **quiz_fields,
) -> QuizSnapshot:
    quiz_values: Dict = {
        "id": 1,
        "grade": 10.0,
        "sum_grades": float(len(questions)) or 1.0,
        "grading_policy": GradingPolicy.HIGHEST,
        "decimal_points": 2,
    }
    quiz_values.update(quiz_fields)
    return QuizSnapshot(
        quiz=QuizSettings(**quiz_values),
        questions=list(questions),
        students=list(students),
        attempts=list(attempts),
        responses=list(responses),
    )


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def single_question() -> Question:
    """Single-answer question: A (0%), B (100%), C (0%)."""
    return make_question(1, [0.0, 1.0, 0.0])


@pytest.fixture
def multi_question() -> Question:
    """Multi-answer question: A (50%), B (0%), C (50%), D (0%)."""
    return make_question(2, [0.5, 0.0, 0.5, 0.0], single=False)


@pytest.fixture
def worked_example_snapshot() -> QuizSnapshot:
    """
    Two single-answer MCQs, three eligible students, highest-grade policy.

    Q1 options [A(0), B(1), C(0)]; student X (id 1) chose B on Q1, student
    Y (id 2) left Q1 blank, student Z (id 3) has no attempt.
    sum_grades possible = 10, quiz grade = 5, X scored 8.
    """
    q1 = make_question(1, [0.0, 1.0, 0.0])
    q2 = make_question(2, [1.0, 0.0])
    students = [
        make_student(1, "Xavier", "Xena"),
        make_student(2, "Young", "Yan"),
        make_student(3, "Zimmer", "Zoe"),
    ]
    attempts = [
        make_attempt(11, user_id=1, sum_grades=8.0),
        make_attempt(21, user_id=2, sum_grades=5.0),
    ]
    # X sees Q1 shuffled as C, B, A and picks the second displayed option (B)
    q1_order = [103, 102, 101]
    responses = [
        single_response(11, q1, q1_order, answer_index=1),
        single_response(11, q2, option_ids(q2), answer_index=0),
        QuestionResponse(attempt_id=21, question_id=1, order=q1_order),
        single_response(21, q2, option_ids(q2), answer_index=1),
    ]
    return make_snapshot(
        [q1, q2],
        students,
        attempts,
        responses,
        grade=5.0,
        sum_grades=10.0,
        decimal_points=2,
    )
