"""
Tests for the snapshot input models.
"""

import pytest
from pydantic import ValidationError

from mcq_breakdown.domain_types import GradingPolicy, QuestionType
from mcq_breakdown.models import (
    Option,
    QuestionResponse,
    QuizSnapshot,
    SubmittedStep,
)
from tests.conftest import make_question, make_student, single_response


class TestOption:
    def test_fraction_flags(self):
        assert Option(id=1, fraction=1.0).fully_correct is True
        assert Option(id=1, fraction=0.5).fully_correct is False
        assert Option(id=1, fraction=0.5).any_correct is True
        assert Option(id=1, fraction=0.0).any_correct is False

    @pytest.mark.parametrize("fraction", [-0.1, 1.5])
    def test_fraction_out_of_range(self, fraction):
        with pytest.raises(ValidationError):
            Option(id=1, fraction=fraction)

    def test_models_are_frozen(self):
        option = Option(id=1, fraction=1.0)

        with pytest.raises(ValidationError):
            option.fraction = 0.0


class TestQuestion:
    def test_canonical_options_sorted_by_id(self):
        question = make_question(1, [0.0, 1.0, 0.0])
        shuffled = question.model_copy(
            update={"options": [question.options[2], question.options[0], question.options[1]]}
        )

        assert [option.id for option in shuffled.canonical_options] == [101, 102, 103]

    def test_is_mcq(self):
        assert QuestionType.MULTICHOICE.is_mcq is True
        assert QuestionType.TRUEFALSE.is_mcq is True
        assert QuestionType.ESSAY.is_mcq is False
        assert QuestionType.DESCRIPTION.is_mcq is False


class TestSubmittedStep:
    def test_from_single_answer_step_data(self):
        step = SubmittedStep.from_step_data({"answer": "2", "_order": "ignored"})

        assert step.answer == 2
        assert step.has_answer is True
        assert step.choices == []

    def test_from_multi_answer_step_data(self):
        step = SubmittedStep.from_step_data({"choice2": "1", "choice0": "1", "choice1": "0"})

        assert step.has_answer is False
        assert [(flag.slot_index, flag.selected) for flag in step.choices] == [
            (0, True),
            (1, False),
            (2, True),
        ]

    def test_zero_answer_is_still_an_answer(self):
        assert SubmittedStep(answer=0).has_answer is True

    def test_empty_step(self):
        step = SubmittedStep.from_step_data({})

        assert step.has_answer is False
        assert step.choices == []


class TestQuestionResponse:
    def test_order_from_comma_separated_string(self):
        response = QuestionResponse(attempt_id=1, question_id=2, order="31,29,30")

        assert response.order == [31, 29, 30]

    def test_order_from_list(self):
        response = QuestionResponse(attempt_id=1, question_id=2, order=[3, 1])

        assert response.order == [3, 1]

    def test_empty_order_string(self):
        response = QuestionResponse(attempt_id=1, question_id=2, order="")

        assert response.order == []


class TestQuizSnapshot:
    def test_response_index(self, single_question):
        response = single_response(7, single_question, [101, 102, 103], 0)
        snapshot = QuizSnapshot(
            quiz={"id": 1, "grade": 10, "sum_grades": 1},
            questions=[single_question],
            students=[make_student(1, "Ant")],
            responses=[response],
        )

        assert snapshot.response_index() == {(7, 1): response}

    def test_parses_json_document(self):
        raw = """
        {
            "quiz": {"id": 3, "grade": 10, "sum_grades": 2, "grading_policy": "first"},
            "questions": [
                {"id": 1, "slot": 1, "options": [{"id": 11, "fraction": 1}]}
            ],
            "attempts": [{"id": 5, "user_id": 9, "attempt": 1, "sum_grades": 1.5}],
            "students": [{"id": 9, "lastname": "Ant"}],
            "responses": [
                {"attempt_id": 5, "question_id": 1, "order": "11", "submitted": {"answer": 0}}
            ]
        }
        """

        snapshot = QuizSnapshot.model_validate_json(raw)

        assert snapshot.quiz.grading_policy == GradingPolicy.FIRST
        assert snapshot.questions[0].qtype == QuestionType.MULTICHOICE
        assert snapshot.responses[0].order == [11]
        assert snapshot.students[0].is_registered is True
