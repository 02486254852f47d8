"""
Internal structures shared by the breakdown core modules.

A ``CanonicalQuestion`` is prepared once per question per run: it fixes the
canonical option order, the O(1) option-id lookup and the correctness sets.
Nothing here is persisted or reused across runs.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Tuple

from mcq_breakdown.domain_types import QuestionType
from mcq_breakdown.exceptions import PreconditionError
from mcq_breakdown.models import Question


@dataclass(frozen=True)
class CorrectnessKey:
    """
    Correct option positions for one question.

    Attributes:
        fully_correct: 1-based canonical positions of options worth 100%.
        any_correct: 1-based canonical positions of options worth > 0%.
            Always a superset of ``fully_correct``.
    """

    fully_correct: FrozenSet[int]
    any_correct: FrozenSet[int]


@dataclass(frozen=True)
class CanonicalQuestion:
    """A multiple-choice question prepared for one aggregation run."""

    question_id: int
    sequence_index: int  # 0-based rank among the report's MCQs
    number: int  # 1-based rank among the quiz's significant questions
    is_single_answer: bool
    is_true_false: bool
    option_ids: Tuple[int, ...]  # canonical order
    option_texts: Tuple[str, ...]
    key: CorrectnessKey
    position_by_option_id: Dict[int, int] = field(compare=False)

    @property
    def option_count(self) -> int:
        return len(self.option_ids)


def build_correctness_key(question: Question) -> CorrectnessKey:
    """Derive the fully/any correct position sets from option fractions."""
    fully = set()
    anyc = set()
    for position, option in enumerate(question.canonical_options, start=1):
        if option.any_correct:
            anyc.add(position)
            if option.fully_correct:
                fully.add(position)
    return CorrectnessKey(fully_correct=frozenset(fully), any_correct=frozenset(anyc))


def prepare_question(
    question: Question, sequence_index: int, number: int
) -> CanonicalQuestion:
    """
    Freeze a question's canonical option order for one run.

    Raises:
        PreconditionError: If the question has no options or duplicate option ids.
    """
    options = question.canonical_options
    if not options:
        raise PreconditionError(
            "Multiple-choice question has no options",
            context={"question_id": question.id},
        )

    option_ids = tuple(option.id for option in options)
    if len(set(option_ids)) != len(option_ids):
        raise PreconditionError(
            "Multiple-choice question has duplicate option ids",
            context={"question_id": question.id},
        )

    is_true_false = question.qtype == QuestionType.TRUEFALSE
    return CanonicalQuestion(
        question_id=question.id,
        sequence_index=sequence_index,
        number=number,
        is_single_answer=question.single or is_true_false,
        is_true_false=is_true_false,
        option_ids=option_ids,
        option_texts=tuple(option.text for option in options),
        key=build_correctness_key(question),
        position_by_option_id={
            option_id: position
            for position, option_id in enumerate(option_ids, start=1)
        },
    )
