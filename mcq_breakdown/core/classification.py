"""
Correctness classification of normalized responses.

Single-answer questions:
    correct   - at least one 100% option chosen
    partial   - otherwise, at least one option worth > 0% chosen
    incorrect - otherwise

Multi-answer questions:
    correct   - the chosen set equals the set of options worth > 0%
    partial   - otherwise, the chosen set shares at least one such option
    incorrect - otherwise

An empty selection is always incorrect; the caller counts it separately as
unanswered.
"""

from typing import Iterable, MutableMapping, Optional

from mcq_breakdown.domain_types import Classification
from ._types import CanonicalQuestion, CorrectnessKey


def classify_positions(
    chosen: Iterable[int],
    is_single_answer: bool,
    key: CorrectnessKey,
) -> Classification:
    """
    Classify a set of chosen canonical positions against a correctness key.

    Args:
        chosen: 1-based canonical positions chosen by the student.
        is_single_answer: Whether the question allows only one answer.
        key: Fully/any correct position sets for the question.

    Returns:
        Classification.CORRECT, PARTIAL or INCORRECT.
    """
    chosen_set = frozenset(chosen)
    if not chosen_set:
        return Classification.INCORRECT

    if is_single_answer:
        if chosen_set & key.fully_correct:
            return Classification.CORRECT
    elif chosen_set == key.any_correct:
        return Classification.CORRECT

    if chosen_set & key.any_correct:
        return Classification.PARTIAL
    return Classification.INCORRECT


def classify_response(
    question: CanonicalQuestion,
    chosen: Iterable[int],
    correct_counts: Optional[MutableMapping[int, int]] = None,
) -> Classification:
    """
    Classify a response and tally it when correct.

    Args:
        question: The prepared question.
        chosen: 1-based canonical positions chosen by the student.
        correct_counts: Per-question correct counters keyed by question id.
            Incremented for ``question`` when the response is correct.

    Returns:
        The response classification.
    """
    classification = classify_positions(chosen, question.is_single_answer, question.key)
    if correct_counts is not None and classification == Classification.CORRECT:
        correct_counts[question.question_id] = (
            correct_counts.get(question.question_id, 0) + 1
        )
    return classification
