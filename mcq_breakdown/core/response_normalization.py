"""
Response normalization into canonical option positions.

Options may be shuffled for each student, so the recorded response refers to
the display order of that particular attempt. To make responses comparable
between students, every chosen option is mapped back to its 1-based position
in the canonical (unshuffled, ascending option id) order.

Reconstruction strategies, in priority order:
    1. Submitted step data
       - single answer with display order: answer indexes the display order
       - single answer without display order (true/false): truthy answer is
         position 1, otherwise position 2
       - multi answer: each selected slot indexes the display order
    2. Response summary text (no step data, e.g. restored from a backup):
       the summary is split into answers and compared with each option's
       HTML-stripped text. Best-effort; the result is flagged as degraded.
    3. Nothing recorded: empty selection.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from mcq_breakdown.config import settings
from mcq_breakdown.domain_types import ResponseSource
from mcq_breakdown.exceptions import MalformedResponseError
from mcq_breakdown.models import QuestionResponse, SubmittedStep
from ._constants import FALSE_POSITION, TRUE_POSITION
from ._types import CanonicalQuestion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedResponse:
    """
    A response expressed in canonical option positions.

    Attributes:
        positions: Sorted, de-duplicated 1-based canonical positions.
        source: Which reconstruction strategy produced the positions.
        ambiguous: True when the text fallback could not match the summary
            unambiguously (duplicate option texts or unmatched answers).
    """

    positions: Tuple[int, ...]
    source: ResponseSource
    ambiguous: bool = False

    @property
    def answered(self) -> bool:
        return bool(self.positions)

    @property
    def degraded(self) -> bool:
        return self.source == ResponseSource.TEXT_FALLBACK


EMPTY_RESPONSE = NormalizedResponse(positions=(), source=ResponseSource.NONE)


def normalize_option_text(text: str) -> str:
    """Strip HTML markup and surrounding whitespace from option or summary text."""
    if not text:
        return ""
    return BeautifulSoup(text, "html.parser").get_text().strip()


def _canonical_position(
    question: CanonicalQuestion,
    order: Sequence[int],
    display_index: int,
    response: QuestionResponse,
) -> int:
    if not 0 <= display_index < len(order):
        raise MalformedResponseError(
            "Response index is outside the displayed option order",
            context={
                "attempt_id": response.attempt_id,
                "question_id": question.question_id,
                "index": display_index,
                "displayed_options": len(order),
            },
        )
    option_id = order[display_index]
    position = question.position_by_option_id.get(option_id)
    if position is None:
        raise MalformedResponseError(
            "Displayed option does not belong to the question",
            context={
                "attempt_id": response.attempt_id,
                "question_id": question.question_id,
                "option_id": option_id,
            },
        )
    return position


def _positions_from_step(
    question: CanonicalQuestion,
    response: QuestionResponse,
    step: SubmittedStep,
) -> NormalizedResponse:
    order = response.order

    if step.has_answer:
        if not order:
            # True/false questions record a boolean-like answer and no order
            position = TRUE_POSITION if step.answer else FALSE_POSITION
            if position > question.option_count:
                raise MalformedResponseError(
                    "True/false answer has no matching option",
                    context={
                        "attempt_id": response.attempt_id,
                        "question_id": question.question_id,
                        "position": position,
                        "option_count": question.option_count,
                    },
                )
            return NormalizedResponse(
                positions=(position,), source=ResponseSource.TRUE_FALSE
            )
        position = _canonical_position(question, order, step.answer, response)
        return NormalizedResponse(positions=(position,), source=ResponseSource.STEP_DATA)

    if not order:
        raise MalformedResponseError(
            "Multi-answer response has no displayed option order",
            context={
                "attempt_id": response.attempt_id,
                "question_id": question.question_id,
            },
        )

    positions = {
        _canonical_position(question, order, flag.slot_index, response)
        for flag in step.choices
        if flag.selected
    }
    return NormalizedResponse(
        positions=tuple(sorted(positions)), source=ResponseSource.STEP_DATA
    )


def _positions_from_summary(
    question: CanonicalQuestion,
    summary: str,
    separator: str,
) -> NormalizedResponse:
    segments = [segment.strip() for segment in summary.split(separator)]
    segments = [segment for segment in segments if segment]

    texts: Dict[int, str] = {
        position: normalize_option_text(text)
        for position, text in enumerate(question.option_texts, start=1)
    }
    matched: List[int] = [
        position for position, text in texts.items() if text and text in segments
    ]

    matched_texts = [texts[position] for position in matched]
    duplicate_texts = len(set(matched_texts)) != len(matched_texts)
    unmatched_segments = any(segment not in matched_texts for segment in segments)

    return NormalizedResponse(
        positions=tuple(sorted(matched)),
        source=ResponseSource.TEXT_FALLBACK,
        ambiguous=duplicate_texts or unmatched_segments,
    )


def normalize_response(
    question: CanonicalQuestion,
    response: Optional[QuestionResponse],
    separator: Optional[str] = None,
) -> NormalizedResponse:
    """
    Map one recorded response to canonical 1-based option positions.

    Args:
        question: The prepared question (canonical order and lookups).
        response: Raw response data for this attempt, or None when the
            attempt has no record for the question.
        separator: Separator between answers in the response summary.
            Defaults to the configured RESPONSE_SUMMARY_SEPARATOR.

    Returns:
        NormalizedResponse with sorted, de-duplicated positions.

    Raises:
        MalformedResponseError: If step data refers to a display index or
            option id that does not exist for this question.
    """
    if response is None:
        return EMPTY_RESPONSE

    step = response.submitted
    if step is not None and (step.has_answer or step.choices):
        return _positions_from_step(question, response, step)

    summary = normalize_option_text(response.response_summary or "")
    if summary:
        normalized = _positions_from_summary(
            question,
            summary,
            separator if separator is not None else settings.RESPONSE_SUMMARY_SEPARATOR,
        )
        logger.debug(
            f"Reconstructed response for attempt {response.attempt_id} question "
            f"{question.question_id} from summary: {list(normalized.positions)} "
            f"(ambiguous={normalized.ambiguous})"
        )
        return normalized

    return EMPTY_RESPONSE
