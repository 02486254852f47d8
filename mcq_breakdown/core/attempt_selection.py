"""
Attempt selection per grading policy.

Each student may have several finished attempts at a quiz; the report shows
exactly one of them, chosen the same way the quiz grade is chosen:

    highest  - attempt with the maximal sum of question grades
               (ties keep the first encountered)
    first    - the attempt numbered 1
    last     - attempt with the maximal attempt number
    average  - cannot be represented by one attempt; approximated by
               ``last`` and reported with a warning
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from mcq_breakdown.domain_types import AttemptState, GradingPolicy
from mcq_breakdown.models import Attempt
from ._constants import WARNING_AVERAGE_POLICY

logger = logging.getLogger(__name__)


@dataclass
class AttemptSelection:
    """
    Result of selecting one attempt per student.

    Attributes:
        by_user: Mapping of user id to the selected attempt.
        warnings: Advisory messages produced during selection.
    """

    by_user: Dict[int, Attempt] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


def _select_highest(attempts: Iterable[Attempt]) -> Dict[int, Attempt]:
    selected: Dict[int, Attempt] = {}
    for attempt in attempts:
        current = selected.get(attempt.user_id)
        if current is None or attempt.sum_grades > current.sum_grades:
            selected[attempt.user_id] = attempt
    return selected


def _select_first(attempts: Iterable[Attempt]) -> Dict[int, Attempt]:
    selected: Dict[int, Attempt] = {}
    for attempt in attempts:
        if attempt.attempt == 1:
            selected[attempt.user_id] = attempt
    return selected


def _select_last(attempts: Iterable[Attempt]) -> Dict[int, Attempt]:
    selected: Dict[int, Attempt] = {}
    for attempt in attempts:
        current = selected.get(attempt.user_id)
        if current is None or attempt.attempt > current.attempt:
            selected[attempt.user_id] = attempt
    return selected


def select_attempts(
    attempts: Iterable[Attempt],
    policy: GradingPolicy,
    eligible_user_ids: Optional[Set[int]] = None,
) -> AttemptSelection:
    """
    Pick at most one attempt per student according to the grading policy.

    Args:
        attempts: Attempts at the quiz. Only finished attempts are considered;
            others are skipped. The input is not modified.
        policy: Grading policy of the quiz.
        eligible_user_ids: When given, attempts by users outside this set are
            ignored (restricts selection to the sample).

    Returns:
        AttemptSelection with the chosen attempt per user id and any warnings.
    """
    considered: List[Attempt] = []
    skipped = 0
    for attempt in attempts:
        if attempt.state != AttemptState.FINISHED:
            skipped += 1
            continue
        if eligible_user_ids is not None and attempt.user_id not in eligible_user_ids:
            continue
        considered.append(attempt)

    if skipped:
        logger.debug(f"Ignored {skipped} attempts that are not finished")

    selection = AttemptSelection()

    if policy == GradingPolicy.HIGHEST:
        selection.by_user = _select_highest(considered)
    elif policy == GradingPolicy.FIRST:
        selection.by_user = _select_first(considered)
    else:
        if policy == GradingPolicy.AVERAGE:
            logger.warning(
                "Average grading policy cannot be shown per attempt; "
                "using each student's last attempt"
            )
            selection.warnings.append(WARNING_AVERAGE_POLICY)
        selection.by_user = _select_last(considered)

    logger.debug(
        f"Selected {len(selection.by_user)} attempts from {len(considered)} "
        f"finished attempts using policy '{policy.value}'"
    )
    return selection
