"""
Sample selection: which roster students are included in a report run.

Group and role membership are looked up through predicates supplied by the
caller; this module only composes them. All exclusion rules combine with AND.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from mcq_breakdown.domain_types import RoleFilter
from mcq_breakdown.models import Student
from ._constants import WHOLE_POPULATION_GROUP_ID

logger = logging.getLogger(__name__)

# (group_id, user_id) -> bool
GroupMemberPredicate = Callable[[int, int], bool]
# user_id -> ids of the groups / groupings the user belongs to
MembershipLookup = Callable[[int], Set[int]]
# user_id -> bool
RolePredicate = Callable[[int], bool]


@dataclass(frozen=True)
class SampleCriteria:
    """
    Filter settings for one report run.

    Attributes:
        group_ids: Selected groups; WHOLE_POPULATION_GROUP_ID (0) means no
            group restriction.
        role_filter: ALL, or REGISTERED to keep only registered students.
        group_members_only: The activity is visible to group members only.
        grouping_id: Grouping the activity is restricted to (0 = none).
    """

    group_ids: Tuple[int, ...] = (WHOLE_POPULATION_GROUP_ID,)
    role_filter: RoleFilter = RoleFilter.REGISTERED
    group_members_only: bool = False
    grouping_id: int = 0


@dataclass(frozen=True)
class MembershipPredicates:
    """External membership lookups used by the filter."""

    is_group_member: GroupMemberPredicate
    groups_of: MembershipLookup
    groupings_of: MembershipLookup
    is_registered: RolePredicate

    @classmethod
    def from_students(cls, students: Iterable[Student]) -> "MembershipPredicates":
        """Build O(1) predicates from the membership data carried on the roster."""
        groups = {}
        groupings = {}
        registered = set()
        for student in students:
            groups[student.id] = frozenset(student.group_ids)
            groupings[student.id] = frozenset(student.grouping_ids)
            if student.is_registered:
                registered.add(student.id)
        empty: frozenset = frozenset()
        return cls(
            is_group_member=lambda group_id, user_id: group_id in groups.get(user_id, empty),
            groups_of=lambda user_id: groups.get(user_id, empty),
            groupings_of=lambda user_id: groupings.get(user_id, empty),
            is_registered=lambda user_id: user_id in registered,
        )


def default_group_selection(available_group_ids: Sequence[int]) -> Tuple[int, ...]:
    """
    Group selection used when the caller passes none.

    Selects the first available group so that large cohorts are not shown by
    default, or the whole population when no groups exist.
    """
    if available_group_ids:
        return (available_group_ids[0],)
    return (WHOLE_POPULATION_GROUP_ID,)


def is_in_sample(
    user_id: int,
    criteria: SampleCriteria,
    predicates: MembershipPredicates,
) -> bool:
    """Decide whether one student belongs to the sample."""
    if WHOLE_POPULATION_GROUP_ID in criteria.group_ids:
        include = True
        if criteria.group_members_only:
            # Users who cannot see the activity are left out
            in_any_group = bool(predicates.groups_of(user_id))
            in_grouping = criteria.grouping_id == 0 or (
                criteria.grouping_id in predicates.groupings_of(user_id)
            )
            include = in_any_group and in_grouping
    else:
        include = any(
            predicates.is_group_member(group_id, user_id)
            for group_id in criteria.group_ids
        )

    if criteria.role_filter == RoleFilter.REGISTERED and not predicates.is_registered(
        user_id
    ):
        include = False

    return include


def filter_sample(
    students: Sequence[Student],
    criteria: SampleCriteria,
    predicates: Optional[MembershipPredicates] = None,
) -> List[Student]:
    """
    Return the students included in the sample, preserving roster order.

    Args:
        students: Roster of students able to attempt the quiz.
        criteria: Group, grouping and role filter settings.
        predicates: Membership lookups. Defaults to the membership data
            carried on the Student records.
    """
    if predicates is None:
        predicates = MembershipPredicates.from_students(students)

    sample = [
        student
        for student in students
        if is_in_sample(student.id, criteria, predicates)
    ]
    logger.debug(
        f"Sample contains {len(sample)} of {len(students)} students "
        f"(groups={list(criteria.group_ids)}, filter={criteria.role_filter.value})"
    )
    return sample
