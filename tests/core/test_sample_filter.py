"""
Tests for sample selection by group, grouping and role.
"""

import pytest

from mcq_breakdown.core import (
    WHOLE_POPULATION_GROUP_ID,
    MembershipPredicates,
    SampleCriteria,
    default_group_selection,
    filter_sample,
    is_in_sample,
)
from mcq_breakdown.domain_types import RoleFilter
from tests.conftest import make_student


@pytest.fixture
def roster():
    return [
        make_student(1, "Adams", group_ids=[10], grouping_ids=[100]),
        make_student(2, "Baker", group_ids=[20], grouping_ids=[200]),
        make_student(3, "Clark", group_ids=[10, 20], grouping_ids=[100, 200]),
        make_student(4, "Davis"),
        make_student(5, "Evans", group_ids=[10], grouping_ids=[100], is_registered=False),
    ]


def _ids(students):
    return [student.id for student in students]


class TestWholePopulation:
    def test_all_roles(self, roster):
        criteria = SampleCriteria(role_filter=RoleFilter.ALL)

        assert _ids(filter_sample(roster, criteria)) == [1, 2, 3, 4, 5]

    def test_registered_only(self, roster):
        criteria = SampleCriteria(role_filter=RoleFilter.REGISTERED)

        assert _ids(filter_sample(roster, criteria)) == [1, 2, 3, 4]

    def test_group_zero_among_others_still_means_everyone(self, roster):
        criteria = SampleCriteria(group_ids=(20, 0), role_filter=RoleFilter.ALL)

        assert _ids(filter_sample(roster, criteria)) == [1, 2, 3, 4, 5]


class TestGroupSelection:
    def test_single_group(self, roster):
        criteria = SampleCriteria(group_ids=(10,), role_filter=RoleFilter.ALL)

        assert _ids(filter_sample(roster, criteria)) == [1, 3, 5]

    def test_multiple_groups_are_unioned(self, roster):
        criteria = SampleCriteria(group_ids=(10, 20), role_filter=RoleFilter.ALL)

        assert _ids(filter_sample(roster, criteria)) == [1, 2, 3, 5]

    def test_group_and_role_combine(self, roster):
        criteria = SampleCriteria(group_ids=(10,), role_filter=RoleFilter.REGISTERED)

        assert _ids(filter_sample(roster, criteria)) == [1, 3]

    def test_unknown_group_is_empty(self, roster):
        criteria = SampleCriteria(group_ids=(99,), role_filter=RoleFilter.ALL)

        assert filter_sample(roster, criteria) == []


class TestGroupMembersOnly:
    """Activities visible to group members only."""

    def test_excludes_users_without_groups(self, roster):
        criteria = SampleCriteria(role_filter=RoleFilter.ALL, group_members_only=True)

        assert _ids(filter_sample(roster, criteria)) == [1, 2, 3, 5]

    def test_restricts_to_grouping(self, roster):
        criteria = SampleCriteria(
            role_filter=RoleFilter.ALL, group_members_only=True, grouping_id=200
        )

        assert _ids(filter_sample(roster, criteria)) == [2, 3]

    def test_grouping_ignored_without_members_only(self, roster):
        criteria = SampleCriteria(role_filter=RoleFilter.ALL, grouping_id=200)

        assert len(filter_sample(roster, criteria)) == 5


class TestPredicates:
    def test_custom_predicates_override_roster_data(self, roster):
        predicates = MembershipPredicates(
            is_group_member=lambda group_id, user_id: user_id == 4,
            groups_of=lambda user_id: set(),
            groupings_of=lambda user_id: set(),
            is_registered=lambda user_id: True,
        )
        criteria = SampleCriteria(group_ids=(10,), role_filter=RoleFilter.REGISTERED)

        assert _ids(filter_sample(roster, criteria, predicates)) == [4]

    def test_is_in_sample_for_unknown_user(self, roster):
        predicates = MembershipPredicates.from_students(roster)

        assert is_in_sample(42, SampleCriteria(role_filter=RoleFilter.ALL), predicates)
        assert not is_in_sample(42, SampleCriteria(), predicates)

    def test_preserves_roster_order(self, roster):
        reversed_roster = list(reversed(roster))

        sample = filter_sample(reversed_roster, SampleCriteria(role_filter=RoleFilter.ALL))

        assert _ids(sample) == [5, 4, 3, 2, 1]


class TestDefaultGroupSelection:
    def test_first_available_group(self):
        assert default_group_selection([30, 10]) == (30,)

    def test_no_groups_means_whole_population(self):
        assert default_group_selection([]) == (WHOLE_POPULATION_GROUP_ID,)
