"""
Tests for the Gift Leader rotation planner.

The planner is a pure function, so most of these run without a database.
"""

import itertools
import random
from uuid import UUID, uuid4

import pytest

from apps.celebrations.services import RosterMember, plan_next_leader, roster_for_group, sort_roster
from apps.core.exceptions import CelebrantNotFoundError, InsufficientMembersError

A = UUID('00000000-0000-0000-0000-00000000000a')
B = UUID('00000000-0000-0000-0000-00000000000b')
C = UUID('00000000-0000-0000-0000-00000000000c')
D = UUID('00000000-0000-0000-0000-00000000000d')


def example_roster():
    return [
        RosterMember(A, 1, 5),
        RosterMember(B, 3, 20),
        RosterMember(C, 3, 20),
        RosterMember(D),
    ]


class TestPlanNextLeader:
    """Test leader selection."""

    def test_example_roster(self):
        """a(Jan 5), b(Mar 20), c(Mar 20), d(none): celebrant a -> b."""
        assert plan_next_leader(example_roster(), A) == B

    def test_same_birthday_tie_broken_by_id(self):
        assert plan_next_leader(example_roster(), B) == C

    def test_undated_members_come_after_dated(self):
        assert plan_next_leader(example_roster(), C) == D

    def test_wraps_from_last_to_first(self):
        assert plan_next_leader(example_roster(), D) == A

    def test_undated_members_ordered_by_id(self):
        first, second = sorted([uuid4(), uuid4()], key=str)
        roster = [RosterMember(second), RosterMember(A, 6, 1), RosterMember(first)]

        ordered = [member.id for member in sort_roster(roster)]

        assert ordered == [A, first, second]

    def test_month_without_day_sorts_as_first_of_month(self):
        roster = [RosterMember(B, 3, 2), RosterMember(C, 3, None), RosterMember(D, 2, 28)]

        ordered = [member.id for member in sort_roster(roster)]

        assert ordered == [D, C, B]

    def test_ids_compared_as_strings(self):
        roster = [RosterMember('b'), RosterMember('a'), RosterMember('c')]
        assert plan_next_leader(roster, 'a') == 'b'


class TestTwoMemberGroups:
    """With two members the other member always leads."""

    @pytest.mark.parametrize('birthdays', [
        ((1, 5), (3, 20)),
        ((3, 20), (1, 5)),
        ((None, None), (7, 4)),
        ((None, None), (None, None)),
        ((12, 31), (12, 31)),
    ])
    def test_returns_other_member(self, birthdays):
        (m1, d1), (m2, d2) = birthdays
        roster = [RosterMember(A, m1, d1), RosterMember(B, m2, d2)]

        assert plan_next_leader(roster, A) == B
        assert plan_next_leader(roster, B) == A


class TestRotationProperties:
    """Properties that hold for any roster."""

    def test_never_returns_celebrant(self):
        rng = random.Random(7)
        for size in range(2, 9):
            roster = [
                RosterMember(uuid4(), rng.choice([None, 1, 3, 12]), rng.choice([None, 1, 20]))
                for _ in range(size)
            ]
            ids = {member.id for member in roster}
            for member in roster:
                leader = plan_next_leader(roster, member.id)
                assert leader != member.id
                assert leader in ids

    def test_deterministic_regardless_of_input_order(self):
        for permutation in itertools.permutations(example_roster()):
            assert plan_next_leader(list(permutation), A) == B
            assert plan_next_leader(list(permutation), D) == A

    def test_repeated_calls_agree(self):
        roster = example_roster()
        results = {plan_next_leader(roster, C) for _ in range(10)}
        assert results == {D}


class TestRotationErrors:
    """Test failure signals."""

    def test_empty_roster(self):
        with pytest.raises(InsufficientMembersError):
            plan_next_leader([], A)

    def test_single_member(self):
        with pytest.raises(InsufficientMembersError):
            plan_next_leader([RosterMember(A, 1, 5)], A)

    def test_duplicates_count_once(self):
        with pytest.raises(InsufficientMembersError):
            plan_next_leader([RosterMember(A, 1, 5), RosterMember(A, 1, 5)], A)

    def test_celebrant_not_in_roster(self):
        with pytest.raises(CelebrantNotFoundError):
            plan_next_leader(example_roster(), uuid4())


@pytest.mark.django_db
class TestRosterForGroup:
    """Test roster construction from memberships."""

    def test_includes_birthdays(self, group, ann, dan):
        roster = {member.id: member for member in roster_for_group(group_id=group.id)}

        assert len(roster) == 4
        assert roster[ann.id].birthday_month == 1
        assert roster[ann.id].birthday_day == 5
        assert roster[dan.id].has_birthday is False

    def test_exclude(self, group, ben):
        roster = roster_for_group(group_id=group.id, exclude=[ben.id])

        assert ben.id not in {member.id for member in roster}
        assert len(roster) == 3
