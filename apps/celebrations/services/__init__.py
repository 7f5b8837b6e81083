"""Services for celebrations business logic."""

from .rotation_planning import (
    RosterMember,
    sort_roster,
    plan_next_leader,
    roster_for_group,
)
from .leadership_assignment import (
    LeadershipRecord,
    assign_initial_leader,
    reassign_leader,
    handle_member_departure,
    get_leader_history,
)
from .celebration_management import (
    create_celebration,
    complete_celebration,
    get_celebrations_for_user,
    get_celebration,
)
from .contribution_ledger import (
    add_or_update_contribution,
    remove_contribution,
    get_contribution_total,
    get_contributions,
    get_user_contribution,
)
from .budget_tracking import (
    get_group_budget_status,
    threshold_level,
)

__all__ = [
    # Rotation Planning
    'RosterMember',
    'sort_roster',
    'plan_next_leader',
    'roster_for_group',
    # Leadership Assignment
    'LeadershipRecord',
    'assign_initial_leader',
    'reassign_leader',
    'handle_member_departure',
    'get_leader_history',
    # Celebration Management
    'create_celebration',
    'complete_celebration',
    'get_celebrations_for_user',
    'get_celebration',
    # Contribution Ledger
    'add_or_update_contribution',
    'remove_contribution',
    'get_contribution_total',
    'get_contributions',
    'get_user_contribution',
    # Budget Tracking
    'get_group_budget_status',
    'threshold_level',
]
