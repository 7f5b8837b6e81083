import pytest
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole


@pytest.fixture
def group_owner(db):
    """Create and return a test user (group owner)."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Group Owner',
    )


@pytest.fixture
def admin_user(db):
    """Create and return a group admin."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        display_name='Group Admin',
    )


@pytest.fixture
def member_user(db):
    """Create and return a regular member."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        display_name='Group Member',
    )


@pytest.fixture
def non_member_user(db):
    """Create and return a user outside the group."""
    return User.objects.create_user(
        email='nonmember@example.com',
        password='TestPass123!',
        display_name='Non Member',
    )


@pytest.fixture
def group(group_owner, admin_user, member_user):
    """Group with an owner, an admin and a member."""
    group = Group.objects.create(name='Test Group', owner=group_owner)
    GroupMembership.objects.create(user=group_owner, group=group)
    GroupMembership.objects.create(user=admin_user, group=group, role=GroupRole.ADMIN)
    GroupMembership.objects.create(user=member_user, group=group, role=GroupRole.MEMBER)
    return group
