import pytest
from datetime import date
from uuid import UUID
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole
from apps.celebrations.services import create_celebration


# Fixed ids so that rotation order ties are predictable
ANN_ID = UUID('00000000-0000-0000-0000-00000000000a')
BEN_ID = UUID('00000000-0000-0000-0000-00000000000b')
CAT_ID = UUID('00000000-0000-0000-0000-00000000000c')
DAN_ID = UUID('00000000-0000-0000-0000-00000000000d')


def make_client(user):
    """Return an API client authenticated as ``user``."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def ann(db):
    """Group owner, birthday January 5."""
    return User.objects.create_user(
        id=ANN_ID,
        email='ann@example.com',
        password='TestPass123!',
        display_name='Ann',
        birthday=date(1990, 1, 5),
    )


@pytest.fixture
def ben(db):
    """Member, birthday March 20."""
    return User.objects.create_user(
        id=BEN_ID,
        email='ben@example.com',
        password='TestPass123!',
        display_name='Ben',
        birthday=date(1985, 3, 20),
    )


@pytest.fixture
def cat(db):
    """Member, birthday March 20 (same day as Ben)."""
    return User.objects.create_user(
        id=CAT_ID,
        email='cat@example.com',
        password='TestPass123!',
        display_name='Cat',
        birthday=date(1993, 3, 20),
    )


@pytest.fixture
def dan(db):
    """Member without a birthday."""
    return User.objects.create_user(
        id=DAN_ID,
        email='dan@example.com',
        password='TestPass123!',
        display_name='Dan',
    )


@pytest.fixture
def outsider(db):
    """User who is not in the group."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        display_name='Outsider',
    )


@pytest.fixture
def group(ann, ben, cat, dan):
    """Group owned by Ann with Ben, Cat and Dan as members."""
    group = Group.objects.create(name='Family', owner=ann)
    GroupMembership.objects.create(user=ann, group=group, role=GroupRole.OWNER)
    for member in (ben, cat, dan):
        GroupMembership.objects.create(user=member, group=group, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def ann_celebration(group, ann):
    """Ann's birthday; rotation picks Ben."""
    return create_celebration(
        group_id=group.id,
        celebrant_id=ann.id,
        event_date=date(2026, 1, 5),
        created_by_id=ann.id,
    )


@pytest.fixture
def dan_celebration(group, ann, dan):
    """Dan's celebration with a 100.00 target; rotation wraps to Ann."""
    return create_celebration(
        group_id=group.id,
        celebrant_id=dan.id,
        event_date=date(2026, 6, 1),
        created_by_id=ann.id,
        target_amount='100.00',
    )


@pytest.fixture
def ann_client(ann):
    return make_client(ann)


@pytest.fixture
def ben_client(ben):
    return make_client(ben)


@pytest.fixture
def dan_client(dan):
    return make_client(dan)


@pytest.fixture
def outsider_client(outsider):
    return make_client(outsider)
