import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, GroupRole
from apps.wishlists.models import ItemType, WishlistItem


def make_client(user):
    """Return an API client authenticated as ``user``."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


def make_user(name):
    return User.objects.create_user(
        email=f'{name.lower()}@example.com',
        password='TestPass123!',
        display_name=name,
    )


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def owner(db):
    """Owner of the wishlist items."""
    return make_user('Olivia')


@pytest.fixture
def alice(db):
    return make_user('Alice')


@pytest.fixture
def bob(db):
    return make_user('Bob')


@pytest.fixture
def carol(db):
    return make_user('Carol')


@pytest.fixture
def outsider(db):
    """User who is not in the group."""
    return make_user('Oscar')


@pytest.fixture
def group(owner, alice, bob, carol):
    """Group owned by the item owner with Alice, Bob and Carol as members."""
    group = Group.objects.create(name='Friends', owner=owner)
    GroupMembership.objects.create(user=owner, group=group, role=GroupRole.OWNER)
    for member in (alice, bob, carol):
        GroupMembership.objects.create(user=member, group=group, role=GroupRole.MEMBER)
    return group


@pytest.fixture
def item(group, owner):
    """Standard item priced 100.00 shared with the group."""
    return WishlistItem.objects.create(
        owner=owner,
        group=group,
        title='Headphones',
        price=Decimal('100.00'),
    )


@pytest.fixture
def second_item(group, owner):
    return WishlistItem.objects.create(
        owner=owner,
        group=group,
        title='Book',
        price=Decimal('20.00'),
    )


@pytest.fixture
def surprise_item(group, owner):
    return WishlistItem.objects.create(
        owner=owner,
        group=group,
        title='Surprise me',
        item_type=ItemType.SURPRISE_ME,
    )


@pytest.fixture
def unpriced_item(group, owner):
    return WishlistItem.objects.create(owner=owner, group=group, title='Something nice')


@pytest.fixture
def alice_item(group, alice):
    """An item owned by Alice, so the owner can act as a claimant."""
    return WishlistItem.objects.create(
        owner=alice,
        group=group,
        title='Plant',
        price=Decimal('30.00'),
    )


@pytest.fixture
def owner_client(owner):
    return make_client(owner)


@pytest.fixture
def alice_client(alice):
    return make_client(alice)


@pytest.fixture
def bob_client(bob):
    return make_client(bob)


@pytest.fixture
def outsider_client(outsider):
    return make_client(outsider)
