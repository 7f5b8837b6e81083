"""
API integration tests for claim and split endpoints.
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from apps.wishlists.models import GiftClaim, WishlistItem
from apps.wishlists.services import claim, open_split, pledge


def items_query(*items):
    return {'items': ','.join(str(i.id) for i in items)}


@pytest.mark.django_db
class TestClaimEndpoints:
    """Test claim and release."""

    def test_requires_authentication(self, api_client, item):
        response = api_client.post(reverse('wishlists:item-claim', args=[item.id]))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_claim(self, alice_client, item):
        response = alice_client.post(reverse('wishlists:item-claim', args=[item.id]))

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'full_claimed'
        assert response.data['claimed_by']['display_name'] == 'Alice'

    def test_claim_taken_item_conflicts(self, alice, bob_client, item):
        claim(item_id=item.id, actor_id=alice.id)

        response = bob_client.post(reverse('wishlists:item-claim', args=[item.id]))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert 'error' in response.data

    def test_claim_own_item_forbidden(self, owner_client, item):
        response = owner_client.post(reverse('wishlists:item-claim', args=[item.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_release(self, alice, alice_client, item):
        gift_claim = claim(item_id=item.id, actor_id=alice.id)

        response = alice_client.delete(reverse('wishlists:claim-detail', args=[gift_claim.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not GiftClaim.objects.exists()

    def test_release_by_other_forbidden(self, alice, bob_client, item):
        gift_claim = claim(item_id=item.id, actor_id=alice.id)

        response = bob_client.delete(reverse('wishlists:claim-detail', args=[gift_claim.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestSplitEndpoints:
    """Test split open, pledge, close and status."""

    def test_open_split(self, alice_client, item):
        response = alice_client.post(
            reverse('wishlists:item-open-split', args=[item.id]),
            {'additional_costs': '10.00'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['target'] == '110.00'
        assert response.data['total_pledged'] == '0.00'
        assert response.data['is_open'] is True

    def test_pledge(self, alice, bob_client, item):
        open_split(item_id=item.id, actor_id=alice.id)

        response = bob_client.post(
            reverse('wishlists:item-pledge', args=[item.id]),
            {'amount': '30.00'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_pledged'] == '30.00'
        assert response.data['remaining'] == '70.00'

    def test_pledge_over_remaining_reports_remaining(self, alice, bob_client, item):
        open_split(item_id=item.id, actor_id=alice.id)
        pledge(item_id=item.id, actor_id=alice.id, amount='60.00')

        response = bob_client.post(
            reverse('wishlists:item-pledge', args=[item.id]),
            {'amount': '40.01'},
            format='json',
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['remaining'] == '40.00'

    def test_pledge_invalid_amount(self, alice, bob_client, item):
        open_split(item_id=item.id, actor_id=alice.id)

        response = bob_client.post(
            reverse('wishlists:item-pledge', args=[item.id]),
            {'amount': '-1.00'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_close_split(self, alice, bob_client, item):
        open_split(item_id=item.id, actor_id=alice.id)

        response = bob_client.post(reverse('wishlists:item-close-split', args=[item.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_fully_funded'] is True

        again = bob_client.post(reverse('wishlists:item-close-split', args=[item.id]))
        assert again.status_code == status.HTTP_409_CONFLICT

    def test_split_status_for_member(self, alice, bob, alice_client, item):
        open_split(item_id=item.id, actor_id=alice.id)
        pledge(item_id=item.id, actor_id=bob.id, amount='40.00')

        response = alice_client.get(reverse('wishlists:item-split-status', args=[item.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['split']['remaining'] == '60.00'
        assert response.data['contributors'][0]['display_name'] == 'Bob'
        assert response.data['suggested_share'] == '50.00'

    def test_split_status_for_owner_hides_contributors(self, alice, bob, owner_client, item):
        open_split(item_id=item.id, actor_id=alice.id)
        pledge(item_id=item.id, actor_id=bob.id, amount='40.00')

        response = owner_client.get(reverse('wishlists:item-split-status', args=[item.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'item_id': str(item.id), 'is_claimed': True}

    def test_split_status_without_split(self, alice_client, item):
        response = alice_client.get(reverse('wishlists:item-split-status', args=[item.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestClaimListings:
    """Test the list endpoints that take ?items=."""

    def test_claim_summary_skips_own_items(self, alice, bob, alice_client, item, alice_item):
        claim(item_id=item.id, actor_id=alice.id)
        claim(item_id=alice_item.id, actor_id=bob.id)

        response = alice_client.get(
            reverse('wishlists:item-claim-summary'),
            items_query(item, alice_item),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_items'] == 1
        assert response.data['claimed'] == 1

    def test_claims_listing(self, alice, bob_client, item, second_item):
        claim(item_id=item.id, actor_id=alice.id)

        response = bob_client.get(reverse('wishlists:item-claims'), items_query(item, second_item))

        assert response.status_code == status.HTTP_200_OK
        assert [c['item'] for c in response.data] == [item.id]

    def test_my_status(self, alice, owner_client, item, second_item):
        claim(item_id=item.id, actor_id=alice.id)

        response = owner_client.get(reverse('wishlists:item-my-status'), items_query(item, second_item))

        assert response.status_code == status.HTTP_200_OK
        assert {row['item_id']: row['is_claimed'] for row in response.data} == {
            str(item.id): True,
            str(second_item.id): False,
        }

    @pytest.mark.parametrize('query', [{}, {'items': ''}, {'items': 'not-a-uuid'}])
    def test_items_parameter_required(self, alice_client, query):
        response = alice_client.get(reverse('wishlists:item-claim-summary'), query)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestOutsiderReads:
    """Users outside an item's group see nothing about its claims."""

    def test_split_status_not_found(self, alice, bob, outsider_client, item):
        open_split(item_id=item.id, actor_id=alice.id)
        pledge(item_id=item.id, actor_id=bob.id, amount='40.00')

        response = outsider_client.get(reverse('wishlists:item-split-status', args=[item.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert 'contributors' not in response.data

    def test_claims_listing_is_empty(self, alice, outsider_client, item):
        claim(item_id=item.id, actor_id=alice.id)

        response = outsider_client.get(reverse('wishlists:item-claims'), items_query(item))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_claim_summary_counts_nothing(self, alice, outsider_client, item, second_item):
        claim(item_id=item.id, actor_id=alice.id)

        response = outsider_client.get(
            reverse('wishlists:item-claim-summary'),
            items_query(item, second_item),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_items'] == 0
        assert response.data['claimed'] == 0

    def test_personal_item_claims_are_visible(self, owner, alice, outsider_client):
        personal = WishlistItem.objects.create(owner=owner, title='Mug', price=Decimal('12.00'))
        claim(item_id=personal.id, actor_id=alice.id)

        response = outsider_client.get(reverse('wishlists:item-claims'), items_query(personal))

        assert [c['item'] for c in response.data] == [personal.id]
