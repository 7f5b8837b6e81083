"""
API integration tests for the celebrations endpoints.

Tests:
- Celebrant exclusion on list and detail routes
- Creation, leader history and reassignment
- Contributions
- Group budget
"""

import pytest
from datetime import date
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.celebrations.models import CelebrationContribution
from apps.celebrations.services import add_or_update_contribution
from apps.groups.models import BudgetApproach, Group


@pytest.mark.django_db
class TestCelebrationEndpoints:
    """Test celebration list, create and detail."""

    def test_requires_authentication(self, api_client, ann_celebration):
        response = api_client.get(reverse('celebrations:celebration-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_hides_own_celebration(self, ann_client, ann_celebration, dan_celebration):
        response = ann_client.get(reverse('celebrations:celebration-list'))

        assert response.status_code == status.HTTP_200_OK
        ids = [row['id'] for row in response.data['results']]
        assert ids == [str(dan_celebration.id)]

    def test_list_shows_leader_and_total(self, ben_client, ben, dan_celebration):
        add_or_update_contribution(celebration_id=dan_celebration.id, actor_id=ben.id, amount='20.00')

        response = ben_client.get(reverse('celebrations:celebration-list'))

        row = response.data['results'][0]
        assert row['gift_leader']['display_name'] == 'Ann'
        assert row['total_contributed'] == '20.00'
        assert row['target_amount'] == '100.00'
        assert row['group_name'] == 'Family'

    def test_create(self, ann_client, group, cat):
        response = ann_client.post(
            reverse('celebrations:celebration-list'),
            {
                'group_id': str(group.id),
                'celebrant_id': str(cat.id),
                'event_date': '2026-03-20',
                'target_amount': '75.00',
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'upcoming'
        assert response.data['year'] == 2026
        assert response.data['gift_leader'] is not None
        assert response.data['gift_leader']['id'] != str(cat.id)
        assert response.data['total_contributed'] == '0.00'

    def test_create_forbidden_for_member(self, ben_client, group, cat):
        response = ben_client.post(
            reverse('celebrations:celebration-list'),
            {'group_id': str(group.id), 'celebrant_id': str(cat.id), 'event_date': '2026-03-20'},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'error' in response.data

    def test_create_invalid_payload(self, ann_client, group):
        response = ann_client.post(
            reverse('celebrations:celebration-list'),
            {'group_id': str(group.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve(self, ben_client, dan_celebration):
        response = ben_client.get(reverse('celebrations:celebration-detail', args=[dan_celebration.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(dan_celebration.id)

    def test_retrieve_formats_total_as_money(self, ben_client, ben, cat, dan_celebration):
        add_or_update_contribution(celebration_id=dan_celebration.id, actor_id=ben.id, amount='20.00')
        add_or_update_contribution(celebration_id=dan_celebration.id, actor_id=cat.id, amount='5.50')

        response = ben_client.get(reverse('celebrations:celebration-detail', args=[dan_celebration.id]))

        assert response.data['total_contributed'] == '25.50'

    def test_retrieve_without_contributions_shows_zero(self, ben_client, dan_celebration):
        response = ben_client.get(reverse('celebrations:celebration-detail', args=[dan_celebration.id]))

        assert response.data['total_contributed'] == '0.00'

    def test_retrieve_as_celebrant_is_not_found(self, dan_client, dan_celebration):
        response = dan_client.get(reverse('celebrations:celebration-detail', args=[dan_celebration.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_retrieve_as_outsider_is_not_found(self, outsider_client, dan_celebration):
        response = outsider_client.get(reverse('celebrations:celebration-detail', args=[dan_celebration.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_complete(self, ann_client, dan_celebration):
        response = ann_client.post(reverse('celebrations:celebration-complete', args=[dan_celebration.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'completed'

        again = ann_client.post(reverse('celebrations:celebration-complete', args=[dan_celebration.id]))
        assert again.status_code == status.HTTP_409_CONFLICT


@pytest.mark.django_db
class TestLeadershipEndpoints:
    """Test leader history and reassignment."""

    def test_history(self, ben_client, ann_celebration):
        response = ben_client.get(reverse('celebrations:celebration-history', args=[ann_celebration.id]))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['reason'] == 'auto_rotation'
        assert response.data[0]['assigned_to']['display_name'] == 'Ben'
        assert response.data[0]['assigned_by'] is None

    def test_history_hidden_from_celebrant(self, ann_client, ann_celebration):
        response = ann_client.get(reverse('celebrations:celebration-history', args=[ann_celebration.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_reassign_by_admin(self, ann_client, dan_celebration, cat):
        response = ann_client.post(
            reverse('celebrations:celebration-reassign-leader', args=[dan_celebration.id]),
            {'new_leader_id': str(cat.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['leader_id'] == str(cat.id)
        assert response.data['reason'] == 'manual_reassign'

    def test_reassign_forbidden_for_member(self, ben_client, dan_celebration, cat):
        response = ben_client.post(
            reverse('celebrations:celebration-reassign-leader', args=[dan_celebration.id]),
            {'new_leader_id': str(cat.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_reassign_to_celebrant_rejected(self, ann_client, dan_celebration, dan):
        response = ann_client.post(
            reverse('celebrations:celebration-reassign-leader', args=[dan_celebration.id]),
            {'new_leader_id': str(dan.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestContributionEndpoints:
    """Test contribute and contributions."""

    def test_contribute(self, ben_client, dan_celebration):
        url = reverse('celebrations:celebration-contribute', args=[dan_celebration.id])

        response = ben_client.post(url, {'amount': '40.00'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == '40.00'
        assert response.data['contributor_count'] == 1
        assert response.data['is_complete'] is False

    def test_contribute_again_replaces(self, ben_client, ben, dan_celebration):
        url = reverse('celebrations:celebration-contribute', args=[dan_celebration.id])

        ben_client.post(url, {'amount': '40.00'}, format='json')
        response = ben_client.post(url, {'amount': '15.00'}, format='json')

        assert response.data['total'] == '15.00'
        assert CelebrationContribution.objects.filter(celebration=dan_celebration, user=ben).count() == 1

    @pytest.mark.parametrize('amount', ['0', '-5.00', 'abc'])
    def test_contribute_invalid_amount(self, ben_client, dan_celebration, amount):
        url = reverse('celebrations:celebration-contribute', args=[dan_celebration.id])

        response = ben_client.post(url, {'amount': amount}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_celebrant_cannot_contribute(self, dan_client, dan_celebration):
        url = reverse('celebrations:celebration-contribute', args=[dan_celebration.id])

        response = dan_client.post(url, {'amount': '10.00'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_withdraw(self, ben_client, ben, dan_celebration):
        add_or_update_contribution(celebration_id=dan_celebration.id, actor_id=ben.id, amount='25.00')
        url = reverse('celebrations:celebration-contribute', args=[dan_celebration.id])

        response = ben_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == '0.00'

        again = ben_client.delete(url)
        assert again.status_code == status.HTTP_404_NOT_FOUND

    def test_contributions_listing(self, ann_client, ann, ben, dan_celebration):
        add_or_update_contribution(celebration_id=dan_celebration.id, actor_id=ben.id, amount='10.00')
        add_or_update_contribution(celebration_id=dan_celebration.id, actor_id=ann.id, amount='30.00')

        response = ann_client.get(reverse('celebrations:celebration-contributions', args=[dan_celebration.id]))

        assert response.status_code == status.HTTP_200_OK
        assert [c['user']['display_name'] for c in response.data['contributions']] == ['Ann', 'Ben']
        assert response.data['totals']['total'] == '40.00'
        assert Decimal(response.data['totals']['progress']) == Decimal('0.4')


@pytest.mark.django_db
class TestGroupBudgetEndpoint:
    """Test the group budget endpoint."""

    def test_no_budget_is_no_content(self, ben_client, group):
        response = ben_client.get(reverse('celebrations:group-budget', args=[group.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_per_gift_budget(self, ben_client, group):
        Group.objects.filter(id=group.id).update(budget_approach=BudgetApproach.PER_GIFT, budget_amount=3000)

        response = ben_client.get(reverse('celebrations:group-budget', args=[group.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['approach'] == 'per_gift'
        assert response.data['budget_amount'] == '30.00'
        assert response.data['threshold_level'] == 'normal'
        assert response.data['currency'] == 'USD'

    def test_outsider_is_not_found(self, outsider_client, group):
        response = outsider_client.get(reverse('celebrations:group-budget', args=[group.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
