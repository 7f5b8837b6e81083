import pytest
from datetime import date
from apps.accounts.models import User


@pytest.fixture
def user(db):
    """Create and return a user with a birthday."""
    return User.objects.create_user(
        email='test@example.com',
        password='TestPass123!',
        display_name='Test User',
        birthday=date(1992, 2, 29),
    )
