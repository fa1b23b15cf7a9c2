import pytest
from apps.accounts.models import User


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create(
        device_id='android-7f3a91c2',
        display_name='Pixel 7',
    )
