import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User


# =============================================================================
# Device Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/users/login/"""

    def test_login_creates_user(self, api_client):
        """First login from a device creates the user."""
        url = reverse('users:login')
        data = {'device_id': 'android-abc123', 'display_name': 'OnePlus 11'}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['device_id'] == 'android-abc123'
        assert response.data['user']['display_name'] == 'OnePlus 11'
        assert response.data['user']['current_group'] is None
        assert User.objects.filter(device_id='android-abc123').exists()

    def test_login_existing_user(self, api_client, user):
        """Second login returns the same user."""
        url = reverse('users:login')
        data = {'device_id': user.device_id, 'display_name': user.display_name}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['id'] == str(user.id)
        assert User.objects.count() == 1

    def test_login_updates_display_name(self, api_client, user):
        """Changed device name is stored."""
        url = reverse('users:login')
        data = {'device_id': user.device_id, 'display_name': 'Renamed Phone'}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['display_name'] == 'Renamed Phone'

    def test_login_without_device_id(self, api_client):
        """device_id is required."""
        url = reverse('users:login')
        response = api_client.post(url, {'display_name': 'No Id'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'device_id' in response.data


@pytest.mark.django_db
class TestUserDetail:
    """Tests for GET /api/users/{id}/"""

    def test_get_user(self, api_client, user):
        url = reverse('users:user-detail', args=[user.id])
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['display_name'] == 'Pixel 7'

    def test_get_missing_user(self, api_client):
        url = reverse('users:user-detail', args=[uuid4()])
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert 'error' in response.data
