import pytest
from apps.accounts.models import User
from apps.groups.models import Group, GroupMembership, JoinRequest, generate_join_code


@pytest.fixture
def group_owner(db):
    """Create and return the group creator."""
    return User.objects.create(device_id='device-owner', display_name='Group Owner')


@pytest.fixture
def member_user(db):
    """Create and return a user who will be a member."""
    return User.objects.create(device_id='device-member', display_name='Group Member')


@pytest.fixture
def requester(db):
    """Create and return a user who asks to join."""
    return User.objects.create(device_id='device-requester', display_name='Requester')


@pytest.fixture
def group(db, group_owner):
    """Create and return a test group with owner membership."""
    group = Group.objects.create(
        name='Ski Trip',
        creator=group_owner,
        join_code=generate_join_code(),
    )
    GroupMembership.objects.create(user=group_owner, group=group)
    group_owner.current_group = group
    group_owner.save()
    return group


@pytest.fixture
def group_with_member(group, member_user):
    """Group with owner and one more member."""
    GroupMembership.objects.create(user=member_user, group=group)
    return group


@pytest.fixture
def pending_request(group, requester):
    """Pending join request from requester."""
    return JoinRequest.objects.create(user=requester, group=group)
