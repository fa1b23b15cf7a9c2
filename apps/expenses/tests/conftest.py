import pytest
from apps.expenses.models import Expense
from apps.groups.models import Group, GroupMembership


def add_member(group, user):
    GroupMembership.objects.create(group=group, user=user)
    return user


@pytest.fixture
def owner(make_user):
    return make_user(display_name='Alice')


@pytest.fixture
def solo_group(db, owner):
    """Group whose creator is its only member."""
    group = Group.objects.create(name='Solo', creator=owner)
    add_member(group, owner)
    return group


@pytest.fixture
def trio(make_user, solo_group, owner):
    """Owner plus two members, in join order."""
    bob = add_member(solo_group, make_user(display_name='Bob'))
    carol = add_member(solo_group, make_user(display_name='Carol'))
    return [owner, bob, carol]


@pytest.fixture
def expense(solo_group, owner):
    """Unapproved expense submitted by the owner."""
    return Expense.objects.create(
        group=solo_group,
        added_by=owner,
        description='Groceries',
        amount='42.50',
    )
