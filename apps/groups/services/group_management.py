"""
Group management service.

Handles group creation and the read side that assembles groups together
with their members, pending requests and expenses.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import Prefetch

from apps.accounts.models import User
from apps.accounts.services import get_user_by_id
from apps.core.exceptions import StorageUnavailableError
from apps.core.storage import storage_guard
from apps.expenses.models import Expense
from apps.groups.models import Group, GroupMembership, JoinRequest, generate_join_code

from .exceptions import (
    GroupNotFoundError,
    InvalidGroupError,
    JoinCodeCollisionError,
    JoinCodeExhaustedError,
)

logger = logging.getLogger(__name__)


@dataclass
class GroupView:
    """A group with its related records resolved."""

    group: Group
    members: List[User] = field(default_factory=list)
    join_requests: List[User] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)

    @property
    def member_count(self) -> int:
        return len(self.members)


def _group_queryset():
    return (
        Group.objects
        .select_related('creator')
        .prefetch_related(
            Prefetch(
                'memberships',
                queryset=GroupMembership.objects.select_related('user').order_by('joined_at', 'id')
            ),
            Prefetch(
                'join_requests',
                queryset=JoinRequest.objects.select_related('user').order_by('requested_at', 'id')
            ),
        )
    )


def _build_group_view(group: Group, expenses) -> GroupView:
    return GroupView(
        group=group,
        members=[membership.user for membership in group.memberships.all()],
        join_requests=[request.user for request in group.join_requests.all()],
        expenses=list(expenses),
    )


def _create_group_with_code(*, name: str, owner: User, join_code: str) -> Group:
    """Create the group and owner membership in one transaction."""
    try:
        with transaction.atomic():
            group = Group.objects.create(
                name=name,
                creator=owner,
                join_code=join_code
            )

            GroupMembership.objects.create(user=owner, group=group)

            owner.current_group = group
            owner.save(update_fields=['current_group', 'updated_at'])

            return group

    except IntegrityError as e:
        if Group.objects.filter(join_code=join_code).exists():
            raise JoinCodeCollisionError(f"Join code {join_code} is already taken") from e
        raise StorageUnavailableError(f"Could not create group: {e}") from e


@storage_guard
def create_group(
    *,
    name: str,
    owner_id: UUID,
    max_retries: Optional[int] = None
) -> Group:
    """
    Create a new group with the owner as its only member.

    Every attempt runs in its own transaction:
    1. Generate a join code
    2. Create the group (unique index on join_code)
    3. Create owner membership and point owner's current group at it

    Args:
        name: Group name
        owner_id: UUID of the user creating the group
        max_retries: Maximum attempts to find an unused join code,
            defaults to GROUPS_JOIN_CODE_MAX_RETRIES

    Returns:
        Created Group instance

    Raises:
        InvalidGroupError: If name is blank
        UserNotFoundError: If owner doesn't exist
        JoinCodeExhaustedError: If no unique join code was found within the retry budget
    """
    name = (name or '').strip()
    if not name:
        raise InvalidGroupError("Group name is required")

    owner = get_user_by_id(user_id=owner_id)

    if max_retries is None:
        max_retries = settings.GROUPS_JOIN_CODE_MAX_RETRIES

    for attempt in range(1, max_retries + 1):
        try:
            group = _create_group_with_code(
                name=name,
                owner=owner,
                join_code=generate_join_code()
            )
        except JoinCodeCollisionError as e:
            logger.warning("%s (attempt %d of %d)", e, attempt, max_retries)
            continue

        logger.info("Group %s created by user %s", group.id, owner.id)
        return group

    raise JoinCodeExhaustedError(
        f"Failed to generate unique join code after {max_retries} attempts"
    )


@storage_guard
def get_group_by_id(*, group_id: UUID) -> Group:
    """
    Get a group by ID with its memberships and join requests prefetched.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    try:
        return _group_queryset().get(id=group_id)
    except (Group.DoesNotExist, ValidationError):
        raise GroupNotFoundError(f"Group with ID {group_id} not found")


@storage_guard
def get_group_detail(*, group_id: UUID) -> GroupView:
    """
    Get a group with members, pending requesters and all its expenses.

    Raises:
        GroupNotFoundError: If group doesn't exist
    """
    group = get_group_by_id(group_id=group_id)
    expenses = Expense.objects.for_group(group.id)
    return _build_group_view(group, expenses)


@storage_guard
def list_groups_for_user(*, user_id: UUID) -> List[GroupView]:
    """
    Get every group the user is a member of, most recently updated first.

    Raises:
        UserNotFoundError: If user doesn't exist
    """
    user = get_user_by_id(user_id=user_id)

    groups = (
        _group_queryset()
        .filter(memberships__user=user)
        .prefetch_related(
            Prefetch('expenses', queryset=Expense.objects.with_details())
        )
        .order_by('-updated_at', 'created_at')
        .distinct()
    )

    return [_build_group_view(group, group.expenses.all()) for group in groups]
