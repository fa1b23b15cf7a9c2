"""
Membership management service.

Handles join requests and their approval. Both read-modify-write the
group's member and request sets, so each runs under the group's entity
lock with the group row locked for update.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.accounts.services import get_user_by_id
from apps.core.locks import entity_lock
from apps.core.storage import storage_guard
from apps.groups.models import Group, GroupMembership, JoinRequest, JoinRequestStatus
from .join_policies import JoinApprovalPolicy, get_join_approval_policy
from apps.notifications import events
from apps.notifications.channel import NotificationChannel
from apps.notifications.services import publish_on_commit

from .group_management import get_group_by_id
from .invite_management import get_group_by_join_code

logger = logging.getLogger(__name__)


@dataclass
class JoinRequestResult:
    """Outcome of a join request."""

    group: Group
    user: User
    status: str

    @property
    def created(self) -> bool:
        return self.status == JoinRequestStatus.REQUESTED


def member_payload(group: Group, user: User) -> dict:
    return {
        'group_id': str(group.id),
        'user': {
            'id': str(user.id),
            'display_name': user.get_display_name(),
        },
    }


@storage_guard
def request_join(
    *,
    join_code: str,
    user_id: UUID,
    channel: Optional[NotificationChannel] = None
) -> JoinRequestResult:
    """
    Ask to be admitted to the group a join code belongs to.

    Idempotent: a user who is already a member or already waiting gets the
    current state back, and nothing is published.

    Args:
        join_code: Group's join code (any case)
        user_id: UUID of the requesting user
        channel: Notification channel, defaults to the configured one

    Returns:
        JoinRequestResult describing what happened

    Raises:
        InvalidJoinCodeError: If no group has the join code
        UserNotFoundError: If user doesn't exist
    """
    group = get_group_by_join_code(join_code=join_code)
    user = get_user_by_id(user_id=user_id)

    with entity_lock('group', group.id):
        with transaction.atomic():
            group = Group.objects.select_for_update().get(id=group.id)

            if group.has_member(user):
                status = JoinRequestStatus.ALREADY_MEMBER
            else:
                _, created = JoinRequest.objects.get_or_create(group=group, user=user)
                if created:
                    status = JoinRequestStatus.REQUESTED
                    group.touch()
                else:
                    status = JoinRequestStatus.ALREADY_REQUESTED

    if status != JoinRequestStatus.REQUESTED:
        logger.debug("Join request by user %s for group %s is a no-op (%s)", user.id, group.id, status)
        return JoinRequestResult(group=group, user=user, status=status)

    logger.info("User %s requested to join group %s", user.id, group.id)
    publish_on_commit(
        room=events.room_for_group(group.id),
        event=events.JOIN_REQUEST,
        payload=member_payload(group, user),
        channel=channel,
    )
    return JoinRequestResult(group=group, user=user, status=status)


@storage_guard
def approve_join(
    *,
    group_id: UUID,
    user_id: UUID,
    approved_by: Optional[User] = None,
    policy: Optional[JoinApprovalPolicy] = None,
    channel: Optional[NotificationChannel] = None
) -> Group:
    """
    Admit a user to a group.

    The user ends up a member with no pending request, whether they were
    pending, already a member, or neither. Who may call this is decided by
    the join approval policy, not here.

    Args:
        group_id: UUID of the group
        user_id: UUID of the user being admitted
        approved_by: User approving the request, if known
        policy: Join approval policy, defaults to GROUPS_JOIN_APPROVAL_POLICY
        channel: Notification channel, defaults to the configured one

    Returns:
        Updated Group instance

    Raises:
        GroupNotFoundError: If group doesn't exist
        UserNotFoundError: If user doesn't exist
        InsufficientPermissionsError: If the policy refuses approved_by
    """
    group = get_group_by_id(group_id=group_id)
    user = get_user_by_id(user_id=user_id)

    policy = policy or get_join_approval_policy()
    policy.check(group=group, approved_by=approved_by)

    with entity_lock('group', group.id):
        with transaction.atomic():
            locked = Group.objects.select_for_update().get(id=group.id)

            _, joined = GroupMembership.objects.get_or_create(group=locked, user=user)
            JoinRequest.objects.filter(group=locked, user=user).delete()

            user.current_group = locked
            user.save(update_fields=['current_group', 'updated_at'])
            locked.touch()

    if joined:
        logger.info("User %s admitted to group %s", user.id, group.id)
    else:
        logger.debug("User %s was already a member of group %s", user.id, group.id)

    publish_on_commit(
        room=events.room_for_group(group.id),
        event=events.MEMBER_APPROVED,
        payload=member_payload(group, user),
        channel=channel,
    )
    return get_group_by_id(group_id=group.id)
