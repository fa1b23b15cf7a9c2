# ==========================================
# apps/groups/models.py
# ==========================================

from django.conf import settings
from django.db import models
import uuid
import secrets


def generate_join_code(length=None):
    """Random upper-case hex join code, e.g. ``'3FA94C0B'``."""
    length = length or settings.GROUPS_JOIN_CODE_LENGTH
    return secrets.token_hex((length + 1) // 2)[:length].upper()


class Group(models.Model):
    """Group of users sharing expenses."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    creator = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='created_groups')
    join_code = models.CharField(max_length=16, unique=True, db_index=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'groups'
        indexes = [
            models.Index(fields=['creator', 'created_at'], name='groups_creator_created_idx'),
            models.Index(fields=['updated_at'], name='groups_updated_idx'),
        ]
        ordering = ['-updated_at', 'created_at']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.join_code:
            self.join_code = generate_join_code()
        super().save(*args, **kwargs)

    def touch(self):
        """Bump ``updated_at`` so the group sorts as recently active."""
        self.save(update_fields=['updated_at'])

    def has_member(self, user):
        return self.memberships.filter(user=user).exists()


class GroupMembership(models.Model):
    """User membership in a group."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='group_memberships')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='memberships')
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_memberships'
        unique_together = [['user', 'group']]
        indexes = [
            models.Index(fields=['group', 'joined_at'], name='memberships_group_joined_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.group.name}"


class JoinRequest(models.Model):
    """Pending request by a user to be admitted to a group."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='join_requests')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='join_requests')
    requested_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'group_join_requests'
        unique_together = [['user', 'group']]
        indexes = [
            models.Index(fields=['group', 'requested_at'], name='join_requests_group_idx'),
        ]
        ordering = ['requested_at']

    def __str__(self):
        return f"{self.user.get_display_name()} wants to join {self.group.name}"


class JoinRequestStatus(models.TextChoices):
    REQUESTED = 'requested', 'Requested'
    ALREADY_REQUESTED = 'already_requested', 'Already requested'
    ALREADY_MEMBER = 'already_member', 'Already a member'
