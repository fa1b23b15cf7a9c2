from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from apps.expenses.serializers import ExpenseSerializer
from apps.expenses.services import approval_threshold


class GroupSerializer(serializers.Serializer):
    """
    Serializer for ``GroupView``: a group with members, pending join
    requests and expenses already resolved.
    """

    id = serializers.UUIDField(source='group.id', read_only=True)
    name = serializers.CharField(source='group.name', read_only=True)
    join_code = serializers.CharField(source='group.join_code', read_only=True)
    creator = UserMinimalSerializer(source='group.creator', read_only=True)
    members = UserMinimalSerializer(many=True, read_only=True)
    join_requests = UserMinimalSerializer(many=True, read_only=True)
    member_count = serializers.IntegerField(read_only=True)
    approval_threshold = serializers.SerializerMethodField()
    expenses = ExpenseSerializer(many=True, read_only=True)
    created_at = serializers.DateTimeField(source='group.created_at', read_only=True)
    updated_at = serializers.DateTimeField(source='group.updated_at', read_only=True)

    def get_approval_threshold(self, obj) -> int:
        """Approvals an expense currently needs in this group."""
        return approval_threshold(obj.member_count)


class GroupCreateSerializer(serializers.Serializer):
    """Serializer for creating groups."""

    name = serializers.CharField(max_length=200, required=True)
    user_id = serializers.UUIDField(required=True)


class GroupListQuerySerializer(serializers.Serializer):
    """Query parameters for listing a user's groups."""

    user_id = serializers.UUIDField(required=True)


class JoinGroupSerializer(serializers.Serializer):
    """Serializer for requesting to join a group with a join code."""

    join_code = serializers.CharField(max_length=16, required=True)
    user_id = serializers.UUIDField(required=True)


class ApproveJoinSerializer(serializers.Serializer):
    """Serializer for approving a pending join request."""

    group_id = serializers.UUIDField(required=True)
    user_id = serializers.UUIDField(required=True)
    approved_by = serializers.UUIDField(required=False, allow_null=True, default=None)
