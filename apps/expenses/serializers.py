from rest_framework import serializers
from .models import Expense
from apps.accounts.serializers import UserMinimalSerializer


class ExpenseSerializer(serializers.ModelSerializer):
    """Expense with submitter and approving user ids."""

    group = serializers.UUIDField(source='group_id', read_only=True)
    added_by = UserMinimalSerializer(read_only=True)
    approvals = serializers.SerializerMethodField()
    approval_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id',
            'group',
            'added_by',
            'description',
            'amount',
            'approvals',
            'approval_count',
            'approved',
            'approved_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_approvals(self, obj):
        """Ids of approving users, in approval order."""
        return [str(approval.user_id) for approval in obj.approvals.all()]


class SubmitExpenseSerializer(serializers.Serializer):
    """Serializer for submitting an expense."""

    group_id = serializers.UUIDField(required=True)
    added_by = serializers.UUIDField(required=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=True)


class ApproveExpenseSerializer(serializers.Serializer):
    """Serializer for casting an approval."""

    expense_id = serializers.UUIDField(required=True)
    user_id = serializers.UUIDField(required=True)
