from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Prefetch
from decimal import Decimal
import uuid


class ExpenseQuerySet(models.QuerySet):

    def with_details(self):
        """Prefetch submitter and approvals for serialization."""
        return self.select_related('added_by').prefetch_related(
            Prefetch(
                'approvals',
                queryset=ExpenseApproval.objects.select_related('user').order_by('approved_at', 'id')
            )
        )

    def for_group(self, group_id):
        return self.filter(group_id=group_id).with_details()


class Expense(models.Model):
    """Expense submitted to a group, approved by a majority of its members."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.PROTECT,
        related_name='expenses'
    )
    added_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='expenses_added'
    )

    description = models.TextField(blank=True)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    # Flips once, when approvals first reach the majority threshold
    approved = models.BooleanField(default=False)
    approved_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ExpenseQuerySet.as_manager()

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['group', 'created_at'], name='expenses_group_created_idx'),
            models.Index(fields=['group', 'approved'], name='expenses_group_approved_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.description or 'Expense'} - {self.amount} ({self.group.name})"

    @property
    def approval_count(self):
        # Served from the prefetch cache when with_details() was used
        return len(self.approvals.all())


class ExpenseApproval(models.Model):
    """A single user's endorsement of an expense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expense = models.ForeignKey(Expense, on_delete=models.CASCADE, related_name='approvals')
    user = models.ForeignKey('accounts.User', on_delete=models.PROTECT, related_name='expense_approvals')
    approved_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'expense_approvals'
        unique_together = [['expense', 'user']]
        ordering = ['approved_at']

    def __str__(self):
        return f"{self.user.get_display_name()} approved {self.expense_id}"
