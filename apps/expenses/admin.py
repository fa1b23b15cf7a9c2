from django.contrib import admin
from .models import Expense, ExpenseApproval


class ExpenseApprovalInline(admin.TabularInline):
    """Inline admin for approvals."""
    model = ExpenseApproval
    extra = 0
    fields = ['user', 'approved_at']
    readonly_fields = ['approved_at']


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """Admin interface for Expenses."""

    list_display = [
        'description',
        'amount',
        'group',
        'added_by',
        'approval_count',
        'approved',
        'created_at',
    ]
    list_filter = ['approved', 'created_at']
    search_fields = ['description', 'group__name', 'added_by__display_name']
    readonly_fields = ['approved', 'approved_at', 'created_at', 'updated_at']
    inlines = [ExpenseApprovalInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Expense', {
            'fields': ('group', 'added_by', 'description', 'amount')
        }),
        ('Approval', {
            'fields': ('approved', 'approved_at')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'added_by').prefetch_related('approvals')
