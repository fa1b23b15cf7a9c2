# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin interface for device users."""

    list_display = [
        'display_name',
        'device_id',
        'current_group',
        'created_at',
        'updated_at',
    ]
    list_filter = ['created_at']
    search_fields = ['display_name', 'device_id']
    readonly_fields = ['device_id', 'created_at', 'updated_at']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('display_name', 'device_id', 'current_group')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('current_group')
