# ==========================================
# apps/groups/admin.py
# ==========================================

from django.contrib import admin
from apps.groups.models import Group, GroupMembership, JoinRequest


class GroupMembershipInline(admin.TabularInline):
    """Inline admin for group memberships."""
    model = GroupMembership
    extra = 0
    fields = ['user', 'joined_at']
    readonly_fields = ['joined_at']


class JoinRequestInline(admin.TabularInline):
    """Inline admin for pending join requests."""
    model = JoinRequest
    extra = 0
    fields = ['user', 'requested_at']
    readonly_fields = ['requested_at']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Groups."""

    list_display = [
        'name',
        'creator',
        'member_count',
        'join_code',
        'created_at',
        'updated_at',
    ]
    list_filter = ['created_at']
    search_fields = ['name', 'creator__display_name', 'join_code']
    readonly_fields = ['join_code', 'created_at', 'updated_at']
    inlines = [GroupMembershipInline, JoinRequestInline]
    date_hierarchy = 'created_at'
    ordering = ['-updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'creator')
        }),
        ('Invitation', {
            'fields': ('join_code',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Members')
    def member_count(self, obj):
        """Show number of members."""
        return obj.memberships.count()


@admin.register(GroupMembership)
class GroupMembershipAdmin(admin.ModelAdmin):
    """Admin interface for Group Memberships."""

    list_display = ['user', 'group', 'joined_at']
    list_filter = ['joined_at']
    search_fields = ['user__display_name', 'group__name']
    readonly_fields = ['joined_at']
    date_hierarchy = 'joined_at'
    ordering = ['-joined_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'group')
