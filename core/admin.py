"""
Django admin registration for all core models.
"""
import logging

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import AuditLog, Notification, OsceStation, Penalty, Submission, User
from .scoring import compute_total_marks

audit_logger = logging.getLogger('meduaid.audit')

# Customize Django admin site labels
admin.site.site_header = "MeduAid QB Portal Administration"
admin.site.site_title = "MeduAid QB Portal Administration"
admin.site.index_title = "MeduAid QB Portal Administration"


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'name', 'role', 'verified', 'is_active', 'is_staff')
    list_filter = ('role', 'verified', 'is_active', 'is_staff')
    search_fields = ('email', 'name')
    ordering = ('email',)

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('name', 'role', 'verified')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login',)}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )


@admin.action(description='Recompute total marks')
def recompute_total_marks(modeladmin, request, queryset):
    count = 0
    for station in queryset:
        station.total_marks = compute_total_marks(station.marking_scheme, station.follow_ups)
        station.save(update_fields=['total_marks', 'updated_at'])
        count += 1
    audit_logger.info(
        'ADMIN: recomputed total marks for %d station(s) by %s', count, request.user.email,
    )
    modeladmin.message_user(request, f'{count} station(s) recomputed.')


@admin.register(OsceStation)
class OsceStationAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'writer', 'station_type', 'status', 'total_marks', 'created_at')
    list_filter = ('status', 'station_type', 'category')
    search_fields = ('title', 'topic', 'writer__email')
    readonly_fields = ('total_marks', 'created_at', 'updated_at')
    actions = [recompute_total_marks]


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ('id', 'short_question', 'writer', 'difficulty', 'status', 'created_at')
    list_filter = ('status', 'difficulty', 'category')
    search_fields = ('question', 'topic', 'writer__email')
    readonly_fields = ('created_at', 'updated_at')

    @admin.display(description='Question')
    def short_question(self, obj):
        return obj.question[:60]


@admin.register(Penalty)
class PenaltyAdmin(admin.ModelAdmin):
    list_display = ('id', 'writer', 'penalty_type', 'amount', 'created_at')
    list_filter = ('penalty_type',)
    search_fields = ('writer__email', 'reason')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'read', 'created_at')
    list_filter = ('read',)
    search_fields = ('user__email', 'message')


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('timestamp', 'username', 'action', 'resource_type', 'resource_id', 'ip_address')
    list_filter = ('action', 'resource_type')
    search_fields = ('username', 'description', 'resource_id')
    readonly_fields = [f.name for f in AuditLog._meta.fields]

    def has_add_permission(self, request):
        return False  # Audit rows are written by the application only

    def has_change_permission(self, request, obj=None):
        return False
