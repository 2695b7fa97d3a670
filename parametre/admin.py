from django.contrib import admin
from django.utils.html import format_html

from .models import Organization, OrganizationMembership, QualitySettings, ActivityLog


class OrganizationMembershipInline(admin.TabularInline):
    model = OrganizationMembership
    extra = 0
    fields = ('user', 'role', 'is_active', 'created_at')
    readonly_fields = ('created_at',)


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'get_status_badge', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('name', 'slug')
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ('uuid', 'created_at', 'updated_at')
    inlines = [OrganizationMembershipInline]

    def get_status_badge(self, obj):
        color = '#28a745' if obj.is_active else '#6c757d'
        label = 'Actif' if obj.is_active else 'Inactif'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; border-radius: 3px;">{}</span>',
            color, label
        )
    get_status_badge.short_description = 'Statut'


@admin.register(OrganizationMembership)
class OrganizationMembershipAdmin(admin.ModelAdmin):
    list_display = ('user', 'organization', 'role', 'is_active', 'created_at')
    list_filter = ('role', 'is_active', 'organization')
    search_fields = ('user__username', 'user__email', 'organization__name')


@admin.register(QualitySettings)
class QualitySettingsAdmin(admin.ModelAdmin):
    list_display = ('organization', 'evidence_weight', 'reference_weight', 'invitation_validity_days', 'updated_at')
    search_fields = ('organization__name',)
    readonly_fields = ('uuid', 'created_at', 'updated_at')


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ('organization', 'user', 'action', 'entity_type', 'entity_name', 'created_at')
    list_filter = ('action', 'entity_type', 'created_at')
    search_fields = (
        'user__username',
        'entity_name',
        'entity_id',
        'description',
    )
    readonly_fields = (
        'uuid', 'organization', 'user', 'action', 'entity_type', 'entity_id',
        'entity_name', 'description', 'ip_address', 'user_agent', 'created_at'
    )
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False
