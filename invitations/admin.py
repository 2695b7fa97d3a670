from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import Invitation


@admin.register(Invitation)
class InvitationAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'organization', 'get_status', 'expires_at', 'invited_by', 'created_at')
    list_filter = ('status', 'organization')
    search_fields = ('email', 'name', 'organization__name')
    readonly_fields = ('uuid', 'token', 'accepted_at', 'accepted_user', 'revoked_at', 'created_at', 'updated_at')

    def get_status(self, obj):
        status = obj.display_status(timezone.now())
        colors = {
            'pending': '#17a2b8',
            'accepted': '#28a745',
            'revoked': '#dc3545',
            'expired': '#6c757d',
        }
        label = 'Expirée' if status == 'expired' else obj.get_status_display()
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; border-radius: 3px;">{}</span>',
            colors.get(status, '#6c757d'), label
        )
    get_status.short_description = 'Statut'
