from django.contrib import admin
from django.utils.html import format_html

from .models import Indicator, IndicatorStatus

STATUS_COLORS = {
    IndicatorStatus.NOT_STARTED: '#6c757d',
    IndicatorStatus.IN_PROGRESS: '#ffc107',
    IndicatorStatus.COMPLETED: '#28a745',
}


@admin.register(Indicator)
class IndicatorAdmin(admin.ModelAdmin):
    list_display = ('number', 'title', 'organization', 'category', 'get_status_badge', 'completion_rate', 'is_applicable')
    list_filter = ('status', 'is_applicable', 'category', 'organization')
    search_fields = ('title', 'description', 'organization__name')
    # Champs calculés à partir des documents associés
    readonly_fields = ('uuid', 'completion_rate', 'document_counts', 'has_documents', 'last_updated', 'created_at', 'updated_at')
    ordering = ('organization', 'number')

    def get_status_badge(self, obj):
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; border-radius: 3px;">{}</span>',
            STATUS_COLORS.get(obj.status, '#6c757d'), obj.get_status_display()
        )
    get_status_badge.short_description = 'Statut'
