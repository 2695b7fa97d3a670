from django.contrib import admin
from django.utils.html import format_html

from .models import Audit


@admin.register(Audit)
class AuditAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'organization', 'type', 'date', 'auditor_name', 'get_status', 'result', 'score')
    list_filter = ('type', 'status', 'result', 'organization')
    search_fields = ('auditor_name', 'location', 'organization__name')
    readonly_fields = ('uuid', 'completed_at', 'created_at', 'updated_at')
    date_hierarchy = 'date'

    fieldsets = (
        ('Planification', {
            'fields': ('uuid', 'organization', 'type', 'date', 'location', 'notes')
        }),
        ('Auditeur', {
            'fields': ('auditor_name', 'auditor_contact', 'auditor_phone')
        }),
        ('Résultat', {
            'fields': ('status', 'completion_date', 'result', 'score', 'report_reference',
                       'observations', 'recommendations', 'completed_at')
        }),
        ('Dates', {
            'fields': ('created_by', 'created_at', 'updated_at')
        }),
    )

    def get_status(self, obj):
        color = '#28a745' if obj.is_completed else '#17a2b8'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; border-radius: 3px;">{}</span>',
            color, obj.get_status_display()
        )
    get_status.short_description = 'Statut'
