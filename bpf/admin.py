from django.contrib import admin
from django.utils.html import format_html

from .models import Bpf


@admin.register(Bpf)
class BpfAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'organization', 'year', 'get_status', 'submitted_date', 'submitted_to')
    list_filter = ('status', 'year', 'organization')
    search_fields = ('organization__name', 'submitted_to')
    readonly_fields = ('uuid', 'submitted_date', 'export_reference', 'created_at', 'updated_at')

    def get_status(self, obj):
        color = '#6c757d' if obj.is_draft else '#28a745'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; border-radius: 3px;">{}</span>',
            color, obj.get_status_display()
        )
    get_status.short_description = 'Statut'
