from django.contrib import admin
from django.utils.html import format_html

from .models import Document, DocumentIndicator


class DocumentIndicatorInline(admin.TabularInline):
    """Indicateurs associés au document"""
    model = DocumentIndicator
    extra = 0
    fields = ('indicator', 'created_at')
    # Les associations passent par DocumentAssociationStore (recalcul des indicateurs)
    readonly_fields = ('indicator', 'created_at')
    can_delete = False
    verbose_name = 'Indicateur associé'
    verbose_name_plural = 'Indicateurs associés'

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ('name', 'organization', 'get_type_badge', 'status', 'source', 'get_indicators_count', 'created_at')
    list_filter = ('type', 'status', 'source', 'organization')
    search_fields = ('name', 'description', 'category')
    readonly_fields = ('uuid', 'created_at', 'updated_at')
    raw_id_fields = ('created_by',)
    inlines = [DocumentIndicatorInline]

    def get_type_badge(self, obj):
        colors = {'procedure': '#007bff', 'model': '#6f42c1', 'evidence': '#28a745'}
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; border-radius: 3px;">{}</span>',
            colors.get(obj.type, '#6c757d'), obj.get_type_display()
        )
    get_type_badge.short_description = 'Type'

    def get_indicators_count(self, obj):
        return obj.indicator_links.count()
    get_indicators_count.short_description = 'Indicateurs'
