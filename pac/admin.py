from django.contrib import admin
from django.utils.html import format_html

from .models import Action, ActionCategory


@admin.register(ActionCategory)
class ActionCategoryAdmin(admin.ModelAdmin):
    list_display = ('label', 'organization', 'get_color', 'created_at')
    list_filter = ('organization',)
    search_fields = ('label', 'organization__name')
    readonly_fields = ('uuid', 'created_at', 'updated_at')

    def get_color(self, obj):
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; border-radius: 3px;">{}</span>',
            obj.color, obj.color
        )
    get_color.short_description = 'Couleur'


@admin.register(Action)
class ActionAdmin(admin.ModelAdmin):
    list_display = ('title', 'organization', 'category', 'priority', 'status', 'assigned_to', 'due_date')
    list_filter = ('status', 'priority', 'organization', 'category')
    search_fields = ('title', 'description', 'category__label')
    readonly_fields = ('uuid', 'created_at', 'updated_at')
    raw_id_fields = ('category', 'assigned_to', 'created_by')

    fieldsets = (
        ('Informations générales', {
            'fields': ('uuid', 'organization', 'title', 'description')
        }),
        ('Classification', {
            'fields': ('category', 'subcategory', 'priority', 'tags')
        }),
        ('Suivi', {
            'fields': ('status', 'assigned_to', 'due_date', 'created_by')
        }),
        ('Dates', {
            'fields': ('created_at', 'updated_at')
        }),
    )
