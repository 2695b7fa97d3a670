from django.contrib import admin
from django.utils.html import format_html

from .models import Task, TaskCategory


@admin.register(TaskCategory)
class TaskCategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'organization', 'type', 'get_color', 'is_system', 'created_at')
    list_filter = ('type', 'is_system', 'organization')
    search_fields = ('name', 'slug', 'organization__name')
    readonly_fields = ('uuid', 'created_at', 'updated_at')
    prepopulated_fields = {'slug': ('name',)}

    def get_color(self, obj):
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; border-radius: 3px;">{}</span>',
            obj.color, obj.icon or obj.color
        )
    get_color.short_description = 'Couleur'


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ('title', 'organization', 'category', 'get_status', 'priority', 'due_date', 'position')
    list_filter = ('status', 'priority', 'organization', 'category')
    search_fields = ('title', 'description', 'category__name')
    readonly_fields = ('uuid', 'position_order', 'created_at', 'updated_at')
    raw_id_fields = ('category', 'assigned_to', 'created_by')

    def get_status(self, obj):
        colors = {
            'todo': '#6c757d',
            'in_progress': '#ffc107',
            'done': '#28a745',
            'archived': '#343a40',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; border-radius: 3px;">{}</span>',
            colors.get(obj.status, '#6c757d'), obj.get_status_display()
        )
    get_status.short_description = 'Statut'
