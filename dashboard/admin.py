from django.contrib import admin

from .models import Statistic


@admin.register(Statistic)
class StatisticAdmin(admin.ModelAdmin):
    list_display = (
        'organization', 'date', 'completion_percentage', 'indicators_completed',
        'documents_total', 'actions_overdue', 'tasks_overdue', 'generated_at'
    )
    list_filter = ('organization',)
    date_hierarchy = 'date'
    readonly_fields = ('uuid', 'generated_at')

    fieldsets = (
        ('Instantané', {
            'fields': ('uuid', 'organization', 'date', 'generated_at')
        }),
        ('Indicateurs', {
            'fields': ('indicators_total', 'indicators_completed', 'indicators_in_progress',
                       'indicators_not_started', 'completion_percentage')
        }),
        ('Documents', {
            'fields': ('documents_total', 'documents_procedures', 'documents_models', 'documents_evidences')
        }),
        ('Actions et tâches', {
            'fields': ('actions_total', 'actions_pending', 'actions_completed', 'actions_overdue',
                       'tasks_total', 'tasks_completed', 'tasks_pending', 'tasks_overdue')
        }),
    )
