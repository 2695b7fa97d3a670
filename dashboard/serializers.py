from rest_framework import serializers

from .models import Statistic


class StatisticSerializer(serializers.ModelSerializer):
    """Serializer pour les instantanés statistiques"""
    completion_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, coerce_to_string=False)

    class Meta:
        model = Statistic
        fields = [
            'date', 'indicators_total', 'indicators_completed', 'indicators_in_progress',
            'indicators_not_started', 'completion_percentage', 'documents_total',
            'documents_procedures', 'documents_models', 'documents_evidences', 'actions_total',
            'actions_pending', 'actions_completed', 'actions_overdue', 'tasks_total',
            'tasks_completed', 'tasks_pending', 'tasks_overdue', 'generated_at'
        ]
        read_only_fields = fields
