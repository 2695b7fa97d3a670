"""
Serializers pour les indicateurs Qualiopi
"""
from rest_framework import serializers

from .models import Indicator, IndicatorStatus


class IndicatorSerializer(serializers.ModelSerializer):
    """Serializer de lecture des indicateurs"""
    id = serializers.UUIDField(source='uuid', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Indicator
        fields = [
            'id', 'number', 'title', 'description', 'category', 'status', 'status_display',
            'completion_rate', 'document_counts', 'has_documents', 'requirements', 'notes',
            'is_applicable', 'last_updated', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class IndicatorUpdateSerializer(serializers.Serializer):
    """Champs modifiables manuellement sur un indicateur"""
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True)
    status = serializers.ChoiceField(choices=IndicatorStatus.choices)
    notes = serializers.CharField(allow_blank=True)
    requirements = serializers.ListField(child=serializers.CharField(max_length=500), allow_empty=True)
    is_applicable = serializers.BooleanField()

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Le titre de l'indicateur est requis")
        return value.strip()
