from django.utils import timezone
from rest_framework import serializers

from .models import Audit, AuditResult, AuditType

COMPLETION_FIELDS = ('result', 'score', 'completion_date', 'report_reference',
                     'observations', 'recommendations', 'completed_at')


class AuditSerializer(serializers.ModelSerializer):
    """
    Serializer de lecture. Le résultat de l'audit n'est exposé qu'une fois l'audit clôturé.
    """
    id = serializers.UUIDField(source='uuid', read_only=True)
    days_remaining = serializers.SerializerMethodField()

    class Meta:
        model = Audit
        fields = [
            'id', 'type', 'date', 'days_remaining', 'auditor_name', 'auditor_contact',
            'auditor_phone', 'location', 'notes', 'status', 'completion_date', 'result',
            'score', 'report_reference', 'observations', 'recommendations', 'completed_at',
            'created_at', 'updated_at'
        ]

    def get_days_remaining(self, obj):
        today = self.context.get('today') or timezone.localdate()
        return obj.days_remaining(today)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not instance.is_completed:
            for field in COMPLETION_FIELDS:
                data.pop(field, None)
        return data


class AuditInputSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=AuditType.choices)
    date = serializers.DateField()
    auditor_name = serializers.CharField(max_length=200)
    auditor_contact = serializers.CharField(max_length=200, allow_blank=True, required=False)
    auditor_phone = serializers.CharField(max_length=30, allow_blank=True, required=False)
    location = serializers.CharField(max_length=255, allow_blank=True, required=False)
    notes = serializers.CharField(allow_blank=True, required=False)

    def validate_auditor_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Le nom de l'auditeur est requis")
        return value.strip()


class AuditCompletionSerializer(serializers.Serializer):
    completion_date = serializers.DateField()
    result = serializers.ChoiceField(choices=AuditResult.choices)
    score = serializers.IntegerField(min_value=0, max_value=100, allow_null=True, required=False)
    report_reference = serializers.CharField(max_length=255, allow_blank=True, required=False)
    notes = serializers.CharField(allow_blank=True, required=False)
    observations = serializers.ListField(child=serializers.CharField(), required=False)
    recommendations = serializers.ListField(child=serializers.CharField(), required=False)
