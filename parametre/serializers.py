from rest_framework import serializers

from .models import ActivityLog, QualitySettings


class QualitySettingsSerializer(serializers.ModelSerializer):
    """Serializer pour les paramètres qualité d'un organisme"""

    class Meta:
        model = QualitySettings
        fields = [
            'evidence_weight', 'reference_weight', 'invitation_validity_days', 'updated_at'
        ]
        read_only_fields = ['updated_at']

    def validate_evidence_weight(self, value):
        if not 1 <= value <= 99:
            raise serializers.ValidationError("Le poids doit être compris entre 1 et 99")
        return value

    def validate_reference_weight(self, value):
        if not 1 <= value <= 99:
            raise serializers.ValidationError("Le poids doit être compris entre 1 et 99")
        return value

    def validate_invitation_validity_days(self, value):
        if value < 1:
            raise serializers.ValidationError("La validité doit être d'au moins un jour")
        return value

    def validate(self, attrs):
        evidence = attrs.get('evidence_weight', getattr(self.instance, 'evidence_weight', 50))
        reference = attrs.get('reference_weight', getattr(self.instance, 'reference_weight', 50))
        if evidence + reference != 100:
            raise serializers.ValidationError(
                {'reference_weight': "La somme des poids de complétion doit être égale à 100"}
            )
        return attrs


class ActivityLogSerializer(serializers.ModelSerializer):
    user = serializers.SerializerMethodField()
    action_display = serializers.CharField(source='get_action_display', read_only=True)
    time_ago = serializers.CharField(read_only=True)

    class Meta:
        model = ActivityLog
        fields = [
            'uuid', 'user', 'action', 'action_display', 'entity_type', 'entity_id',
            'entity_name', 'description', 'time_ago', 'created_at'
        ]

    def get_user(self, obj):
        if not obj.user:
            return None
        first_name = obj.user.first_name or ''
        last_name = obj.user.last_name or ''
        return {
            'username': obj.user.username,
            'first_name': first_name,
            'last_name': last_name,
            'initials': f"{first_name[:1]}{last_name[:1]}".upper()
        }
