from django.utils import timezone
from rest_framework import serializers

from .models import Invitation


class InvitationSerializer(serializers.ModelSerializer):
    """Le statut « expired » est calculé à la lecture ; le jeton n'est jamais exposé"""
    id = serializers.UUIDField(source='uuid', read_only=True)
    status = serializers.SerializerMethodField()
    invited_by = serializers.SerializerMethodField()

    class Meta:
        model = Invitation
        fields = [
            'id', 'email', 'name', 'indicator_access', 'permissions', 'status', 'invited_by',
            'expires_at', 'accepted_at', 'revoked_at', 'created_at'
        ]

    def get_status(self, obj):
        return obj.display_status(self.context.get('now') or timezone.now())

    def get_invited_by(self, obj):
        if not obj.invited_by:
            return None
        return obj.invited_by.get_full_name() or obj.invited_by.username


class InvitationInputSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=200)
    indicator_access = serializers.ListField(child=serializers.UUIDField(), allow_empty=True)
    permissions = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    def validate_email(self, value):
        return value.strip().lower()

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Le nom du collaborateur est requis")
        return value.strip()


class AcceptInvitationSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)
    password = serializers.CharField(write_only=True)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
