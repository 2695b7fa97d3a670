"""
Serializers pour les documents qualité
"""
from rest_framework import serializers

from shared.storage import get_file_store
from .models import Document, DocumentStatus, DocumentType


class DocumentSerializer(serializers.ModelSerializer):
    """Serializer de lecture des documents"""
    id = serializers.UUIDField(source='uuid', read_only=True)
    type_display = serializers.CharField(source='get_type_display', read_only=True)
    url = serializers.SerializerMethodField()
    indicators = serializers.SerializerMethodField()
    created_by = serializers.SerializerMethodField()

    class Meta:
        model = Document
        fields = [
            'id', 'name', 'type', 'type_display', 'source', 'url', 'file_type', 'size_bytes',
            'description', 'category', 'status', 'indicators', 'created_by', 'created_at', 'updated_at'
        ]

    def get_url(self, obj):
        file_store = self.context.get('file_store') or get_file_store()
        return file_store.url(obj.file_reference)

    def get_indicators(self, obj):
        return [
            {'id': str(indicator.uuid), 'number': indicator.number, 'title': indicator.title}
            for indicator in obj.indicators.all()
        ]

    def get_created_by(self, obj):
        if not obj.created_by:
            return None
        return obj.created_by.get_full_name() or obj.created_by.username


class DocumentInputSerializer(serializers.Serializer):
    """Métadonnées d'un document (création par lien, téléversement ou modification)"""
    name = serializers.CharField(max_length=255)
    type = serializers.ChoiceField(choices=DocumentType.choices)
    file_url = serializers.URLField(max_length=500)
    file_type = serializers.CharField(max_length=20, allow_blank=True, required=False)
    size_bytes = serializers.IntegerField(min_value=0, allow_null=True, required=False)
    description = serializers.CharField(allow_blank=True, required=False)
    category = serializers.CharField(max_length=150, allow_blank=True, required=False)
    status = serializers.ChoiceField(choices=DocumentStatus.choices, required=False)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Le nom du document est requis")
        return value.strip()


class DocumentUploadSerializer(DocumentInputSerializer):
    """Le fichier remplace le lien : file_url n'est pas attendu et le nom est optionnel"""
    file_url = None
    name = serializers.CharField(max_length=255, required=False)


class IndicatorIdsSerializer(serializers.Serializer):
    indicator_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True)
