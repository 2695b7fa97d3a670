from django.utils import timezone
from rest_framework import serializers

from .models import Action, ActionCategory, ActionPriority, ActionStatus

HEX_COLOR = r'^#[0-9A-Fa-f]{6}$'


class ActionCategorySerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(source='uuid', read_only=True)
    action_count = serializers.SerializerMethodField()

    class Meta:
        model = ActionCategory
        fields = ['id', 'label', 'color', 'action_count', 'created_at']

    def get_action_count(self, obj):
        count = getattr(obj, 'action_count', None)
        return count if count is not None else obj.actions.count()


class ActionCategoryInputSerializer(serializers.Serializer):
    label = serializers.CharField(max_length=150)
    color = serializers.RegexField(HEX_COLOR, required=False)

    def validate_label(self, value):
        if not value.strip():
            raise serializers.ValidationError("Le libellé est requis")
        return value.strip()


class ActionSerializer(serializers.ModelSerializer):
    """Serializer de lecture des actions"""
    id = serializers.UUIDField(source='uuid', read_only=True)
    category = serializers.SerializerMethodField()
    assigned_to = serializers.SerializerMethodField()
    is_overdue = serializers.SerializerMethodField()

    class Meta:
        model = Action
        fields = [
            'id', 'category', 'subcategory', 'priority', 'title', 'description', 'status',
            'assigned_to', 'due_date', 'is_overdue', 'tags', 'created_at', 'updated_at'
        ]

    def get_category(self, obj):
        return {'id': str(obj.category.uuid), 'label': obj.category.label, 'color': obj.category.color}

    def get_assigned_to(self, obj):
        if not obj.assigned_to:
            return None
        return {
            'id': obj.assigned_to.id,
            'name': obj.assigned_to.get_full_name() or obj.assigned_to.username,
            'email': obj.assigned_to.email,
        }

    def get_is_overdue(self, obj):
        today = self.context.get('today') or timezone.localdate()
        return obj.is_overdue(today)


class ActionInputSerializer(serializers.Serializer):
    """Validation des données de création et de modification d'une action"""
    category = serializers.CharField(max_length=150)
    category_color = serializers.RegexField(HEX_COLOR, required=False)
    subcategory = serializers.CharField(max_length=150, allow_blank=True, required=False)
    priority = serializers.ChoiceField(choices=ActionPriority.choices, required=False)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, required=False)
    status = serializers.ChoiceField(choices=ActionStatus.choices, required=False)
    assigned_to = serializers.IntegerField(allow_null=True, required=False)
    due_date = serializers.DateField(allow_null=True, required=False)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Le titre de l'action est requis")
        return value.strip()

    def validate_category(self, value):
        if not value.strip():
            raise serializers.ValidationError("La catégorie est requise")
        return value.strip()
