from django.utils import timezone
from rest_framework import serializers

from .models import Task, TaskCategory, TaskPriority, TaskStatus

HEX_COLOR = r'^#[0-9A-Fa-f]{6}$'


class ChecklistItemSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=500)
    completed = serializers.BooleanField(default=False)


class AttachmentSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    url = serializers.CharField(max_length=500)
    size = serializers.IntegerField(min_value=0, required=False)
    type = serializers.CharField(max_length=100, required=False)


class TaskCategorySerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(source='uuid', read_only=True)
    indicator_id = serializers.UUIDField(read_only=True, allow_null=True)
    tasks_count = serializers.SerializerMethodField()

    class Meta:
        model = TaskCategory
        fields = [
            'id', 'name', 'slug', 'description', 'type', 'color', 'icon', 'is_system',
            'indicator_id', 'tasks_count', 'created_at'
        ]

    def get_tasks_count(self, obj):
        count = getattr(obj, 'tasks_count', None)
        return count if count is not None else obj.tasks.count()


class TaskCategoryInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    description = serializers.CharField(allow_blank=True, required=False)
    color = serializers.RegexField(HEX_COLOR, required=False)
    icon = serializers.CharField(max_length=50, allow_blank=True, required=False)
    indicator_id = serializers.UUIDField(allow_null=True, required=False)

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Le nom de la catégorie est requis")
        return value.strip()


class TaskSerializer(serializers.ModelSerializer):
    """Serializer de lecture des tâches"""
    id = serializers.UUIDField(source='uuid', read_only=True)
    category = serializers.SerializerMethodField()
    assigned_to = serializers.SerializerMethodField()
    is_overdue = serializers.SerializerMethodField()
    checklist_progress = serializers.DictField(read_only=True)

    class Meta:
        model = Task
        fields = [
            'id', 'category', 'title', 'description', 'status', 'priority', 'start_date',
            'due_date', 'is_overdue', 'assigned_to', 'attachments', 'checklist',
            'checklist_progress', 'notes', 'position', 'created_at', 'updated_at'
        ]

    def get_category(self, obj):
        return {'id': str(obj.category.uuid), 'name': obj.category.name, 'slug': obj.category.slug}

    def get_assigned_to(self, obj):
        if not obj.assigned_to:
            return None
        return {'id': obj.assigned_to.id, 'name': obj.assigned_to.get_full_name() or obj.assigned_to.username}

    def get_is_overdue(self, obj):
        today = self.context.get('today') or timezone.localdate()
        return obj.is_overdue(today)


class TaskInputSerializer(serializers.Serializer):
    """Validation des données de création et de modification d'une tâche"""
    category_id = serializers.UUIDField()
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, required=False)
    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    priority = serializers.ChoiceField(choices=TaskPriority.choices, required=False)
    start_date = serializers.DateField(allow_null=True, required=False)
    due_date = serializers.DateField(allow_null=True, required=False)
    assigned_to = serializers.IntegerField(allow_null=True, required=False)
    attachments = AttachmentSerializer(many=True, required=False)
    checklist = ChecklistItemSerializer(many=True, required=False)
    notes = serializers.CharField(allow_blank=True, required=False)
    position = serializers.IntegerField(required=False)

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Le titre de la tâche est requis")
        return value.strip()

    def validate(self, attrs):
        start, due = attrs.get('start_date'), attrs.get('due_date')
        if start and due and due < start:
            raise serializers.ValidationError({'due_date': "L'échéance doit suivre la date de début"})
        return attrs


class PositionSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    position = serializers.IntegerField()
    category_id = serializers.UUIDField(required=False)


class ReorderSerializer(serializers.Serializer):
    tasks = PositionSerializer(many=True, allow_empty=False)
