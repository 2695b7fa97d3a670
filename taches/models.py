from django.contrib.auth.models import User
from django.db import models
import uuid


class TaskCategoryType(models.TextChoices):
    VEILLE = 'veille', 'Veille'
    COMPETENCE = 'competence', 'Compétences'
    DYSFONCTIONNEMENT = 'dysfonctionnement', 'Dysfonctionnements'
    AMELIORATION = 'amelioration', 'Amélioration continue'
    HANDICAP = 'handicap', 'Handicap'
    CUSTOM = 'custom', 'Personnalisée'


class TaskStatus(models.TextChoices):
    TODO = 'todo', 'À faire'
    IN_PROGRESS = 'in_progress', 'En cours'
    DONE = 'done', 'Terminée'
    ARCHIVED = 'archived', 'Archivée'


class TaskPriority(models.TextChoices):
    LOW = 'low', 'Basse'
    MEDIUM = 'medium', 'Moyenne'
    HIGH = 'high', 'Haute'
    URGENT = 'urgent', 'Urgente'


OPEN_TASK_STATUSES = (TaskStatus.TODO, TaskStatus.IN_PROGRESS)


class TaskCategory(models.Model):
    """
    Colonne du tableau de tâches. Les catégories système sont créées une
    fois par organisme et ne peuvent être ni modifiées ni supprimées.
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='task_categories'
    )
    name = models.CharField(max_length=150)
    slug = models.SlugField(max_length=160)
    description = models.TextField(blank=True, default='')
    type = models.CharField(max_length=20, choices=TaskCategoryType.choices, default=TaskCategoryType.CUSTOM)
    color = models.CharField(max_length=7, default='#3f5ea9')
    icon = models.CharField(max_length=50, blank=True, default='')
    is_system = models.BooleanField(default=False)
    indicator = models.ForeignKey(
        'indicateurs.Indicator',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='task_categories'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_task_category'
        verbose_name = 'Catégorie de tâches'
        verbose_name_plural = 'Catégories de tâches'
        ordering = ['-is_system', 'created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'slug'],
                name='unique_task_category_slug_per_organization'
            ),
            models.UniqueConstraint(
                fields=['organization', 'type'],
                condition=models.Q(is_system=True),
                name='unique_system_task_category_type'
            ),
        ]

    def __str__(self):
        return self.name


class Task(models.Model):
    """
    Tâche du tableau Kanban qualité
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='tasks'
    )
    category = models.ForeignKey(TaskCategory, on_delete=models.PROTECT, related_name='tasks')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=TaskStatus.choices, default=TaskStatus.TODO)
    priority = models.CharField(max_length=10, choices=TaskPriority.choices, default=TaskPriority.MEDIUM)
    start_date = models.DateField(null=True, blank=True)
    due_date = models.DateField(null=True, blank=True)
    assigned_to = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_quality_tasks'
    )
    attachments = models.JSONField(default=list, blank=True, help_text="Pièces jointes [{name, url}]")
    checklist = models.JSONField(default=list, blank=True, help_text="Liste de contrôle [{text, completed}]")
    notes = models.TextField(blank=True, default='')
    position = models.IntegerField(default=0, help_text="Ordre manuel dans la catégorie")
    position_order = models.PositiveIntegerField(
        default=0,
        help_text="Rang de soumission lors du dernier réordonnancement (départage des positions égales)"
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_quality_tasks'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_task'
        verbose_name = 'Tâche'
        verbose_name_plural = 'Tâches'
        ordering = ['position', 'position_order', 'created_at']
        indexes = [
            models.Index(fields=['organization', 'category', 'position'], name='quality_task_position_idx'),
        ]

    def __str__(self):
        return self.title

    def is_overdue(self, today):
        return bool(self.due_date) and self.status in OPEN_TASK_STATUSES and self.due_date < today

    @property
    def checklist_progress(self):
        total = len(self.checklist or [])
        done = sum(1 for item in self.checklist or [] if item.get('completed'))
        return {'total': total, 'completed': done}
