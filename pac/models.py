from django.contrib.auth.models import User
from django.db import models
import uuid

DEFAULT_CATEGORY_COLOR = '#3f5ea9'


class ActionPriority(models.TextChoices):
    LOW = 'Low', 'Basse'
    MEDIUM = 'Medium', 'Moyenne'
    HIGH = 'High', 'Haute'


class ActionStatus(models.TextChoices):
    PENDING = 'pending', 'En attente'
    IN_PROGRESS = 'in_progress', 'En cours'
    COMPLETED = 'completed', 'Terminée'
    CANCELLED = 'cancelled', 'Annulée'


OPEN_ACTION_STATUSES = (ActionStatus.PENDING, ActionStatus.IN_PROGRESS)


class ActionCategory(models.Model):
    """
    Catégorie d'actions qualité (Veille, Amélioration continue, ...)
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='action_categories'
    )
    label = models.CharField(max_length=150, help_text="Libellé de la catégorie")
    color = models.CharField(max_length=7, default=DEFAULT_CATEGORY_COLOR, help_text="Couleur hexadécimale")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_action_category'
        verbose_name = "Catégorie d'action"
        verbose_name_plural = "Catégories d'actions"
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'label'],
                name='unique_action_category_label_per_organization'
            ),
        ]

    def __str__(self):
        return self.label


class Action(models.Model):
    """
    Action corrective ou d'amélioration
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='actions'
    )
    category = models.ForeignKey(
        ActionCategory,
        on_delete=models.PROTECT,
        related_name='actions'
    )
    subcategory = models.CharField(max_length=150, blank=True, default='')
    priority = models.CharField(max_length=10, choices=ActionPriority.choices, default=ActionPriority.MEDIUM)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=ActionStatus.choices, default=ActionStatus.PENDING)
    assigned_to = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_quality_actions'
    )
    due_date = models.DateField(null=True, blank=True, help_text="Date d'échéance")
    tags = models.JSONField(default=list, blank=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_quality_actions'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_action'
        verbose_name = 'Action'
        verbose_name_plural = 'Actions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['organization', 'status'], name='quality_action_org_status_idx'),
            models.Index(fields=['organization', 'due_date'], name='quality_action_org_due_idx'),
        ]

    def __str__(self):
        return self.title

    def is_overdue(self, today):
        return bool(self.due_date) and self.status in OPEN_ACTION_STATUSES and self.due_date < today
