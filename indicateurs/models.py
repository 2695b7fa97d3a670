from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
import uuid

INDICATOR_COUNT = 32


def default_document_counts():
    return {'procedure': 0, 'model': 0, 'evidence': 0}


class IndicatorStatus(models.TextChoices):
    NOT_STARTED = 'not_started', 'Non commencé'
    IN_PROGRESS = 'in_progress', 'En cours'
    COMPLETED = 'completed', 'Terminé'


class Indicator(models.Model):
    """
    Indicateur Qualiopi d'un organisme (32 par organisme).

    ``completion_rate``, ``document_counts`` et ``has_documents`` sont calculés
    à partir des documents associés et ne sont écrits que par
    ``DocumentAssociationStore.recompute``.
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='indicators'
    )
    number = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(INDICATOR_COUNT)],
        help_text="Numéro de l'indicateur (1 à 32)"
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    category = models.CharField(max_length=150, blank=True, default='', help_text="Critère Qualiopi")
    status = models.CharField(
        max_length=20,
        choices=IndicatorStatus.choices,
        default=IndicatorStatus.NOT_STARTED
    )
    completion_rate = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)],
        help_text="Taux de complétion calculé (0 à 100)"
    )
    document_counts = models.JSONField(default=default_document_counts)
    has_documents = models.BooleanField(default=False)
    requirements = models.JSONField(default=list, blank=True, help_text="Exigences de l'indicateur")
    notes = models.TextField(blank=True, default='')
    is_applicable = models.BooleanField(
        default=True,
        help_text="Indique si l'indicateur s'applique à l'organisme"
    )
    last_updated = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_indicator'
        verbose_name = 'Indicateur'
        verbose_name_plural = 'Indicateurs'
        ordering = ['number']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'number'],
                name='unique_indicator_number_per_organization'
            ),
            models.CheckConstraint(
                check=models.Q(completion_rate__lte=100),
                name='indicator_completion_rate_max_100'
            ),
        ]

    def __str__(self):
        return self.title
