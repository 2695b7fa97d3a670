from django.db import models
import uuid


class Statistic(models.Model):
    """
    Instantané quotidien des compteurs qualité d'un organisme.
    Une seule ligne par (organisme, date) ; une régénération la met à jour.
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='quality_statistics'
    )
    date = models.DateField()

    # Indicateurs
    indicators_total = models.PositiveIntegerField(default=0)
    indicators_completed = models.PositiveIntegerField(default=0)
    indicators_in_progress = models.PositiveIntegerField(default=0)
    indicators_not_started = models.PositiveIntegerField(default=0)
    completion_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        help_text="Taux de complétion moyen des indicateurs applicables"
    )

    # Documents
    documents_total = models.PositiveIntegerField(default=0)
    documents_procedures = models.PositiveIntegerField(default=0)
    documents_models = models.PositiveIntegerField(default=0)
    documents_evidences = models.PositiveIntegerField(default=0)

    # Actions
    actions_total = models.PositiveIntegerField(default=0)
    actions_pending = models.PositiveIntegerField(default=0)
    actions_completed = models.PositiveIntegerField(default=0)
    actions_overdue = models.PositiveIntegerField(default=0)

    # Tâches
    tasks_total = models.PositiveIntegerField(default=0)
    tasks_completed = models.PositiveIntegerField(default=0)
    tasks_pending = models.PositiveIntegerField(default=0)
    tasks_overdue = models.PositiveIntegerField(default=0)

    generated_at = models.DateTimeField()

    class Meta:
        db_table = 'quality_statistic'
        verbose_name = 'Statistique qualité'
        verbose_name_plural = 'Statistiques qualité'
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'date'],
                name='unique_statistic_per_organization_date'
            ),
        ]

    def __str__(self):
        return f"{self.organization} - {self.date:%d/%m/%Y}"


COUNTER_FIELDS = [
    'indicators_total', 'indicators_completed', 'indicators_in_progress', 'indicators_not_started',
    'completion_percentage',
    'documents_total', 'documents_procedures', 'documents_models', 'documents_evidences',
    'actions_total', 'actions_pending', 'actions_completed', 'actions_overdue',
    'tasks_total', 'tasks_completed', 'tasks_pending', 'tasks_overdue',
]
