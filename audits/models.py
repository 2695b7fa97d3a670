from django.contrib.auth.models import User
from django.core.validators import MaxValueValidator
from django.db import models
import uuid


class AuditType(models.TextChoices):
    INITIAL = 'initial', 'Audit initial'
    SURVEILLANCE = 'surveillance', 'Audit de surveillance'
    RENEWAL = 'renewal', 'Audit de renouvellement'


class AuditStatus(models.TextChoices):
    SCHEDULED = 'scheduled', 'Planifié'
    COMPLETED = 'completed', 'Réalisé'


class AuditResult(models.TextChoices):
    PASSED = 'passed', 'Certifié'
    FAILED = 'failed', 'Non certifié'
    CONDITIONAL = 'conditional', 'Certifié sous réserve'


class Audit(models.Model):
    """
    Audit de certification Qualiopi, planifié puis clôturé avec son résultat
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='audits'
    )
    type = models.CharField(max_length=20, choices=AuditType.choices)
    date = models.DateField(help_text="Date prévue de l'audit")
    auditor_name = models.CharField(max_length=200)
    auditor_contact = models.CharField(max_length=200, blank=True, default='')
    auditor_phone = models.CharField(max_length=30, blank=True, default='')
    location = models.CharField(max_length=255, blank=True, default='')
    notes = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=AuditStatus.choices, default=AuditStatus.SCHEDULED)
    completion_date = models.DateField(null=True, blank=True, help_text="Date effective de l'audit")
    result = models.CharField(max_length=20, choices=AuditResult.choices, blank=True, default='')
    score = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MaxValueValidator(100)])
    report_reference = models.CharField(max_length=255, blank=True, default='')
    observations = models.JSONField(default=list, blank=True)
    recommendations = models.JSONField(default=list, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_quality_audits'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_audit'
        verbose_name = 'Audit'
        verbose_name_plural = 'Audits'
        ordering = ['date']
        indexes = [
            models.Index(fields=['organization', 'status', 'date'], name='quality_audit_org_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                check=models.Q(score__isnull=True) | models.Q(score__lte=100),
                name='audit_score_max_100'
            ),
        ]

    def __str__(self):
        return f"{self.get_type_display()} du {self.date:%d/%m/%Y}"

    @property
    def is_completed(self):
        return self.status == AuditStatus.COMPLETED

    def days_remaining(self, today):
        return (self.date - today).days
