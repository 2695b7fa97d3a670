from django.contrib.auth.models import User
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
import uuid

BPF_MIN_YEAR = 2020
BPF_MAX_YEAR = 2100


class BpfStatus(models.TextChoices):
    DRAFT = 'draft', 'Brouillon'
    SUBMITTED = 'submitted', 'Transmis'


class Bpf(models.Model):
    """
    Bilan pédagogique et financier annuel. Le contenu du formulaire est
    conservé tel quel dans ``data`` ; il devient immuable une fois transmis.
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='bpfs'
    )
    year = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(BPF_MIN_YEAR), MaxValueValidator(BPF_MAX_YEAR)],
        help_text="Exercice comptable déclaré"
    )
    data = models.JSONField(default=dict, blank=True, help_text="Contenu du formulaire BPF")
    status = models.CharField(max_length=20, choices=BpfStatus.choices, default=BpfStatus.DRAFT)
    submitted_date = models.DateTimeField(null=True, blank=True)
    submitted_to = models.CharField(max_length=200, blank=True, default='', help_text="Destinataire (DREETS, ...)")
    submission_method = models.CharField(max_length=100, blank=True, default='')
    notes = models.TextField(blank=True, default='')
    export_reference = models.CharField(max_length=500, blank=True, default='', help_text="Dernier export généré")
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_bpfs'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_bpf'
        verbose_name = 'BPF'
        verbose_name_plural = 'BPF'
        ordering = ['-year']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'year'],
                name='unique_bpf_year_per_organization'
            ),
        ]

    def __str__(self):
        return f"BPF {self.year}"

    @property
    def is_draft(self):
        return self.status == BpfStatus.DRAFT
