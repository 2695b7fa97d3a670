from django.contrib.auth.models import User
from django.db import models
import uuid


class DocumentType(models.TextChoices):
    PROCEDURE = 'procedure', 'Procédure'
    MODEL = 'model', 'Modèle'
    EVIDENCE = 'evidence', 'Preuve'


class DocumentStatus(models.TextChoices):
    ACTIVE = 'active', 'Actif'
    INACTIVE = 'inactive', 'Inactif'
    ARCHIVED = 'archived', 'Archivé'


class DocumentSource(models.TextChoices):
    UPLOAD = 'upload', 'Fichier téléversé'
    URL = 'url', 'Lien externe'


class Document(models.Model):
    """
    Document qualité (procédure, modèle ou preuve) rattaché à des indicateurs
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='quality_documents'
    )
    name = models.CharField(max_length=255, help_text="Nom du document")
    type = models.CharField(max_length=20, choices=DocumentType.choices)
    source = models.CharField(max_length=10, choices=DocumentSource.choices, default=DocumentSource.URL)
    file_reference = models.CharField(
        max_length=500,
        help_text="Chemin dans le stockage ou URL externe"
    )
    file_type = models.CharField(max_length=20, blank=True, default='')
    size_bytes = models.PositiveBigIntegerField(null=True, blank=True)
    description = models.TextField(blank=True, default='')
    category = models.CharField(max_length=150, blank=True, default='')
    status = models.CharField(max_length=20, choices=DocumentStatus.choices, default=DocumentStatus.ACTIVE)
    indicators = models.ManyToManyField(
        'indicateurs.Indicator',
        through='DocumentIndicator',
        related_name='documents',
        blank=True
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='quality_documents'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_document'
        verbose_name = 'Document qualité'
        verbose_name_plural = 'Documents qualité'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['organization', 'type'], name='quality_document_org_type_idx'),
        ]

    def __str__(self):
        return self.name


class DocumentIndicator(models.Model):
    """
    Association document / indicateur (même organisme)
    """
    document = models.ForeignKey(Document, on_delete=models.CASCADE, related_name='indicator_links')
    indicator = models.ForeignKey(
        'indicateurs.Indicator',
        on_delete=models.CASCADE,
        related_name='document_links'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'document_indicator'
        verbose_name = 'Association document / indicateur'
        verbose_name_plural = 'Associations documents / indicateurs'
        constraints = [
            models.UniqueConstraint(
                fields=['document', 'indicator'],
                name='unique_document_indicator'
            ),
        ]

    def __str__(self):
        return f"{self.document.name} → {self.indicator.title}"
