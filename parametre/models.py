from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db import models
import uuid


class Organization(models.Model):
    """
    Organisme de formation (tenant). Toutes les données qualité y sont rattachées.
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, help_text="Raison sociale de l'organisme")
    slug = models.SlugField(max_length=100, unique=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'organization'
        verbose_name = 'Organisme'
        verbose_name_plural = 'Organismes'
        ordering = ['name']

    def __str__(self):
        return self.name


class MembershipRole(models.TextChoices):
    ADMIN = 'admin', 'Administrateur'
    MEMBER = 'member', 'Membre'
    EXTERNAL_COLLABORATOR = 'external_collaborator', 'Collaborateur externe'


class OrganizationMembership(models.Model):
    """
    Rattachement d'un utilisateur à un organisme
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='memberships')
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=30, choices=MembershipRole.choices, default=MembershipRole.MEMBER)
    indicator_access = models.JSONField(
        default=list,
        blank=True,
        help_text="Indicateurs consultables par un collaborateur externe"
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'organization_membership'
        verbose_name = 'Membre d\'organisme'
        verbose_name_plural = 'Membres d\'organisme'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'organization'],
                name='unique_membership_user_organization'
            ),
        ]

    def __str__(self):
        return f"{self.user.username} - {self.organization.name} ({self.get_role_display()})"


class QualitySettings(models.Model):
    """
    Paramètres qualité propres à un organisme.

    Le taux de complétion partiel d'un indicateur vaut ``evidence_weight``
    lorsque seules des preuves sont associées, ``reference_weight`` lorsque
    seules des procédures ou modèles le sont. Les deux poids totalisent 100.
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.OneToOneField(
        Organization,
        on_delete=models.CASCADE,
        related_name='quality_settings'
    )
    evidence_weight = models.PositiveSmallIntegerField(
        default=50,
        help_text="Part du taux de complétion apportée par les preuves (1 à 99)"
    )
    reference_weight = models.PositiveSmallIntegerField(
        default=50,
        help_text="Part du taux de complétion apportée par les procédures et modèles (1 à 99)"
    )
    invitation_validity_days = models.PositiveSmallIntegerField(
        default=7,
        help_text="Durée de validité d'une invitation en jours"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_settings'
        verbose_name = 'Paramètres qualité'
        verbose_name_plural = 'Paramètres qualité'
        constraints = [
            models.CheckConstraint(
                check=models.Q(evidence_weight__gte=1, evidence_weight__lte=99,
                               reference_weight__gte=1, reference_weight__lte=99),
                name='quality_settings_weights_range'
            ),
        ]

    def __str__(self):
        return f'Paramètres qualité - {self.organization}'

    def clean(self):
        if self.evidence_weight + self.reference_weight != 100:
            raise ValidationError("La somme des poids de complétion doit être égale à 100")
        if self.invitation_validity_days < 1:
            raise ValidationError("La validité d'une invitation doit être d'au moins un jour")

    @classmethod
    def get_for_organization(cls, organization_id):
        """Retourne les paramètres de l'organisme (créés si absents)."""
        instance, _ = cls.objects.get_or_create(organization_id=organization_id)
        return instance


class ActivityLog(models.Model):
    """
    Modèle pour tracer les activités des utilisateurs
    """
    ACTION_CHOICES = [
        ('create', 'Création'),
        ('update', 'Modification'),
        ('delete', 'Suppression'),
        ('export', 'Export'),
        ('submit', 'Soumission'),
        ('complete', 'Clôture'),
        ('invite', 'Invitation'),
        ('revoke', 'Révocation'),
        ('accept', 'Acceptation'),
        ('initialize', 'Initialisation'),
    ]

    ENTITY_CHOICES = [
        ('indicator', 'Indicateur'),
        ('document', 'Document'),
        ('action', 'Action'),
        ('action_category', 'Catégorie d\'action'),
        ('task', 'Tâche'),
        ('task_category', 'Catégorie de tâche'),
        ('audit', 'Audit'),
        ('bpf', 'BPF'),
        ('statistic', 'Statistique'),
        ('invitation', 'Invitation'),
        ('settings', 'Paramètres'),
    ]

    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name='activity_logs'
    )
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activity_logs'
    )
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    entity_type = models.CharField(max_length=20, choices=ENTITY_CHOICES)
    entity_id = models.CharField(max_length=100, blank=True, null=True)
    entity_name = models.CharField(max_length=200, blank=True, null=True)
    description = models.TextField()
    ip_address = models.GenericIPAddressField(blank=True, null=True)
    user_agent = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'activity_log'
        verbose_name = 'Log d\'activité'
        verbose_name_plural = 'Logs d\'activité'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['organization', '-created_at'], name='activity_log_org_created_idx'),
            models.Index(fields=['entity_type', '-created_at'], name='activity_log_entity_idx'),
        ]

    def __str__(self):
        username = self.user.username if self.user else 'système'
        return f"{username} - {self.get_action_display()} - {self.entity_name or self.entity_type}"

    @property
    def time_ago(self):
        """
        Retourne le temps écoulé depuis la création en français
        """
        from django.utils import timezone

        diff = timezone.now() - self.created_at

        if diff.days > 0:
            if diff.days == 1:
                return "Il y a 1 jour"
            elif diff.days < 7:
                return f"Il y a {diff.days} jours"
            elif diff.days < 30:
                weeks = diff.days // 7
                return f"Il y a {weeks} semaine{'s' if weeks > 1 else ''}"
            months = diff.days // 30
            return f"Il y a {months} mois"
        elif diff.seconds > 3600:
            hours = diff.seconds // 3600
            return f"Il y a {hours} heure{'s' if hours > 1 else ''}"
        elif diff.seconds > 60:
            minutes = diff.seconds // 60
            return f"Il y a {minutes} minute{'s' if minutes > 1 else ''}"
        return "À l'instant"
