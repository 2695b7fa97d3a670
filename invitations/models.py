from django.contrib.auth.models import User
from django.db import models
import uuid


class InvitationStatus(models.TextChoices):
    PENDING = 'pending', 'En attente'
    ACCEPTED = 'accepted', 'Acceptée'
    REVOKED = 'revoked', 'Révoquée'


# Statut calculé : invitation en attente dont la date d'expiration est dépassée
EXPIRED = 'expired'


class Invitation(models.Model):
    """
    Invitation d'un collaborateur externe à consulter certains indicateurs
    """
    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        'parametre.Organization',
        on_delete=models.CASCADE,
        related_name='invitations'
    )
    email = models.EmailField()
    name = models.CharField(max_length=200)
    token = models.CharField(max_length=64, unique=True, help_text="Jeton opaque transmis par email")
    indicator_access = models.JSONField(default=list, blank=True, help_text="Indicateurs consultables")
    permissions = models.JSONField(default=list, blank=True)
    invited_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sent_invitations'
    )
    status = models.CharField(max_length=20, choices=InvitationStatus.choices, default=InvitationStatus.PENDING)
    expires_at = models.DateTimeField()
    accepted_at = models.DateTimeField(null=True, blank=True)
    accepted_user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='accepted_invitations'
    )
    revoked_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'quality_invitation'
        verbose_name = 'Invitation'
        verbose_name_plural = 'Invitations'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'email'],
                condition=models.Q(status='pending'),
                name='unique_pending_invitation_per_email'
            ),
        ]

    def __str__(self):
        return f"{self.email} ({self.get_status_display()})"

    def is_expired(self, now):
        return self.status == InvitationStatus.PENDING and self.expires_at <= now

    def display_status(self, now):
        return EXPIRED if self.is_expired(now) else self.status
