"""
Cycle de vie des invitations de collaborateurs externes
"""
from datetime import timedelta
import logging
import secrets

from django.db import IntegrityError, transaction

from indicateurs.models import Indicator
from parametre.models import MembershipRole, QualitySettings
from parametre.services import UserDirectory
from shared.clock import get_clock
from shared.exceptions import (
    Conflict, Expired, InvalidOperation, NotFound, ValidationError, validate_payload
)
from shared.tenancy import get_scoped, scoped
from .models import EXPIRED, Invitation, InvitationStatus
from .serializers import AcceptInvitationSerializer, InvitationInputSerializer
from .signals import invitation_sent

logger = logging.getLogger(__name__)

LIST_STATUSES = InvitationStatus.values + [EXPIRED]


def generate_token():
    return secrets.token_urlsafe(32)


class InvitationLifecycle:
    """
    Invitation, acceptation, révocation et renvoi.

    Transitions: pending -> accepted | revoked, accepted -> revoked.
    Une invitation en attente dont l'échéance est passée est considérée expirée.
    """

    def __init__(self, clock=None, user_directory=None):
        self.clock = clock or get_clock()
        self.user_directory = user_directory or UserDirectory

    def queryset(self, tenant):
        return scoped(Invitation.objects.select_related('invited_by'), tenant)

    def list(self, tenant, status=None):
        queryset = self.queryset(tenant)
        if status:
            if status not in LIST_STATUSES:
                raise ValidationError(details={'status': [f"Statut inconnu: {status}"]})
            now = self.clock.now()
            if status == EXPIRED:
                queryset = queryset.filter(status=InvitationStatus.PENDING, expires_at__lte=now)
            elif status == InvitationStatus.PENDING:
                queryset = queryset.filter(status=InvitationStatus.PENDING, expires_at__gt=now)
            else:
                queryset = queryset.filter(status=status)
        return queryset.order_by('-created_at')

    def get(self, tenant, invitation_id):
        return get_scoped(self.queryset(tenant), tenant, "Invitation introuvable", uuid=invitation_id)

    def invite(self, tenant, email, name, indicator_access, permissions=None):
        data = validate_payload(InvitationInputSerializer, {
            'email': email,
            'name': name,
            'indicator_access': indicator_access if indicator_access is not None else [],
            'permissions': permissions or [],
        })
        indicator_ids = self._validate_indicators(tenant, data['indicator_access'])
        if self.user_directory.has_internal_membership(data['email'], tenant.organization_id):
            raise Conflict(f"{data['email']} est déjà membre de l'organisme")
        now = self.clock.now()

        try:
            with transaction.atomic():
                existing = (
                    scoped(Invitation.objects.select_for_update(), tenant)
                    .filter(email=data['email'], status=InvitationStatus.PENDING)
                    .first()
                )
                if existing is not None:
                    if not existing.is_expired(now):
                        raise Conflict(f"Une invitation est déjà en attente pour {data['email']}")
                    existing.status = InvitationStatus.REVOKED
                    existing.revoked_at = now
                    existing.save(update_fields=['status', 'revoked_at', 'updated_at'])
                    logger.info(f"Invitation expirée remplacée pour {data['email']}")

                invitation = Invitation.objects.create(
                    organization_id=tenant.organization_id,
                    email=data['email'],
                    name=data['name'],
                    token=generate_token(),
                    indicator_access=indicator_ids,
                    permissions=data['permissions'],
                    invited_by_id=tenant.actor_id,
                    expires_at=now + self._validity(tenant),
                )
        except IntegrityError:
            raise Conflict(f"Une invitation est déjà en attente pour {data['email']}")

        logger.info(f"Invitation créée pour {invitation.email} (expire le {invitation.expires_at:%d/%m/%Y})")
        invitation_sent.send(sender=Invitation, invitation=invitation, resent=False)
        return invitation

    def accept(self, token, password, name=None):
        """
        Accepte une invitation à partir de son jeton et crée le compte restreint.
        Seul point d'entrée public du module.
        """
        data = validate_payload(AcceptInvitationSerializer, {
            'token': token or '',
            'password': password or '',
            'name': name or '',
        })

        with transaction.atomic():
            invitation = (
                Invitation.objects.select_for_update()
                .filter(token=data['token'])
                .first()
            )
            if invitation is None:
                raise NotFound("Invitation introuvable")
            if invitation.status != InvitationStatus.PENDING:
                raise Conflict(f"Cette invitation a déjà été {invitation.get_status_display().lower()}")
            now = self.clock.now()
            if invitation.is_expired(now):
                raise Expired()

            user_id = self.user_directory.create_restricted_user(
                data.get('name') or invitation.name,
                invitation.email,
                data['password'],
                invitation.organization_id,
                role=MembershipRole.EXTERNAL_COLLABORATOR,
                indicator_access=invitation.indicator_access,
            )
            invitation.status = InvitationStatus.ACCEPTED
            invitation.accepted_at = now
            invitation.accepted_user_id = user_id
            invitation.save(update_fields=['status', 'accepted_at', 'accepted_user', 'updated_at'])

        logger.info(f"Invitation acceptée par {invitation.email}")
        return invitation

    def revoke(self, tenant, invitation_id):
        with transaction.atomic():
            invitation = get_scoped(
                Invitation.objects.select_for_update(), tenant, "Invitation introuvable", uuid=invitation_id
            )
            if invitation.status == InvitationStatus.REVOKED:
                raise InvalidOperation("Cette invitation est déjà révoquée")
            if invitation.status == InvitationStatus.ACCEPTED and invitation.accepted_user_id:
                self.user_directory.deactivate_membership(invitation.accepted_user_id, tenant.organization_id)
            invitation.status = InvitationStatus.REVOKED
            invitation.revoked_at = self.clock.now()
            invitation.save(update_fields=['status', 'revoked_at', 'updated_at'])

        logger.info(f"Invitation révoquée: {invitation.email}")
        return invitation

    def resend(self, tenant, invitation_id):
        with transaction.atomic():
            invitation = get_scoped(
                Invitation.objects.select_for_update(), tenant, "Invitation introuvable", uuid=invitation_id
            )
            if invitation.status != InvitationStatus.PENDING:
                raise InvalidOperation("Seule une invitation en attente peut être renvoyée")
            invitation.expires_at = self.clock.now() + self._validity(tenant)
            invitation.save(update_fields=['expires_at', 'updated_at'])

        logger.info(f"Invitation prolongée pour {invitation.email}")
        invitation_sent.send(sender=Invitation, invitation=invitation, resent=True)
        return invitation

    def _validity(self, tenant):
        days = QualitySettings.get_for_organization(tenant.organization_id).invitation_validity_days
        return timedelta(days=days)

    def _validate_indicators(self, tenant, indicator_ids):
        unique_ids = list(dict.fromkeys(indicator_ids))
        found = set(
            scoped(Indicator.objects.all(), tenant)
            .filter(uuid__in=unique_ids)
            .values_list('uuid', flat=True)
        )
        missing = [str(i) for i in unique_ids if i not in found]
        if missing:
            raise ValidationError(details={'indicator_access': [f"Indicateurs inconnus: {', '.join(missing)}"]})
        return [str(i) for i in unique_ids]
