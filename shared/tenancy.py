"""
Contexte d'organisation (tenant) transmis à chaque opération métier
"""
from dataclasses import dataclass, field
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import PermissionDenied

from .exceptions import NotFound

logger = logging.getLogger(__name__)

ROLE_ADMIN = 'admin'
ROLE_MEMBER = 'member'
ROLE_EXTERNAL = 'external_collaborator'


@dataclass(frozen=True)
class TenantContext:
    """Organisation active et acteur de la requête"""
    organization_id: int
    actor_id: int = None
    role: str = ROLE_ADMIN
    indicator_access: tuple = field(default_factory=tuple)

    @property
    def is_external(self):
        return self.role == ROLE_EXTERNAL


def tenant_from_request(request):
    """
    Résout le TenantContext à partir de l'utilisateur authentifié.
    Le résultat est mémorisé sur la requête.
    """
    cached = getattr(request, '_tenant_context', None)
    if cached is not None:
        return cached

    from parametre.models import OrganizationMembership

    user = request.user
    if not user or not user.is_authenticated:
        raise PermissionDenied("Authentification requise")

    membership = (
        OrganizationMembership.objects
        .select_related('organization')
        .filter(user=user, is_active=True, organization__is_active=True)
        .first()
    )
    if membership is None:
        logger.warning(f"Aucune organisation active pour l'utilisateur {user.username}")
        raise PermissionDenied("Aucune organisation associée à cet utilisateur")

    tenant = TenantContext(
        organization_id=membership.organization_id,
        actor_id=user.id,
        role=membership.role,
        indicator_access=tuple(membership.indicator_access or ()),
    )
    request._tenant_context = tenant
    return tenant


def scoped(queryset, tenant):
    """Filtre un queryset sur l'organisation du tenant"""
    return queryset.filter(organization_id=tenant.organization_id)


def get_scoped(queryset, tenant, message=None, **lookup):
    """
    Récupère une entité de l'organisation du tenant.
    Une entité d'une autre organisation est traitée comme inexistante.
    """
    try:
        return scoped(queryset, tenant).get(**lookup)
    except queryset.model.DoesNotExist:
        raise NotFound(message or f"{queryset.model._meta.verbose_name} introuvable")
    except (ValueError, TypeError, DjangoValidationError):
        raise NotFound(message or f"{queryset.model._meta.verbose_name} introuvable")
