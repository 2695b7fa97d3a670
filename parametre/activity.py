"""
Journal d'activité des organismes
"""
import logging

from .models import ActivityLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """
    Récupère l'adresse IP du client
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def log_activity(tenant, user, action, entity_type, entity_id=None, entity_name=None,
                 description=None, ip_address=None, user_agent=None):
    """
    Enregistre une activité. Un échec d'écriture est journalisé sans interrompre la requête.
    """
    try:
        activity_log = ActivityLog.objects.create(
            organization_id=tenant.organization_id,
            user=user if user is not None and user.is_authenticated else None,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            entity_name=entity_name,
            description=description or f"{action} {entity_type}",
            ip_address=ip_address,
            user_agent=user_agent
        )
        logger.info(f"Activité enregistrée: {activity_log}")
        return activity_log
    except Exception as e:
        logger.error(f"Erreur lors de l'enregistrement de l'activité: {e}")
        return None


def log_request_activity(request, tenant, action, entity_type, entity=None, entity_name=None, description=None):
    """
    Variante utilisée par les vues : l'utilisateur, l'IP et le user-agent
    sont lus sur la requête.
    """
    entity_id = getattr(entity, 'pk', None) if entity is not None else None
    if entity_name is None and entity is not None:
        entity_name = str(entity)[:200]
    return log_activity(
        tenant,
        request.user,
        action,
        entity_type,
        entity_id=entity_id,
        entity_name=entity_name,
        description=description,
        ip_address=get_client_ip(request),
        user_agent=request.META.get('HTTP_USER_AGENT', '')
    )
