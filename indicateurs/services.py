"""
Catalogue des indicateurs Qualiopi d'un organisme
"""
from django.db import transaction
import logging

from shared.clock import get_clock
from shared.exceptions import QualiteError, ValidationError, validate_payload
from shared.tenancy import get_scoped, scoped
from .models import Indicator, IndicatorStatus
from .serializers import IndicatorUpdateSerializer

logger = logging.getLogger(__name__)

DERIVED_FIELDS = ('completion_rate', 'document_counts', 'has_documents')


def summarize(indicators):
    """
    Synthèse calculée à la lecture. Le taux global est la moyenne des taux
    des indicateurs applicables.
    """
    applicable = [i for i in indicators if i.is_applicable]
    rates = [i.completion_rate for i in applicable]
    return {
        'total': len(indicators),
        'completed': sum(1 for i in indicators if i.status == IndicatorStatus.COMPLETED),
        'inProgress': sum(1 for i in indicators if i.status == IndicatorStatus.IN_PROGRESS),
        'notStarted': sum(1 for i in indicators if i.status == IndicatorStatus.NOT_STARTED),
        'notApplicable': len(indicators) - len(applicable),
        'overallCompletionRate': round(sum(rates) / len(rates), 2) if rates else 0,
    }


class IndicatorCatalog:
    """Lecture et modifications manuelles des indicateurs"""

    def __init__(self, clock=None):
        self.clock = clock or get_clock()

    def queryset(self, tenant):
        queryset = scoped(Indicator.objects.all(), tenant)
        if tenant.is_external:
            queryset = queryset.filter(uuid__in=list(tenant.indicator_access))
        return queryset

    def list(self, tenant, status=None, category=None, has_documents=None):
        queryset = self.queryset(tenant)
        if status:
            if status not in IndicatorStatus.values:
                raise ValidationError(details={'status': [f"Statut inconnu: {status}"]})
            queryset = queryset.filter(status=status)
        if category:
            queryset = queryset.filter(category=category)
        if has_documents is not None:
            queryset = queryset.filter(has_documents=has_documents)

        indicators = list(queryset.order_by('number'))
        return {'indicators': indicators, 'summary': summarize(indicators)}

    def get(self, tenant, indicator_id):
        return get_scoped(self.queryset(tenant), tenant, "Indicateur introuvable", uuid=indicator_id)

    def update(self, tenant, indicator_id, patch):
        """
        Modifie les champs éditables d'un indicateur. Les champs calculés sont refusés.
        """
        patch = dict(patch or {})
        patch.pop('id', None)
        derived = [f for f in DERIVED_FIELDS if f in patch]
        if derived:
            raise ValidationError(
                details={f: ["Champ calculé, non modifiable"] for f in derived}
            )

        data = validate_payload(IndicatorUpdateSerializer, patch, partial=True)
        indicator = self.get(tenant, indicator_id)
        for field, value in data.items():
            setattr(indicator, field, value)
        indicator.last_updated = self.clock.now()
        indicator.save(update_fields=list(data.keys()) + ['last_updated', 'updated_at'])
        logger.info(f"Indicateur {indicator.number} mis à jour ({', '.join(data.keys()) or 'aucun champ'})")
        return indicator

    def batch_update(self, tenant, items):
        """
        Applique plusieurs modifications. Chaque élément est traité indépendamment :
        un échec n'empêche pas les autres mises à jour.
        """
        if not isinstance(items, list) or not items:
            raise ValidationError(details={'indicators': ["Une liste non vide est requise"]})

        updated, errors = [], []
        for item in items:
            if not isinstance(item, dict) or not item.get('id'):
                errors.append({'id': None, 'code': 'INVALID_INPUT', 'message': "Identifiant manquant"})
                continue
            patch = {k: v for k, v in item.items() if k != 'id'}
            try:
                with transaction.atomic():
                    updated.append(self.update(tenant, item['id'], patch))
            except QualiteError as e:
                errors.append({'id': str(item['id']), 'code': e.code, 'message': e.message})

        logger.info(f"Mise à jour groupée: {len(updated)} indicateur(s) modifié(s), {len(errors)} échec(s)")
        return {'updated': updated, 'errors': errors}

    def list_documents(self, tenant, indicator_id, document_type=None):
        indicator = self.get(tenant, indicator_id)
        documents = indicator.documents.filter(organization_id=tenant.organization_id)
        if document_type:
            documents = documents.filter(type=document_type)
        return documents.order_by('-created_at')

    def categories(self, tenant):
        """Liste des critères présents dans le catalogue de l'organisme"""
        categories = self.queryset(tenant).exclude(category='').order_by('number').values_list('category', flat=True)
        return list(dict.fromkeys(categories))
