"""
Planification et suivi des audits de certification
"""
from django.db import transaction
import logging

from shared.clock import get_clock
from shared.exceptions import InvalidOperation, NotFound, ValidationError, validate_payload
from shared.pagination import paginate
from shared.tenancy import get_scoped, scoped
from .models import Audit, AuditStatus, AuditType
from .serializers import AuditCompletionSerializer, AuditInputSerializer

logger = logging.getLogger(__name__)


class AuditScheduler:
    """Audits d'un organisme : planification, clôture et historique"""

    def __init__(self, clock=None):
        self.clock = clock or get_clock()

    def queryset(self, tenant):
        return scoped(Audit.objects.all(), tenant)

    def next(self, tenant):
        """Prochain audit planifié (date >= aujourd'hui)"""
        audit = (
            self.queryset(tenant)
            .filter(status=AuditStatus.SCHEDULED, date__gte=self.clock.today())
            .order_by('date', 'created_at')
            .first()
        )
        if audit is None:
            raise NotFound("Aucun audit planifié")
        return audit

    def list(self, tenant, status=None):
        queryset = self.queryset(tenant)
        if status:
            if status not in AuditStatus.values:
                raise ValidationError(details={'status': [f"Statut inconnu: {status}"]})
            queryset = queryset.filter(status=status)
        return queryset.order_by('date', 'created_at')

    def get(self, tenant, audit_id):
        return get_scoped(self.queryset(tenant), tenant, "Audit introuvable", uuid=audit_id)

    def create(self, tenant, payload):
        data = validate_payload(AuditInputSerializer, payload)
        audit = Audit.objects.create(
            organization_id=tenant.organization_id,
            created_by_id=tenant.actor_id,
            **data
        )
        logger.info(f"Audit planifié: {audit}")
        return audit

    def update(self, tenant, audit_id, patch):
        data = validate_payload(AuditInputSerializer, patch, partial=True)
        audit = self.get(tenant, audit_id)
        self._ensure_scheduled(audit, "modifié")
        for field, value in data.items():
            setattr(audit, field, value)
        audit.save()
        logger.info(f"Audit mis à jour: {audit}")
        return audit

    def complete(self, tenant, audit_id, outcome):
        data = validate_payload(AuditCompletionSerializer, outcome)

        with transaction.atomic():
            audit = get_scoped(
                Audit.objects.select_for_update(), tenant, "Audit introuvable", uuid=audit_id
            )
            if audit.is_completed:
                raise InvalidOperation("Cet audit est déjà clôturé")
            for field, value in data.items():
                setattr(audit, field, value)
            audit.status = AuditStatus.COMPLETED
            audit.completed_at = self.clock.now()
            audit.save()

        logger.info(f"Audit clôturé: {audit} (résultat {audit.result})")
        return audit

    def history(self, tenant, year=None, type=None, page=None, limit=None):
        """Audits clôturés, du plus récent au plus ancien"""
        queryset = self.queryset(tenant).filter(status=AuditStatus.COMPLETED)
        if year:
            try:
                queryset = queryset.filter(date__year=int(year))
            except (TypeError, ValueError):
                raise ValidationError(details={'year': ["L'année doit être un entier"]})
        if type:
            if type not in AuditType.values:
                raise ValidationError(details={'type': [f"Type d'audit inconnu: {type}"]})
            queryset = queryset.filter(type=type)
        return paginate(queryset.order_by('-date', '-completed_at'), page, limit)

    def delete(self, tenant, audit_id):
        audit = self.get(tenant, audit_id)
        self._ensure_scheduled(audit, "supprimé")
        label = str(audit)
        audit.delete()
        logger.info(f"Audit supprimé: {label}")

    def days_remaining(self, audit, today=None):
        return audit.days_remaining(today or self.clock.today())

    def countdown(self, tenant):
        """
        Compte à rebours du prochain audit pour les tableaux de bord.
        À défaut d'audit à venir, l'audit planifié le plus récent dont la date
        est passée est signalé en retard. Retourne None s'il n'y a aucun audit planifié.
        """
        today = self.clock.today()
        try:
            audit = self.next(tenant)
        except NotFound:
            audit = (
                self.queryset(tenant)
                .filter(status=AuditStatus.SCHEDULED, date__lt=today)
                .order_by('-date')
                .first()
            )
        if audit is None:
            return None

        days = audit.days_remaining(today)
        return {
            'audit': audit,
            'days': days,
            'is_overdue': days < 0,
            'date': audit.date,
            'formatted_date': audit.date.strftime('%d/%m/%Y'),
        }

    def _ensure_scheduled(self, audit, verb):
        if audit.is_completed:
            raise InvalidOperation(f"Un audit clôturé ne peut pas être {verb}")
