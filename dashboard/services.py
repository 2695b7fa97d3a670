"""
Agrégation des compteurs qualité : instantanés quotidiens et tableau de bord
"""
from datetime import date as date_type, timedelta
from decimal import Decimal
import logging

from django.db.models import Count, Q
from django.utils.dateparse import parse_date

from audits.services import AuditScheduler
from documentation.models import Document, DocumentType
from indicateurs.services import IndicatorCatalog
from pac.services import ActionBoard
from shared.clock import get_clock
from shared.exceptions import ValidationError
from shared.tenancy import scoped
from taches.services import TaskBoard
from .models import COUNTER_FIELDS, Statistic

logger = logging.getLogger(__name__)

RECENT_DOCUMENTS_DAYS = 7
RECENT_DOCUMENTS_LIMIT = 5


def _parse_day(value, field):
    if isinstance(value, date_type):
        return value
    try:
        parsed = parse_date(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(details={field: ["Date invalide, format attendu AAAA-MM-JJ"]})
    return parsed


class StatisticsAggregator:
    """Calcule et conserve les statistiques qualité d'un organisme"""

    def __init__(self, clock=None):
        self.clock = clock or get_clock()
        self.indicators = IndicatorCatalog(clock=self.clock)
        self.actions = ActionBoard(clock=self.clock)
        self.tasks = TaskBoard(clock=self.clock)
        self.audits = AuditScheduler(clock=self.clock)

    def document_counts(self, tenant):
        return scoped(Document.objects.all(), tenant).aggregate(
            total=Count('uuid'),
            procedures=Count('uuid', filter=Q(type=DocumentType.PROCEDURE)),
            models=Count('uuid', filter=Q(type=DocumentType.MODEL)),
            evidences=Count('uuid', filter=Q(type=DocumentType.EVIDENCE)),
        )

    def collect(self, tenant):
        """Compteurs courants, indépendamment de tout instantané"""
        summary = self.indicators.list(tenant)['summary']
        documents = self.document_counts(tenant)
        actions = self.actions.counts(tenant)
        tasks = self.tasks.counts(tenant)
        return {
            'indicators_total': summary['total'],
            'indicators_completed': summary['completed'],
            'indicators_in_progress': summary['inProgress'],
            'indicators_not_started': summary['notStarted'],
            'completion_percentage': Decimal(str(summary['overallCompletionRate'])),
            'documents_total': documents['total'],
            'documents_procedures': documents['procedures'],
            'documents_models': documents['models'],
            'documents_evidences': documents['evidences'],
            'actions_total': actions['total'],
            'actions_pending': actions['pending'],
            'actions_completed': actions['completed'],
            'actions_overdue': actions['overdue'],
            'tasks_total': tasks['total'],
            'tasks_completed': tasks['completed'],
            'tasks_pending': tasks['pending'],
            'tasks_overdue': tasks['overdue'],
        }

    def generate(self, tenant, date=None):
        """
        Crée ou met à jour l'instantané du jour donné. L'upsert s'appuie sur la
        contrainte unique (organisme, date) : des appels concurrents convergent
        vers une seule ligne.
        """
        day = _parse_day(date, 'date') if date else self.clock.today()
        counters = self.collect(tenant)

        Statistic.objects.bulk_create(
            [Statistic(
                organization_id=tenant.organization_id,
                date=day,
                generated_at=self.clock.now(),
                **counters
            )],
            update_conflicts=True,
            unique_fields=['organization', 'date'],
            update_fields=COUNTER_FIELDS + ['generated_at'],
        )
        statistic = Statistic.objects.get(organization_id=tenant.organization_id, date=day)
        logger.info(
            f"Statistiques générées pour l'organisme {tenant.organization_id} au {day}: "
            f"{statistic.completion_percentage}% de complétion"
        )
        return statistic

    def current(self, tenant):
        """Instantané du jour, généré s'il n'existe pas encore"""
        statistic = scoped(Statistic.objects.all(), tenant).filter(date=self.clock.today()).first()
        return statistic or self.generate(tenant)

    def period(self, tenant, start, end):
        start = _parse_day(start, 'start_date')
        end = _parse_day(end, 'end_date')
        if start > end:
            raise ValidationError(details={'start_date': ["La date de début doit précéder la date de fin"]})
        return scoped(Statistic.objects.all(), tenant).filter(date__range=(start, end)).order_by('date')

    def progress(self, tenant, days=30):
        """
        Série des instantanés sur les ``days`` derniers jours et évolution du
        taux de complétion entre le premier et le dernier
        """
        try:
            days = int(days)
        except (TypeError, ValueError):
            raise ValidationError(details={'days': ["Le nombre de jours doit être un entier"]})
        if days < 1:
            raise ValidationError(details={'days': ["Le nombre de jours doit être positif"]})

        today = self.clock.today()
        series = list(self.period(tenant, today - timedelta(days=days - 1), today))
        evolution = Decimal('0')
        if len(series) > 1:
            evolution = series[-1].completion_percentage - series[0].completion_percentage
        return {
            'days': days,
            'series': series,
            'evolution': float(evolution),
        }

    def dashboard(self, tenant):
        """Vue d'ensemble pour l'écran d'accueil qualité"""
        now = self.clock.now()
        documents = scoped(Document.objects.all(), tenant)
        recent = documents.filter(created_at__gte=now - timedelta(days=RECENT_DOCUMENTS_DAYS))
        document_counts = self.document_counts(tenant)

        return {
            'indicators': self.indicators.list(tenant)['summary'],
            'documents': {
                'total': document_counts['total'],
                'procedures': document_counts['procedures'],
                'models': document_counts['models'],
                'evidences': document_counts['evidences'],
                'recentlyAdded': recent.count(),
                'recent': list(recent.order_by('-created_at')[:RECENT_DOCUMENTS_LIMIT]),
            },
            'actions': self.actions.counts(tenant),
            'tasks': self.tasks.statistics(tenant),
            'task_categories': list(self.tasks.list_categories(tenant)),
            'next_audit': self.audits.countdown(tenant),
            'statistics': self.current(tenant),
        }
