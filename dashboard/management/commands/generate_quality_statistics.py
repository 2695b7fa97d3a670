from django.core.management.base import BaseCommand, CommandError
from django.db.models import Q
from django.utils.dateparse import parse_date
import logging
import uuid

from parametre.models import Organization
from shared.exceptions import QualiteError
from shared.tenancy import TenantContext
from dashboard.services import StatisticsAggregator

logger = logging.getLogger(__name__)


def _uuid_list(value):
    try:
        return [uuid.UUID(value)]
    except ValueError:
        return []


class Command(BaseCommand):
    help = "Génère (ou met à jour) l'instantané statistique quotidien des organismes actifs"

    def add_arguments(self, parser):
        parser.add_argument('--date', help='Date de l\'instantané (AAAA-MM-JJ), aujourd\'hui par défaut')
        parser.add_argument('--organization', help="Slug ou identifiant d'un organisme")

    def handle(self, *args, **options):
        day = None
        if options['date']:
            try:
                day = parse_date(options['date'])
            except ValueError:
                day = None
            if day is None:
                raise CommandError(f"Date invalide: {options['date']}")

        organizations = Organization.objects.filter(is_active=True)
        if options['organization']:
            value = options['organization']
            organizations = organizations.filter(Q(slug=value) | Q(pk__in=_uuid_list(value)))
            if not organizations.exists():
                raise CommandError(f"Organisme introuvable: {value}")

        aggregator = StatisticsAggregator()
        generated = 0
        failed = 0

        for organization in organizations:
            tenant = TenantContext(organization_id=organization.pk)
            try:
                statistic = aggregator.generate(tenant, day)
            except QualiteError as e:
                failed += 1
                logger.error(f"Statistiques non générées pour {organization.name}: {e.message}")
                self.stdout.write(self.style.ERROR(f"✗ {organization.name}: {e.message}"))
                continue
            generated += 1
            self.stdout.write(self.style.SUCCESS(
                f"✓ {organization.name}: {statistic.completion_percentage}% au {statistic.date:%d/%m/%Y}"
            ))

        self.stdout.write(self.style.SUCCESS(
            f'\nTerminé: {generated} instantané(s) généré(s), {failed} échec(s)'
        ))

