from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from audits.services import AuditScheduler
from dashboard.models import Statistic
from dashboard.services import StatisticsAggregator
from documentation.services import DocumentAssociationStore
from indicateurs.bootstrap import InitializationBootstrap
from indicateurs.models import Indicator
from pac.services import ActionBoard
from parametre.models import Organization
from shared.exceptions import ValidationError
from .helpers import make_clock, make_org, memory_file_store, tenant_for


class StatisticsAggregatorTests(TestCase):

    def setUp(self):
        self.clock = make_clock()
        self.organization = make_org()
        self.tenant = tenant_for(self.organization)
        InitializationBootstrap(clock=self.clock).initialize(self.tenant)
        self.aggregator = StatisticsAggregator(clock=self.clock)
        self.documents = DocumentAssociationStore(file_store=memory_file_store(), clock=self.clock)
        self.indicator = Indicator.objects.get(organization=self.organization, number=1)

    def _add_document(self, doc_type, name='Procédure accueil'):
        return self.documents.create(
            self.tenant,
            {'name': name, 'type': doc_type, 'file_url': 'https://docs.example.com/accueil.pdf'},
            [str(self.indicator.uuid)],
        )

    def _set_rates(self, rates):
        """Seuls les indicateurs listés restent applicables"""
        Indicator.objects.filter(organization=self.organization).exclude(number__in=rates).update(is_applicable=False)
        for number, rate in rates.items():
            Indicator.objects.filter(organization=self.organization, number=number).update(completion_rate=rate)

    def test_collect_counters(self):
        self._add_document('procedure')
        self._add_document('evidence', name='Émargement')
        ActionBoard(clock=self.clock).create(self.tenant, {
            'category': 'Veille', 'title': 'Abonnement veille', 'due_date': '2025-01-01'
        })

        counters = self.aggregator.collect(self.tenant)

        self.assertEqual(counters['indicators_total'], 32)
        self.assertEqual(counters['indicators_completed'], 1)
        self.assertEqual(counters['documents_total'], 2)
        self.assertEqual(counters['documents_procedures'], 1)
        self.assertEqual(counters['documents_evidences'], 1)
        self.assertEqual(counters['actions_total'], 1)
        self.assertEqual(counters['actions_pending'], 1)
        self.assertEqual(counters['actions_overdue'], 1)
        self.assertEqual(counters['tasks_total'], 0)

    def test_generate_is_idempotent_per_day(self):
        self._set_rates({1: 100, 2: 50, 3: 0, 4: 0})
        self.aggregator.generate(self.tenant)
        self._add_document('model')
        self.aggregator.generate(self.tenant)

        statistic = self.aggregator.generate(self.tenant)

        self.assertEqual(Statistic.objects.filter(organization=self.organization).count(), 1)
        self.assertEqual(statistic.date, self.clock.today())
        self.assertEqual(statistic.documents_total, 1)
        self.assertEqual(statistic.documents_models, 1)

    def test_completion_percentage_ignores_non_applicable_indicators(self):
        self._set_rates({1: 100, 2: 50, 3: 0, 4: 0})

        statistic = self.aggregator.generate(self.tenant)

        self.assertEqual(statistic.completion_percentage, Decimal('37.5'))
        self.assertEqual(statistic.indicators_total, 32)

    def test_generate_for_explicit_date(self):
        statistic = self.aggregator.generate(self.tenant, '2025-01-10')
        self.assertEqual(statistic.date, date(2025, 1, 10))

    def test_generate_rejects_invalid_date(self):
        with self.assertRaises(ValidationError):
            self.aggregator.generate(self.tenant, '2025-02-30')

    def test_current_generates_missing_snapshot(self):
        self.assertFalse(Statistic.objects.exists())

        statistic = self.aggregator.current(self.tenant)

        self.assertEqual(statistic.date, self.clock.today())
        self.assertEqual(self.aggregator.current(self.tenant).pk, statistic.pk)

    def test_period_rejects_inverted_range(self):
        with self.assertRaises(ValidationError):
            self.aggregator.period(self.tenant, '2025-01-10', '2025-01-01')

    def test_period_lists_snapshots_in_order(self):
        for day in ('2025-01-12', '2025-01-10', '2025-01-14'):
            self.aggregator.generate(self.tenant, day)

        days = [s.date for s in self.aggregator.period(self.tenant, '2025-01-10', '2025-01-13')]

        self.assertEqual(days, [date(2025, 1, 10), date(2025, 1, 12)])

    def test_progress_reports_evolution(self):
        self._set_rates({1: 0, 2: 0})
        self.aggregator.generate(self.tenant, self.clock.today() - timedelta(days=5))
        Indicator.objects.filter(organization=self.organization, number=1).update(completion_rate=50)
        self.aggregator.generate(self.tenant)

        progress = self.aggregator.progress(self.tenant, days=30)

        self.assertEqual(len(progress['series']), 2)
        self.assertEqual(progress['evolution'], 25.0)

    def test_progress_rejects_non_positive_window(self):
        with self.assertRaises(ValidationError):
            self.aggregator.progress(self.tenant, days=0)

    def test_dashboard_overview(self):
        self._add_document('procedure')
        AuditScheduler(clock=self.clock).create(self.tenant, {
            'type': 'initial', 'date': '2025-02-14', 'auditor_name': 'Cabinet Certif'
        })

        overview = self.aggregator.dashboard(self.tenant)

        self.assertEqual(overview['indicators']['total'], 32)
        self.assertEqual(overview['documents']['procedures'], 1)
        self.assertEqual(overview['next_audit']['days'], 30)
        self.assertEqual(overview['statistics'].date, self.clock.today())

    def test_statistics_are_isolated_per_organization(self):
        other = tenant_for(make_org('organisme-b'))
        self._add_document('procedure')

        statistic = self.aggregator.generate(other)

        self.assertEqual(statistic.documents_total, 0)
        self.assertEqual(statistic.indicators_total, 0)


class GenerateQualityStatisticsCommandTests(TestCase):

    def setUp(self):
        self.first = make_org()
        self.second = make_org('organisme-b')
        Organization.objects.create(slug='organisme-inactif', name='Organisme inactif', is_active=False)

    def test_generates_one_snapshot_per_active_organization(self):
        out = StringIO()

        call_command('generate_quality_statistics', '--date', '2025-01-15', stdout=out)

        self.assertEqual(Statistic.objects.filter(date=date(2025, 1, 15)).count(), 2)
        self.assertIn('2 instantané(s)', out.getvalue())

    def test_runs_twice_without_duplicates(self):
        call_command('generate_quality_statistics', '--date', '2025-01-15', stdout=StringIO())
        call_command('generate_quality_statistics', '--date', '2025-01-15', stdout=StringIO())

        self.assertEqual(Statistic.objects.count(), 2)

    def test_single_organization_by_slug(self):
        call_command('generate_quality_statistics', '--organization', 'organisme-b', stdout=StringIO())

        self.assertEqual(list(Statistic.objects.values_list('organization__slug', flat=True)), ['organisme-b'])

    def test_unknown_organization(self):
        with self.assertRaises(CommandError):
            call_command('generate_quality_statistics', '--organization', 'inconnu', stdout=StringIO())

    def test_invalid_date(self):
        with self.assertRaises(CommandError):
            call_command('generate_quality_statistics', '--date', '15/01/2025', stdout=StringIO())
