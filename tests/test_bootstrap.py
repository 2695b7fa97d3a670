from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from indicateurs.bootstrap import InitializationBootstrap
from indicateurs.models import Indicator, IndicatorStatus
from pac.models import ActionCategory
from shared.exceptions import Conflict
from .helpers import make_clock, make_org, tenant_for


class InitializationBootstrapTests(TestCase):

    def setUp(self):
        self.organization = make_org()
        self.tenant = tenant_for(self.organization)
        self.bootstrap = InitializationBootstrap(clock=make_clock())

    def test_initialize_creates_catalog_and_default_categories(self):
        result = self.bootstrap.initialize(self.tenant)

        self.assertEqual(result, {'indicators': 32, 'categories': 5})
        indicators = Indicator.objects.filter(organization=self.organization)
        self.assertEqual(indicators.count(), 32)
        self.assertEqual(sorted(indicators.values_list('number', flat=True)), list(range(1, 33)))
        self.assertFalse(indicators.exclude(status=IndicatorStatus.NOT_STARTED).exists())
        self.assertEqual(
            set(ActionCategory.objects.filter(organization=self.organization).values_list('label', flat=True)),
            {
                'Veille',
                'Amélioration Continue',
                'Plan développement de compétences',
                'Questions Handicap',
                'Gestion Des Disfonctionnements',
            }
        )

    def test_second_initialization_is_rejected(self):
        self.bootstrap.initialize(self.tenant)

        with self.assertRaises(Conflict) as ctx:
            self.bootstrap.initialize(self.tenant)

        self.assertEqual(ctx.exception.code, 'ALREADY_INITIALIZED')
        self.assertEqual(Indicator.objects.filter(organization=self.organization).count(), 32)
        self.assertEqual(ActionCategory.objects.filter(organization=self.organization).count(), 5)

    def test_organizations_are_initialized_independently(self):
        other = make_org('organisme-b')
        self.bootstrap.initialize(self.tenant)
        self.bootstrap.initialize(tenant_for(other))

        self.assertEqual(Indicator.objects.filter(organization=other).count(), 32)

    def test_status(self):
        self.assertEqual(
            self.bootstrap.status(self.tenant),
            {'initialized': False, 'indicators': 0, 'categories': 0}
        )
        self.bootstrap.initialize(self.tenant)
        self.assertEqual(
            self.bootstrap.status(self.tenant),
            {'initialized': True, 'indicators': 32, 'categories': 5}
        )


class InitQualiteCommandTests(TestCase):

    def test_initializes_all_active_organizations(self):
        make_org('organisme-a')
        make_org('organisme-b')
        out = StringIO()

        call_command('init_qualite', '--all', stdout=out)

        self.assertEqual(Indicator.objects.count(), 64)
        self.assertIn('2 organisme(s) initialisé(s)', out.getvalue())

    def test_already_initialized_organization_is_skipped(self):
        organization = make_org('organisme-a')
        InitializationBootstrap().initialize(tenant_for(organization))
        out = StringIO()

        call_command('init_qualite', '--organization', 'organisme-a', stdout=out)

        self.assertIn('Déjà initialisé', out.getvalue())
        self.assertEqual(Indicator.objects.count(), 32)
