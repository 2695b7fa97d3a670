from datetime import timedelta

from django.test import TestCase

from indicateurs.bootstrap import InitializationBootstrap
from indicateurs.models import Indicator, IndicatorStatus
from indicateurs.services import IndicatorCatalog, summarize
from parametre.models import MembershipRole
from shared.exceptions import NotFound, ValidationError
from .helpers import make_clock, make_org, tenant_for


class IndicatorCatalogTests(TestCase):

    def setUp(self):
        self.clock = make_clock()
        self.organization = make_org()
        self.tenant = tenant_for(self.organization)
        InitializationBootstrap(clock=self.clock).initialize(self.tenant)
        self.catalog = IndicatorCatalog(clock=self.clock)
        self.first = Indicator.objects.get(organization=self.organization, number=1)

    def test_list_returns_summary_computed_on_read(self):
        Indicator.objects.filter(organization=self.organization, number__in=[1, 2]).update(
            status=IndicatorStatus.COMPLETED, completion_rate=100
        )
        Indicator.objects.filter(organization=self.organization, number=3).update(is_applicable=False)

        summary = self.catalog.list(self.tenant)['summary']

        self.assertEqual(summary['total'], 32)
        self.assertEqual(summary['completed'], 2)
        self.assertEqual(summary['notStarted'], 30)
        self.assertEqual(summary['notApplicable'], 1)
        # 200 / 31 indicateurs applicables
        self.assertEqual(summary['overallCompletionRate'], 6.45)

    def test_list_filters_by_status(self):
        self.catalog.update(self.tenant, self.first.uuid, {'status': 'in_progress'})

        result = self.catalog.list(self.tenant, status='in_progress')

        self.assertEqual([i.number for i in result['indicators']], [1])

    def test_list_rejects_unknown_status(self):
        with self.assertRaises(ValidationError):
            self.catalog.list(self.tenant, status='done')

    def test_update_stamps_last_updated(self):
        self.clock.advance(timedelta(hours=2))

        indicator = self.catalog.update(self.tenant, self.first.uuid, {'notes': 'Revue annuelle', 'status': 'completed'})

        self.assertEqual(indicator.notes, 'Revue annuelle')
        self.assertEqual(indicator.status, IndicatorStatus.COMPLETED)
        self.assertEqual(indicator.last_updated, self.clock.now())

    def test_status_can_move_backwards(self):
        self.catalog.update(self.tenant, self.first.uuid, {'status': 'completed'})
        indicator = self.catalog.update(self.tenant, self.first.uuid, {'status': 'not_started'})
        self.assertEqual(indicator.status, IndicatorStatus.NOT_STARTED)

    def test_update_rejects_derived_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            self.catalog.update(self.tenant, self.first.uuid, {'completion_rate': 100})

        self.assertIn('completion_rate', ctx.exception.details)
        self.first.refresh_from_db()
        self.assertEqual(self.first.completion_rate, 0)

    def test_update_rejects_unknown_status(self):
        with self.assertRaises(ValidationError):
            self.catalog.update(self.tenant, self.first.uuid, {'status': 'finished'})

    def test_batch_update_applies_items_independently(self):
        second = Indicator.objects.get(organization=self.organization, number=2)

        result = self.catalog.batch_update(self.tenant, [
            {'id': str(self.first.uuid), 'status': 'in_progress'},
            {'id': str(second.uuid), 'status': 'bogus'},
        ])

        self.assertEqual([i.number for i in result['updated']], [1])
        self.assertEqual(len(result['errors']), 1)
        self.assertEqual(result['errors'][0]['id'], str(second.uuid))
        self.assertEqual(result['errors'][0]['code'], 'INVALID_INPUT')

    def test_get_from_another_organization_is_not_found(self):
        other_tenant = tenant_for(make_org('organisme-b'))

        with self.assertRaises(NotFound):
            self.catalog.get(other_tenant, self.first.uuid)

    def test_get_with_malformed_id_is_not_found(self):
        with self.assertRaises(NotFound):
            self.catalog.get(self.tenant, 'pas-un-uuid')

    def test_external_collaborator_only_sees_granted_indicators(self):
        external = tenant_for(
            self.organization,
            role=MembershipRole.EXTERNAL_COLLABORATOR,
            indicator_access=[self.first.uuid],
        )

        result = self.catalog.list(external)

        self.assertEqual([i.number for i in result['indicators']], [1])
        second = Indicator.objects.get(organization=self.organization, number=2)
        with self.assertRaises(NotFound):
            self.catalog.get(external, second.uuid)

    def test_categories_are_unique_and_ordered(self):
        categories = self.catalog.categories(self.tenant)
        self.assertEqual(len(categories), len(set(categories)))
        self.assertTrue(categories)


class SummarizeTests(TestCase):

    def test_empty_catalog(self):
        self.assertEqual(summarize([])['overallCompletionRate'], 0)
