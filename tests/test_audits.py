from datetime import date

from django.test import TestCase

from audits.models import Audit, AuditStatus
from audits.serializers import AuditSerializer
from audits.services import AuditScheduler
from shared.exceptions import InvalidOperation, NotFound, ValidationError
from .helpers import make_clock, make_org, tenant_for


class AuditSchedulerTests(TestCase):

    def setUp(self):
        self.clock = make_clock()
        self.organization = make_org()
        self.tenant = tenant_for(self.organization)
        self.scheduler = AuditScheduler(clock=self.clock)

    def _schedule(self, day, audit_type='surveillance'):
        return self.scheduler.create(self.tenant, {
            'type': audit_type,
            'date': day.isoformat(),
            'auditor_name': 'Cabinet Certif',
        })

    def _complete(self, audit, **overrides):
        outcome = {'completion_date': audit.date.isoformat(), 'result': 'passed', 'score': 92}
        outcome.update(overrides)
        return self.scheduler.complete(self.tenant, audit.uuid, outcome)

    def test_next_returns_earliest_upcoming_scheduled_audit(self):
        past = self._schedule(date(2024, 1, 1), 'initial')
        self._complete(past)
        self._schedule(date(2025, 6, 1))
        march = self._schedule(date(2025, 3, 1))

        upcoming = self.scheduler.next(self.tenant)

        self.assertEqual(upcoming.pk, march.pk)
        self.assertEqual(self.scheduler.days_remaining(upcoming), (date(2025, 3, 1) - self.clock.today()).days)
        self.assertEqual(self.scheduler.days_remaining(upcoming), 45)

    def test_next_without_upcoming_audit(self):
        with self.assertRaises(NotFound):
            self.scheduler.next(self.tenant)

    def test_next_ignores_other_organizations(self):
        other = tenant_for(make_org('organisme-b'))
        AuditScheduler(clock=self.clock).create(other, {
            'type': 'initial', 'date': '2025-02-01', 'auditor_name': 'Autre'
        })
        with self.assertRaises(NotFound):
            self.scheduler.next(self.tenant)

    def test_create_requires_auditor_name(self):
        with self.assertRaises(ValidationError):
            self.scheduler.create(self.tenant, {'type': 'initial', 'date': '2025-03-01'})

    def test_complete_stamps_result(self):
        audit = self._schedule(date(2025, 1, 10))

        completed = self._complete(audit, observations=['Affichage à revoir'], report_reference='RAP-2025-01')

        self.assertEqual(completed.status, AuditStatus.COMPLETED)
        self.assertEqual(completed.completed_at, self.clock.now())
        self.assertEqual(completed.observations, ['Affichage à revoir'])

    def test_complete_twice_is_rejected(self):
        audit = self._schedule(date(2025, 1, 10))
        self._complete(audit)

        with self.assertRaises(InvalidOperation):
            self._complete(audit)

    def test_complete_rejects_out_of_range_score(self):
        audit = self._schedule(date(2025, 1, 10))
        with self.assertRaises(ValidationError):
            self._complete(audit, score=120)

    def test_completed_audit_cannot_be_updated_or_deleted(self):
        audit = self._schedule(date(2025, 1, 10))
        self._complete(audit)

        with self.assertRaises(InvalidOperation):
            self.scheduler.update(self.tenant, audit.uuid, {'location': 'Lyon'})
        with self.assertRaises(InvalidOperation):
            self.scheduler.delete(self.tenant, audit.uuid)

    def test_history_lists_completed_audits_newest_first(self):
        for day in (date(2023, 5, 1), date(2024, 5, 1)):
            self._complete(self._schedule(day))
        self._schedule(date(2025, 5, 1))

        page = self.scheduler.history(self.tenant)

        self.assertEqual([a.date for a in page['items']], [date(2024, 5, 1), date(2023, 5, 1)])
        self.assertEqual(self.scheduler.history(self.tenant, year=2023)['totalItems'], 1)

    def test_countdown(self):
        self._schedule(date(2025, 3, 1))

        countdown = self.scheduler.countdown(self.tenant)

        self.assertEqual(countdown['days'], 45)
        self.assertFalse(countdown['is_overdue'])
        self.assertEqual(countdown['formatted_date'], '01/03/2025')

    def test_countdown_flags_overdue_scheduled_audit(self):
        self._schedule(date(2025, 1, 5))

        countdown = self.scheduler.countdown(self.tenant)

        self.assertEqual(countdown['days'], -10)
        self.assertTrue(countdown['is_overdue'])

    def test_countdown_without_audit(self):
        self.assertIsNone(self.scheduler.countdown(self.tenant))


class AuditSerializerTests(TestCase):

    def test_result_hidden_until_completed(self):
        organization = make_org()
        audit = Audit.objects.create(
            organization=organization, type='initial', date=date(2025, 3, 1),
            auditor_name='Cabinet', result='passed', score=80
        )

        data = AuditSerializer(audit, context={'today': date(2025, 2, 27)}).data

        self.assertNotIn('result', data)
        self.assertNotIn('score', data)
        self.assertEqual(data['days_remaining'], 2)

        audit.status = AuditStatus.COMPLETED
        data = AuditSerializer(audit, context={'today': date(2025, 2, 27)}).data
        self.assertEqual(data['result'], 'passed')
        self.assertEqual(data['score'], 80)
