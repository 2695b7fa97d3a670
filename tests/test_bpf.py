from datetime import timedelta
from io import BytesIO

from django.test import SimpleTestCase, TestCase
from openpyxl import load_workbook

from bpf.models import BpfStatus
from bpf.services import BPFReportWorkflow, summarize_bpf
from shared.exceptions import Conflict, InvalidOperation, NotFound, ValidationError
from .helpers import make_clock, make_org, memory_file_store, tenant_for

BPF_DATA = {
    'training': {'totalSessions': 12, 'totalParticipants': '148'},
    'financial': {'totalRevenue': '125 400,50'},
}
SUBMISSION = {'submitted_to': 'DREETS Occitanie', 'submission_method': 'Plateforme Mes Démarches'}


class BpfWorkflowTests(TestCase):

    def setUp(self):
        self.clock = make_clock()
        self.organization = make_org()
        self.tenant = tenant_for(self.organization)
        self.file_store = memory_file_store()
        self.workflow = BPFReportWorkflow(file_store=self.file_store, clock=self.clock)

    def test_create_draft(self):
        bpf = self.workflow.create(self.tenant, 2024, BPF_DATA)

        self.assertEqual(bpf.status, BpfStatus.DRAFT)
        self.assertEqual(bpf.data, BPF_DATA)

    def test_duplicate_year_is_a_conflict(self):
        self.workflow.create(self.tenant, 2024, BPF_DATA)

        with self.assertRaises(Conflict) as ctx:
            self.workflow.create(self.tenant, 2024, {})

        self.assertEqual(ctx.exception.code, 'DUPLICATE_ENTRY')

    def test_same_year_allowed_in_another_organization(self):
        self.workflow.create(self.tenant, 2024, BPF_DATA)
        other = tenant_for(make_org('organisme-b'))

        bpf = self.workflow.create(other, 2024, BPF_DATA)

        self.assertEqual(bpf.organization_id, other.organization_id)

    def test_year_out_of_range(self):
        with self.assertRaises(ValidationError):
            self.workflow.create(self.tenant, 2019, BPF_DATA)

    def test_submit_freezes_the_report(self):
        bpf = self.workflow.create(self.tenant, 2024, BPF_DATA)

        submitted = self.workflow.submit(self.tenant, bpf.uuid, SUBMISSION)

        self.assertEqual(submitted.status, BpfStatus.SUBMITTED)
        self.assertEqual(submitted.submitted_date, self.clock.now())
        self.assertEqual(submitted.submitted_to, 'DREETS Occitanie')
        with self.assertRaises(InvalidOperation):
            self.workflow.submit(self.tenant, bpf.uuid, SUBMISSION)
        with self.assertRaises(InvalidOperation):
            self.workflow.update(self.tenant, bpf.uuid, {'training': {}})
        with self.assertRaises(InvalidOperation):
            self.workflow.delete(self.tenant, bpf.uuid)

    def test_submit_requires_recipient(self):
        bpf = self.workflow.create(self.tenant, 2024, BPF_DATA)
        with self.assertRaises(ValidationError):
            self.workflow.submit(self.tenant, bpf.uuid, {'submission_method': 'Courrier'})

    def test_update_draft(self):
        bpf = self.workflow.create(self.tenant, 2024, BPF_DATA)

        updated = self.workflow.update(self.tenant, bpf.uuid, {'training': {'totalSessions': 3}}, notes='Relu')

        self.assertEqual(updated.data, {'training': {'totalSessions': 3}})
        self.assertEqual(updated.notes, 'Relu')

    def test_other_tenant_cannot_read(self):
        bpf = self.workflow.create(self.tenant, 2024, BPF_DATA)
        other = tenant_for(make_org('organisme-b'))

        with self.assertRaises(NotFound):
            self.workflow.get(other, bpf.uuid)

    def test_archives_only_list_submitted_reports(self):
        for year in (2022, 2023, 2024):
            bpf = self.workflow.create(self.tenant, year, BPF_DATA)
            if year != 2024:
                self.workflow.submit(self.tenant, bpf.uuid, SUBMISSION)

        archives = self.workflow.archives(self.tenant)

        self.assertEqual([entry['bpf'].year for entry in archives], [2023, 2022])
        self.assertEqual(archives[0]['summary'], {
            'totalSessions': 12,
            'totalParticipants': 148,
            'totalRevenue': 125400.5,
        })
        self.assertEqual(len(self.workflow.archives(self.tenant, from_year=2023)), 1)

    def test_excel_export_is_stored(self):
        bpf = self.workflow.create(self.tenant, 2024, BPF_DATA)

        export = self.workflow.export(self.tenant, bpf.uuid, 'excel')

        self.assertTrue(export['reference'].startswith('bpf/organisme-a/BPF_2024_20250115'))
        self.assertTrue(export['reference'].endswith('.xlsx'))
        self.assertEqual(export['url'], f"/medias/{export['reference']}")
        self.assertEqual(export['expires_at'], self.clock.now() + timedelta(seconds=3600))

        with self.file_store.storage.open(export['reference'], 'rb') as handle:
            workbook = load_workbook(BytesIO(handle.read()))
        sheet = workbook.active
        self.assertEqual(sheet.title, 'BPF 2024')
        self.assertEqual(sheet['B4'].value, 'RUBRIQUE')
        self.assertIn('totalSessions', [sheet[f'B{row}'].value for row in range(5, sheet.max_row + 1)])

    def test_new_export_replaces_previous_file(self):
        bpf = self.workflow.create(self.tenant, 2024, BPF_DATA)
        first = self.workflow.export(self.tenant, bpf.uuid, 'excel')
        self.clock.advance(timedelta(minutes=5))

        second = self.workflow.export(self.tenant, bpf.uuid, 'excel')

        bpf.refresh_from_db()
        self.assertEqual(bpf.export_reference, second['reference'])
        self.assertFalse(self.file_store.storage.exists(first['reference']))

    def test_pdf_export_without_renderer(self):
        bpf = self.workflow.create(self.tenant, 2024, BPF_DATA)

        with self.assertRaises(InvalidOperation) as ctx:
            self.workflow.export(self.tenant, bpf.uuid, 'pdf')

        self.assertEqual(ctx.exception.code, 'EXPORT_UNAVAILABLE')

    def test_pdf_export_with_renderer(self):
        workflow = BPFReportWorkflow(
            file_store=self.file_store,
            clock=self.clock,
            pdf_renderer=lambda bpf, name: b'%PDF-1.4 ' + name.encode(),
        )
        bpf = workflow.create(self.tenant, 2024, BPF_DATA)

        export = workflow.export(self.tenant, bpf.uuid, 'pdf')

        self.assertTrue(export['reference'].endswith('.pdf'))

    def test_unknown_export_format(self):
        bpf = self.workflow.create(self.tenant, 2024, BPF_DATA)
        with self.assertRaises(ValidationError):
            self.workflow.export(self.tenant, bpf.uuid, 'csv')


class SummarizeBpfTests(SimpleTestCase):

    def test_missing_or_invalid_values_count_as_zero(self):
        class Report:
            data = {'training': {'totalSessions': 'beaucoup'}, 'financial': {'totalRevenue': 'NaN'}}

        self.assertEqual(summarize_bpf(Report()), {
            'totalSessions': 0,
            'totalParticipants': 0,
            'totalRevenue': 0,
        })
