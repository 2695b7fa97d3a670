from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings

from documentation.completion import CompletionPolicy
from documentation.models import Document, DocumentIndicator
from documentation.services import DocumentAssociationStore
from indicateurs.bootstrap import InitializationBootstrap
from indicateurs.models import Indicator, IndicatorStatus
from parametre.models import QualitySettings
from shared.exceptions import NotFound, StorageError, ValidationError
from shared.storage import FileStore
from .helpers import (
    FailingDeleteStorage, FailingSaveStorage, make_clock, make_org, memory_file_store, tenant_for
)


class CompletionPolicyTests(TestCase):

    def test_mapping(self):
        policy = CompletionPolicy()
        cases = [
            ({'procedure': 0, 'model': 0, 'evidence': 0}, (IndicatorStatus.NOT_STARTED, 0)),
            ({'procedure': 0, 'model': 0, 'evidence': 2}, (IndicatorStatus.IN_PROGRESS, 50)),
            ({'procedure': 1, 'model': 0, 'evidence': 0}, (IndicatorStatus.IN_PROGRESS, 50)),
            ({'procedure': 0, 'model': 1, 'evidence': 1}, (IndicatorStatus.COMPLETED, 100)),
        ]
        for counts, expected in cases:
            with self.subTest(counts=counts):
                self.assertEqual(policy.evaluate(counts), expected)

    def test_custom_weights(self):
        policy = CompletionPolicy(evidence_weight=70, reference_weight=30)
        self.assertEqual(policy.evaluate({'evidence': 1})[1], 70)
        self.assertEqual(policy.evaluate({'procedure': 1})[1], 30)

    def test_weights_must_sum_to_100(self):
        with self.assertRaises(ValueError):
            CompletionPolicy(evidence_weight=60, reference_weight=60)


class DocumentAssociationStoreTests(TestCase):

    def setUp(self):
        self.clock = make_clock()
        self.organization = make_org()
        self.tenant = tenant_for(self.organization)
        InitializationBootstrap(clock=self.clock).initialize(self.tenant)
        self.file_store = memory_file_store()
        self.store = DocumentAssociationStore(file_store=self.file_store, clock=self.clock)
        self.indicator = Indicator.objects.get(organization=self.organization, number=1)

    def _create(self, doc_type, indicators=None, name='Procédure accueil'):
        return self.store.create(
            self.tenant,
            {'name': name, 'type': doc_type, 'file_url': 'https://docs.example.com/accueil.pdf'},
            [str(i.uuid) for i in (indicators or [self.indicator])],
        )

    def _refresh(self):
        self.indicator.refresh_from_db()
        return self.indicator

    def test_create_links_document_and_recomputes_indicator(self):
        document = self._create('procedure')

        self.assertEqual(document.file_type, 'pdf')
        indicator = self._refresh()
        self.assertEqual(indicator.status, IndicatorStatus.IN_PROGRESS)
        self.assertEqual(indicator.completion_rate, 50)
        self.assertEqual(indicator.document_counts, {'procedure': 1, 'model': 0, 'evidence': 0})
        self.assertTrue(indicator.has_documents)

    def test_evidence_and_reference_complete_the_indicator(self):
        self._create('model')
        self._create('evidence', name='Feuille d\'émargement')

        indicator = self._refresh()
        self.assertEqual(indicator.status, IndicatorStatus.COMPLETED)
        self.assertEqual(indicator.completion_rate, 100)

    def test_organization_weights_are_applied(self):
        QualitySettings.objects.update_or_create(
            organization=self.organization,
            defaults={'evidence_weight': 70, 'reference_weight': 30},
        )
        self._create('evidence')
        self.assertEqual(self._refresh().completion_rate, 70)

    def test_attach_then_detach_restores_previous_state(self):
        self._create('procedure')
        before = self._refresh()
        previous = (before.status, before.completion_rate, dict(before.document_counts))

        other = Indicator.objects.get(organization=self.organization, number=2)
        evidence = self._create('evidence', indicators=[other])
        self.store.attach(self.tenant, evidence.uuid, [self.indicator.uuid])
        self.assertEqual(self._refresh().status, IndicatorStatus.COMPLETED)

        self.store.detach(self.tenant, evidence.uuid, [self.indicator.uuid])

        after = self._refresh()
        self.assertEqual((after.status, after.completion_rate, after.document_counts), previous)
        self.assertEqual(
            list(DocumentIndicator.objects.filter(document=evidence).values_list('indicator_id', flat=True)),
            [other.uuid]
        )

    def test_associate_replaces_links(self):
        document = self._create('evidence')
        other = Indicator.objects.get(organization=self.organization, number=2)

        self.store.associate(self.tenant, document.uuid, [other.uuid])

        self.assertEqual(self._refresh().status, IndicatorStatus.NOT_STARTED)
        other.refresh_from_db()
        self.assertEqual(other.completion_rate, 50)

    def test_indicator_of_another_organization_is_rejected(self):
        other_org = make_org('organisme-b')
        InitializationBootstrap(clock=self.clock).initialize(tenant_for(other_org))
        foreign = Indicator.objects.get(organization=other_org, number=1)

        with self.assertRaises(ValidationError) as ctx:
            self.store.create(
                self.tenant,
                {'name': 'Preuve', 'type': 'evidence', 'file_url': 'https://docs.example.com/p.pdf'},
                [str(foreign.uuid)],
            )

        self.assertIn('indicator_ids', ctx.exception.details)
        self.assertFalse(Document.objects.exists())

    def test_inactive_documents_still_count(self):
        document = self._create('evidence')
        self.store.update(self.tenant, document.uuid, {'status': 'archived'})

        indicator = self._refresh()
        self.assertEqual(indicator.document_counts['evidence'], 1)
        self.assertEqual(indicator.completion_rate, 50)

    def test_update_type_recomputes_linked_indicators(self):
        document = self._create('procedure')
        self._create('procedure', name='Autre procédure')

        self.store.update(self.tenant, document.uuid, {'type': 'evidence'})

        indicator = self._refresh()
        self.assertEqual(indicator.status, IndicatorStatus.COMPLETED)

    def test_delete_recomputes_indicators(self):
        document = self._create('evidence')

        self.store.delete(self.tenant, document.uuid)

        indicator = self._refresh()
        self.assertEqual(indicator.status, IndicatorStatus.NOT_STARTED)
        self.assertEqual(indicator.completion_rate, 0)
        self.assertFalse(indicator.has_documents)

    def test_upload_stores_file(self):
        uploaded = SimpleUploadedFile('charte.pdf', b'%PDF-1.4 contenu', content_type='application/pdf')

        document = self.store.upload(self.tenant, uploaded, {'type': 'procedure'}, [self.indicator.uuid])

        self.assertEqual(document.name, 'charte')
        self.assertEqual(document.file_type, 'pdf')
        self.assertEqual(document.size_bytes, len(b'%PDF-1.4 contenu'))
        self.assertTrue(self.file_store.storage.exists(document.file_reference))
        self.assertEqual(self._refresh().completion_rate, 50)

    def test_upload_rejects_forbidden_extension(self):
        uploaded = SimpleUploadedFile('script.exe', b'MZ')
        with self.assertRaises(ValidationError):
            self.store.upload(self.tenant, uploaded, {'type': 'procedure'}, [self.indicator.uuid])

    @override_settings(QUALITE={'MAX_UPLOAD_SIZE': 4, 'ALLOWED_UPLOAD_EXTENSIONS': ['pdf']})
    def test_upload_rejects_oversized_file(self):
        uploaded = SimpleUploadedFile('gros.pdf', b'0123456789')
        with self.assertRaises(ValidationError):
            self.store.upload(self.tenant, uploaded, {'type': 'procedure'}, [self.indicator.uuid])

    def test_upload_storage_failure_propagates(self):
        store = DocumentAssociationStore(file_store=FileStore(storage=FailingSaveStorage()), clock=self.clock)
        uploaded = SimpleUploadedFile('charte.pdf', b'%PDF')

        with self.assertRaises(StorageError):
            store.upload(self.tenant, uploaded, {'type': 'procedure'}, [self.indicator.uuid])
        self.assertFalse(Document.objects.exists())

    def test_upload_without_indicators_stores_nothing(self):
        uploaded = SimpleUploadedFile('charte.pdf', b'%PDF')
        with self.assertRaises(ValidationError):
            self.store.upload(self.tenant, uploaded, {'type': 'procedure'}, [])
        self.assertEqual(self.file_store.storage.listdir('')[1], [])

    def test_delete_succeeds_when_file_deletion_fails(self):
        store = DocumentAssociationStore(file_store=FileStore(storage=FailingDeleteStorage()), clock=self.clock)
        uploaded = SimpleUploadedFile('charte.pdf', b'%PDF')
        document = store.upload(self.tenant, uploaded, {'type': 'evidence'}, [self.indicator.uuid])

        store.delete(self.tenant, document.uuid)

        self.assertFalse(Document.objects.filter(uuid=document.uuid).exists())
        self.assertEqual(self._refresh().completion_rate, 0)

    def test_download_returns_expiring_url(self):
        document = self._create('procedure')

        result = self.store.download(self.tenant, document.uuid)

        self.assertEqual(result['url'], 'https://docs.example.com/accueil.pdf')
        self.assertGreater(result['expires_at'], self.clock.now())

    def test_list_is_paginated_and_scoped(self):
        for index in range(3):
            self._create('procedure', name=f'Procédure {index}')
        other_org = make_org('organisme-b')
        other_tenant = tenant_for(other_org)

        page = self.store.list(self.tenant, limit=2)

        self.assertEqual(page['totalItems'], 3)
        self.assertEqual(page['totalPages'], 2)
        self.assertEqual(len(page['items']), 2)
        self.assertEqual(self.store.list(other_tenant)['totalItems'], 0)

    def test_get_from_another_organization_is_not_found(self):
        document = self._create('procedure')
        with self.assertRaises(NotFound):
            self.store.get(tenant_for(make_org('organisme-b')), document.uuid)
