"""
Documents qualité et leurs associations aux indicateurs

Ce service est le seul à écrire les champs calculés des indicateurs
(document_counts, completion_rate, has_documents et statut dérivé).
"""
from datetime import timedelta
from urllib.parse import urlparse
import logging
import os
import uuid

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q

from indicateurs.models import Indicator, default_document_counts
from shared.clock import get_clock
from shared.exceptions import ValidationError, validate_payload
from shared.pagination import paginate
from shared.storage import get_file_store
from shared.tenancy import get_scoped, scoped
from .completion import CompletionPolicy
from .models import Document, DocumentIndicator, DocumentSource, DocumentStatus, DocumentType
from .serializers import DocumentInputSerializer, DocumentUploadSerializer

logger = logging.getLogger(__name__)


def file_extension(name):
    return os.path.splitext(name or '')[1].lstrip('.').lower()[:20]


def validate_document_file(uploaded_file):
    """
    Vérifie l'extension et la taille d'un fichier téléversé. Retourne l'extension.
    """
    config = getattr(settings, 'QUALITE', {})
    allowed = config.get('ALLOWED_UPLOAD_EXTENSIONS', [])
    max_size = config.get('MAX_UPLOAD_SIZE', 10 * 1024 * 1024)

    if uploaded_file is None:
        raise ValidationError(details={'file': ["Aucun fichier fourni"]})

    extension = file_extension(uploaded_file.name)
    if extension not in allowed:
        raise ValidationError(
            details={'file': [f"Type de fichier non autorisé. Formats acceptés: {', '.join(allowed)}"]}
        )
    if uploaded_file.size > max_size:
        raise ValidationError(
            details={'file': [f"Le fichier dépasse la taille maximale de {max_size // (1024 * 1024)} Mo"]}
        )
    return extension


class DocumentAssociationStore:
    """Création, association et suppression des documents d'un organisme"""

    def __init__(self, file_store=None, clock=None):
        self.file_store = file_store or get_file_store()
        self.clock = clock or get_clock()

    def queryset(self, tenant):
        queryset = scoped(
            Document.objects.select_related('created_by').prefetch_related('indicators'),
            tenant
        )
        if tenant.is_external:
            queryset = queryset.filter(indicators__uuid__in=list(tenant.indicator_access)).distinct()
        return queryset

    def list(self, tenant, document_type=None, indicator_id=None, status=None, search=None,
             page=None, limit=None):
        queryset = self.queryset(tenant)
        if document_type:
            if document_type not in DocumentType.values:
                raise ValidationError(details={'type': [f"Type inconnu: {document_type}"]})
            queryset = queryset.filter(type=document_type)
        if indicator_id:
            queryset = queryset.filter(indicator_links__indicator_id=indicator_id)
        if status:
            if status not in DocumentStatus.values:
                raise ValidationError(details={'status': [f"Statut inconnu: {status}"]})
            queryset = queryset.filter(status=status)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(description__icontains=search) | Q(category__icontains=search)
            )
        return paginate(queryset.order_by('-created_at'), page, limit)

    def get(self, tenant, document_id):
        return get_scoped(self.queryset(tenant), tenant, "Document introuvable", uuid=document_id)

    # ----- Création -----

    def create(self, tenant, payload, indicator_ids):
        """Document référencé par une URL externe"""
        data = dict(validate_payload(DocumentInputSerializer, payload))
        indicators = self._resolve_indicators(tenant, indicator_ids, required=True)
        file_url = data.pop('file_url')
        data['file_type'] = data.get('file_type') or file_extension(urlparse(file_url).path)

        with transaction.atomic():
            document = Document.objects.create(
                organization_id=tenant.organization_id,
                source=DocumentSource.URL,
                file_reference=file_url,
                created_by_id=tenant.actor_id,
                **data
            )
            self._replace_links(tenant, document, indicators)

        logger.info(f"Document créé: {document.name} ({document.type}), {len(indicators)} indicateur(s)")
        return document

    def upload(self, tenant, uploaded_file, metadata, indicator_ids):
        """
        Enregistre le fichier puis crée le document et ses associations.
        Si l'écriture en base échoue, le fichier stocké est supprimé.
        """
        extension = validate_document_file(uploaded_file)
        data = dict(validate_payload(DocumentUploadSerializer, metadata or {}))
        indicators = self._resolve_indicators(tenant, indicator_ids, required=True)

        reference = self.file_store.store(uploaded_file, self._storage_path(tenant, extension))
        try:
            with transaction.atomic():
                document = Document.objects.create(
                    organization_id=tenant.organization_id,
                    name=data.pop('name', None) or os.path.splitext(uploaded_file.name)[0][:255],
                    source=DocumentSource.UPLOAD,
                    file_reference=reference,
                    file_type=extension,
                    size_bytes=uploaded_file.size,
                    created_by_id=tenant.actor_id,
                    **{k: v for k, v in data.items() if k not in ('file_type', 'size_bytes')}
                )
                self._replace_links(tenant, document, indicators)
        except Exception:
            self.file_store.delete(reference)
            raise

        logger.info(f"Document téléversé: {document.name} ({reference})")
        return document

    # ----- Modification -----

    def update(self, tenant, document_id, patch, indicator_ids=None, uploaded_file=None):
        """
        Modifie les métadonnées, remplace éventuellement les associations
        (remplacement complet) et le fichier.
        """
        data = dict(validate_payload(DocumentInputSerializer, patch or {}, partial=True))
        document = self.get(tenant, document_id)
        indicators = None
        if indicator_ids is not None:
            indicators = self._resolve_indicators(tenant, indicator_ids)

        new_reference = None
        old_reference = document.file_reference if document.source == DocumentSource.UPLOAD else None
        if uploaded_file is not None:
            extension = validate_document_file(uploaded_file)
            new_reference = self.file_store.store(uploaded_file, self._storage_path(tenant, extension))

        try:
            with transaction.atomic():
                if new_reference:
                    document.source = DocumentSource.UPLOAD
                    document.file_reference = new_reference
                    document.file_type = extension
                    document.size_bytes = uploaded_file.size
                elif 'file_url' in data:
                    document.source = DocumentSource.URL
                    document.file_reference = data['file_url']
                    document.file_type = data.get('file_type') or file_extension(urlparse(data['file_url']).path)
                data.pop('file_url', None)

                for field, value in data.items():
                    setattr(document, field, value)
                document.save()

                if indicators is not None:
                    self._replace_links(tenant, document, indicators)
                else:
                    # Le type du document peut avoir changé
                    self.recompute(tenant, self._linked_indicator_ids(document))
        except Exception:
            if new_reference:
                self.file_store.delete(new_reference)
            raise

        if old_reference and old_reference != document.file_reference:
            self.file_store.delete(old_reference)

        logger.info(f"Document mis à jour: {document.name}")
        return document

    def associate(self, tenant, document_id, indicator_ids):
        """Remplace l'ensemble des indicateurs associés au document"""
        document = self.get(tenant, document_id)
        indicators = self._resolve_indicators(tenant, indicator_ids)
        with transaction.atomic():
            self._replace_links(tenant, document, indicators)
        logger.info(f"Associations du document {document.name} remplacées ({len(indicators)} indicateur(s))")
        return document

    def attach(self, tenant, document_id, indicator_ids):
        """Ajoute des indicateurs sans retirer les associations existantes"""
        document = self.get(tenant, document_id)
        indicators = self._resolve_indicators(tenant, indicator_ids, required=True)
        current = set(self._linked_indicator_ids(document))
        with transaction.atomic():
            self._replace_links(tenant, document, [*Indicator.objects.filter(uuid__in=current), *indicators])
        return document

    def detach(self, tenant, document_id, indicator_ids):
        """Retire des indicateurs de la liste des associations"""
        document = self.get(tenant, document_id)
        removed = {i.uuid for i in self._resolve_indicators(tenant, indicator_ids, required=True)}
        remaining = [uid for uid in self._linked_indicator_ids(document) if uid not in removed]
        with transaction.atomic():
            self._replace_links(tenant, document, list(Indicator.objects.filter(uuid__in=remaining)))
        return document

    # ----- Suppression / téléchargement -----

    def delete(self, tenant, document_id):
        """
        Supprime le document et recalcule les indicateurs concernés.
        L'échec de suppression du fichier n'empêche pas la suppression du document.
        """
        document = self.get(tenant, document_id)
        affected = self._linked_indicator_ids(document)
        reference = document.file_reference if document.source == DocumentSource.UPLOAD else None
        name = document.name

        with transaction.atomic():
            document.delete()
            self.recompute(tenant, affected)

        if reference and not self.file_store.delete(reference):
            logger.warning(f"Document {name} supprimé mais le fichier {reference} n'a pas pu être supprimé")
        logger.info(f"Document supprimé: {name}")

    def download(self, tenant, document_id):
        document = self.get(tenant, document_id)
        ttl = getattr(settings, 'QUALITE', {}).get('DOWNLOAD_URL_TTL', 3600)
        return {
            'url': self.file_store.url(document.file_reference),
            'name': document.name,
            'file_type': document.file_type,
            'expires_at': self.clock.now() + timedelta(seconds=ttl),
        }

    # ----- Recalcul des indicateurs -----

    def recompute(self, tenant, indicator_ids):
        """
        Recalcule les compteurs et le taux de complétion des indicateurs donnés
        """
        indicator_ids = list(set(indicator_ids))
        if not indicator_ids:
            return []

        policy = CompletionPolicy.for_organization(tenant.organization_id)
        now = self.clock.now()

        with transaction.atomic():
            indicators = list(
                scoped(Indicator.objects.all(), tenant)
                .select_for_update()
                .filter(uuid__in=indicator_ids)
            )
            rows = (
                DocumentIndicator.objects
                .filter(indicator_id__in=[i.uuid for i in indicators])
                .values('indicator_id', 'document__type')
                .annotate(total=Count('id'))
            )
            counts_by_indicator = {}
            for row in rows:
                counts = counts_by_indicator.setdefault(row['indicator_id'], default_document_counts())
                counts[row['document__type']] = row['total']

            for indicator in indicators:
                counts = counts_by_indicator.get(indicator.uuid, default_document_counts())
                indicator.status, indicator.completion_rate = policy.evaluate(counts)
                indicator.document_counts = counts
                indicator.has_documents = sum(counts.values()) > 0
                indicator.last_updated = now
                indicator.updated_at = now

            Indicator.objects.bulk_update(
                indicators,
                ['status', 'completion_rate', 'document_counts', 'has_documents', 'last_updated', 'updated_at']
            )

        logger.debug(f"{len(indicators)} indicateur(s) recalculé(s)")
        return indicators

    # ----- Outils internes -----

    def _resolve_indicators(self, tenant, indicator_ids, required=False):
        """
        Charge les indicateurs de l'organisme. Un identifiant inconnu ou
        appartenant à un autre organisme est rejeté de la même manière.
        """
        if indicator_ids is None:
            indicator_ids = []
        if not isinstance(indicator_ids, (list, tuple, set)):
            raise ValidationError(details={'indicator_ids': ["Une liste d'identifiants est attendue"]})
        if required and not indicator_ids:
            raise ValidationError(details={'indicator_ids': ["Au moins un indicateur est requis"]})

        try:
            wanted = list(dict.fromkeys(uuid.UUID(str(i)) for i in indicator_ids))
        except ValueError:
            raise ValidationError(details={'indicator_ids': ["Identifiant d'indicateur invalide"]})

        indicators = list(scoped(Indicator.objects.all(), tenant).filter(uuid__in=wanted))
        if len(indicators) != len(wanted):
            found = {i.uuid for i in indicators}
            missing = [str(uid) for uid in wanted if uid not in found]
            raise ValidationError(details={'indicator_ids': [f"Indicateur(s) introuvable(s): {', '.join(missing)}"]})
        return indicators

    def _linked_indicator_ids(self, document):
        return list(document.indicator_links.values_list('indicator_id', flat=True))

    def _replace_links(self, tenant, document, indicators):
        """Remplacement complet des associations puis recalcul des indicateurs touchés"""
        wanted = {i.uuid for i in indicators}
        current = set(self._linked_indicator_ids(document))

        removed = current - wanted
        added = wanted - current
        if removed:
            document.indicator_links.filter(indicator_id__in=removed).delete()
        if added:
            DocumentIndicator.objects.bulk_create(
                [DocumentIndicator(document=document, indicator_id=uid) for uid in added],
                ignore_conflicts=True
            )
        self.recompute(tenant, current | wanted)

    def _storage_path(self, tenant, extension):
        return f"quality/{tenant.organization_id}/documents/{uuid.uuid4().hex}.{extension}"
