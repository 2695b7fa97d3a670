"""
Cycle de vie des bilans pédagogiques et financiers (BPF)
"""
from datetime import timedelta
from decimal import Decimal, InvalidOperation as DecimalError
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils.module_loading import import_string

from parametre.models import Organization
from shared.clock import get_clock
from shared.exceptions import Conflict, InvalidOperation, ValidationError, validate_payload
from shared.storage import get_file_store
from shared.tenancy import get_scoped, scoped
from .excel_export import render_bpf_excel
from .models import Bpf, BpfStatus
from .serializers import BpfDataSerializer, BpfInputSerializer, BpfSubmissionSerializer

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    'excel': 'xlsx',
    'pdf': 'pdf',
}


def _number(value):
    """Convertit une valeur saisie (nombre ou texte) en nombre, 0 par défaut"""
    if value in (None, ''):
        return 0
    try:
        number = Decimal(str(value).replace(' ', '').replace(',', '.'))
    except DecimalError:
        return 0
    if not number.is_finite():
        return 0
    return int(number) if number == number.to_integral_value() else float(number)


def summarize_bpf(bpf):
    data = bpf.data or {}
    training = data.get('training') or {}
    financial = data.get('financial') or {}
    return {
        'totalSessions': _number(training.get('totalSessions')),
        'totalParticipants': _number(training.get('totalParticipants')),
        'totalRevenue': _number(financial.get('totalRevenue')),
    }


class BPFReportWorkflow:
    """Brouillon, transmission, archives et exports des BPF d'un organisme"""

    def __init__(self, file_store=None, clock=None, pdf_renderer=None):
        self.file_store = file_store or get_file_store()
        self.clock = clock or get_clock()
        self.pdf_renderer = pdf_renderer or self._configured_pdf_renderer()

    def _configured_pdf_renderer(self):
        path = getattr(settings, 'QUALITE', {}).get('BPF_PDF_RENDERER')
        return import_string(path) if path else None

    def queryset(self, tenant):
        return scoped(Bpf.objects.all(), tenant)

    def list(self, tenant, year=None, status=None):
        queryset = self.queryset(tenant)
        if year:
            try:
                queryset = queryset.filter(year=int(year))
            except (TypeError, ValueError):
                raise ValidationError(details={'year': ["L'année doit être un entier"]})
        if status:
            if status not in BpfStatus.values:
                raise ValidationError(details={'status': [f"Statut inconnu: {status}"]})
            queryset = queryset.filter(status=status)
        return queryset.order_by('-year')

    def get(self, tenant, bpf_id):
        return get_scoped(self.queryset(tenant), tenant, "BPF introuvable", uuid=bpf_id)

    def create(self, tenant, year, data, notes=''):
        payload = validate_payload(BpfInputSerializer, {'year': year, 'data': data, 'notes': notes or ''})
        try:
            with transaction.atomic():
                bpf = Bpf.objects.create(
                    organization_id=tenant.organization_id,
                    created_by_id=tenant.actor_id,
                    **payload
                )
        except IntegrityError:
            raise Conflict(f"Un BPF existe déjà pour l'année {payload['year']}", code='DUPLICATE_ENTRY')
        logger.info(f"BPF créé: {bpf}")
        return bpf

    def update(self, tenant, bpf_id, data, notes=None):
        payload = {'data': data}
        if notes is not None:
            payload['notes'] = notes
        payload = validate_payload(BpfDataSerializer, payload)

        with transaction.atomic():
            bpf = get_scoped(Bpf.objects.select_for_update(), tenant, "BPF introuvable", uuid=bpf_id)
            self._ensure_draft(bpf, "modifié")
            for field, value in payload.items():
                setattr(bpf, field, value)
            bpf.save()

        logger.info(f"BPF mis à jour: {bpf}")
        return bpf

    def submit(self, tenant, bpf_id, submission):
        payload = validate_payload(BpfSubmissionSerializer, submission)

        with transaction.atomic():
            bpf = get_scoped(Bpf.objects.select_for_update(), tenant, "BPF introuvable", uuid=bpf_id)
            self._ensure_draft(bpf, "transmis")
            for field, value in payload.items():
                setattr(bpf, field, value)
            bpf.status = BpfStatus.SUBMITTED
            bpf.submitted_date = self.clock.now()
            bpf.save()

        logger.info(f"BPF transmis: {bpf} à {bpf.submitted_to}")
        return bpf

    def archives(self, tenant, from_year=None, to_year=None):
        """BPF transmis avec leur synthèse (sessions, participants, chiffre d'affaires)"""
        queryset = self.queryset(tenant).filter(status=BpfStatus.SUBMITTED)
        try:
            if from_year:
                queryset = queryset.filter(year__gte=int(from_year))
            if to_year:
                queryset = queryset.filter(year__lte=int(to_year))
        except (TypeError, ValueError):
            raise ValidationError(details={'year': ["Les bornes d'années doivent être des entiers"]})
        return [
            {'bpf': bpf, 'summary': summarize_bpf(bpf)}
            for bpf in queryset.order_by('-year')
        ]

    def export(self, tenant, bpf_id, format='excel'):
        """
        Génère le fichier d'export, l'enregistre dans le stockage et retourne
        {reference, url, format, expires_at}
        """
        if format not in EXPORT_FORMATS:
            raise ValidationError(details={'format': [f"Format d'export inconnu: {format}"]})
        bpf = self.get(tenant, bpf_id)
        organization = Organization.objects.get(pk=tenant.organization_id)

        if format == 'pdf':
            if self.pdf_renderer is None:
                raise InvalidOperation("L'export PDF n'est pas configuré", code='EXPORT_UNAVAILABLE')
            content = self.pdf_renderer(bpf, organization.name)
        else:
            content = render_bpf_excel(bpf, organization.name)

        extension = EXPORT_FORMATS[format]
        timestamp = self.clock.now().strftime('%Y%m%d%H%M%S')
        path = f"bpf/{organization.slug}/BPF_{bpf.year}_{timestamp}.{extension}"
        reference = self.file_store.store(content, path)

        previous = bpf.export_reference
        bpf.export_reference = reference
        bpf.save(update_fields=['export_reference', 'updated_at'])
        if previous and previous != reference:
            self.file_store.delete(previous)

        ttl = getattr(settings, 'QUALITE', {}).get('DOWNLOAD_URL_TTL', 3600)
        logger.info(f"Export {format} du {bpf}: {reference}")
        return {
            'reference': reference,
            'url': self.file_store.url(reference),
            'format': format,
            'expires_at': self.clock.now() + timedelta(seconds=ttl),
        }

    def delete(self, tenant, bpf_id):
        bpf = self.get(tenant, bpf_id)
        self._ensure_draft(bpf, "supprimé")
        reference = bpf.export_reference
        label = str(bpf)
        bpf.delete()
        if reference:
            self.file_store.delete(reference)
        logger.info(f"BPF supprimé: {label}")

    def _ensure_draft(self, bpf, verb):
        if not bpf.is_draft:
            raise InvalidOperation(f"Un BPF transmis ne peut pas être {verb}")
