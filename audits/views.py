from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from parametre.activity import log_request_activity
from shared.permissions import IsInternalMember, IsOrganizationMember
from shared.tenancy import tenant_from_request
from .serializers import AuditSerializer
from .services import AuditScheduler

logger = logging.getLogger(__name__)

PERMISSIONS = [IsAuthenticated, IsOrganizationMember, IsInternalMember]


def _serialize_audits(scheduler, audits, many=False):
    return AuditSerializer(audits, many=many, context={'today': scheduler.clock.today()}).data


@api_view(['GET', 'POST'])
@permission_classes(PERMISSIONS)
def audit_list(request):
    tenant = tenant_from_request(request)
    scheduler = AuditScheduler()

    if request.method == 'GET':
        audits = scheduler.list(tenant, status=request.query_params.get('status'))
        return Response({'success': True, 'data': _serialize_audits(scheduler, audits, many=True)})

    audit = scheduler.create(tenant, request.data)
    log_request_activity(request, tenant, 'create', 'audit', audit)
    return Response({
        'success': True,
        'message': 'Audit planifié avec succès',
        'data': _serialize_audits(scheduler, audit)
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes(PERMISSIONS)
def audit_next(request):
    """
    Prochain audit planifié avec le compte à rebours
    """
    tenant = tenant_from_request(request)
    scheduler = AuditScheduler()
    audit = scheduler.next(tenant)
    return Response({
        'success': True,
        'data': {
            'audit': _serialize_audits(scheduler, audit),
            'days_remaining': scheduler.days_remaining(audit),
            'formatted_date': audit.date.strftime('%d/%m/%Y'),
        }
    })


@api_view(['GET'])
@permission_classes(PERMISSIONS)
def audit_history(request):
    tenant = tenant_from_request(request)
    scheduler = AuditScheduler()
    params = request.query_params
    page = scheduler.history(
        tenant,
        year=params.get('year'),
        type=params.get('type'),
        page=params.get('page'),
        limit=params.get('limit'),
    )
    return Response({
        'success': True,
        'data': _serialize_audits(scheduler, page.pop('items'), many=True),
        'pagination': page,
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes(PERMISSIONS)
def audit_detail(request, audit_id):
    tenant = tenant_from_request(request)
    scheduler = AuditScheduler()

    if request.method == 'GET':
        return Response({'success': True, 'data': _serialize_audits(scheduler, scheduler.get(tenant, audit_id))})

    if request.method == 'DELETE':
        audit = scheduler.get(tenant, audit_id)
        scheduler.delete(tenant, audit_id)
        log_request_activity(request, tenant, 'delete', 'audit', entity_name=str(audit))
        return Response({'success': True, 'message': 'Audit supprimé avec succès'})

    audit = scheduler.update(tenant, audit_id, request.data)
    log_request_activity(request, tenant, 'update', 'audit', audit)
    return Response({
        'success': True,
        'message': 'Audit mis à jour avec succès',
        'data': _serialize_audits(scheduler, audit)
    })


@api_view(['POST'])
@permission_classes(PERMISSIONS)
def audit_complete(request, audit_id):
    tenant = tenant_from_request(request)
    scheduler = AuditScheduler()
    audit = scheduler.complete(tenant, audit_id, request.data)
    log_request_activity(request, tenant, 'complete', 'audit', audit,
                         description=f"Audit clôturé avec le résultat {audit.get_result_display()}")
    return Response({
        'success': True,
        'message': 'Audit clôturé avec succès',
        'data': _serialize_audits(scheduler, audit)
    })
