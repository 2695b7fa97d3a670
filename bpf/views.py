from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from parametre.activity import log_request_activity
from shared.permissions import IsInternalMember, IsOrganizationMember
from shared.tenancy import tenant_from_request
from .serializers import BpfSerializer
from .services import BPFReportWorkflow

logger = logging.getLogger(__name__)

PERMISSIONS = [IsAuthenticated, IsOrganizationMember, IsInternalMember]


@api_view(['GET', 'POST'])
@permission_classes(PERMISSIONS)
def bpf_list(request):
    tenant = tenant_from_request(request)
    workflow = BPFReportWorkflow()

    if request.method == 'GET':
        bpfs = workflow.list(tenant, year=request.query_params.get('year'), status=request.query_params.get('status'))
        return Response({'success': True, 'data': BpfSerializer(bpfs, many=True).data})

    bpf = workflow.create(
        tenant,
        request.data.get('year'),
        request.data.get('data'),
        notes=request.data.get('notes', ''),
    )
    log_request_activity(request, tenant, 'create', 'bpf', bpf)
    return Response({
        'success': True,
        'message': 'BPF créé avec succès',
        'data': BpfSerializer(bpf).data
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes(PERMISSIONS)
def bpf_archives(request):
    """
    BPF transmis avec leur synthèse annuelle
    """
    tenant = tenant_from_request(request)
    archives = BPFReportWorkflow().archives(
        tenant,
        from_year=request.query_params.get('from_year'),
        to_year=request.query_params.get('to_year'),
    )
    data = []
    for entry in archives:
        item = BpfSerializer(entry['bpf']).data
        item['summary'] = entry['summary']
        data.append(item)
    return Response({'success': True, 'data': data})


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes(PERMISSIONS)
def bpf_detail(request, bpf_id):
    tenant = tenant_from_request(request)
    workflow = BPFReportWorkflow()

    if request.method == 'GET':
        return Response({'success': True, 'data': BpfSerializer(workflow.get(tenant, bpf_id)).data})

    if request.method == 'DELETE':
        bpf = workflow.get(tenant, bpf_id)
        workflow.delete(tenant, bpf_id)
        log_request_activity(request, tenant, 'delete', 'bpf', entity_name=str(bpf))
        return Response({'success': True, 'message': 'BPF supprimé avec succès'})

    bpf = workflow.update(tenant, bpf_id, request.data.get('data'), notes=request.data.get('notes'))
    log_request_activity(request, tenant, 'update', 'bpf', bpf)
    return Response({
        'success': True,
        'message': 'BPF mis à jour avec succès',
        'data': BpfSerializer(bpf).data
    })


@api_view(['POST'])
@permission_classes(PERMISSIONS)
def bpf_submit(request, bpf_id):
    tenant = tenant_from_request(request)
    bpf = BPFReportWorkflow().submit(tenant, bpf_id, request.data)
    log_request_activity(request, tenant, 'submit', 'bpf', bpf,
                         description=f"BPF {bpf.year} transmis à {bpf.submitted_to}")
    return Response({
        'success': True,
        'message': 'BPF transmis avec succès',
        'data': BpfSerializer(bpf).data
    })


@api_view(['GET', 'POST'])
@permission_classes(PERMISSIONS)
def bpf_export(request, bpf_id):
    """
    Export du BPF : ?format=excel (par défaut) ou ?format=pdf
    """
    tenant = tenant_from_request(request)
    export_format = request.query_params.get('format') or request.data.get('format') or 'excel'
    result = BPFReportWorkflow().export(tenant, bpf_id, export_format)
    log_request_activity(request, tenant, 'export', 'bpf', entity_name=result['reference'],
                         description=f"Export {export_format} du BPF")
    return Response({'success': True, 'data': result})
