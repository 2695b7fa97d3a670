from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from documentation.serializers import DocumentSerializer
from parametre.activity import log_request_activity
from shared.permissions import CanEditQuality, IsInternalMember, IsOrganizationMember
from shared.tenancy import tenant_from_request
from .bootstrap import InitializationBootstrap
from .serializers import IndicatorSerializer
from .services import IndicatorCatalog

logger = logging.getLogger(__name__)


def _parse_bool(value):
    if value is None or value == '':
        return None
    return str(value).lower() in ('1', 'true', 'yes')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganizationMember])
def indicator_list(request):
    """
    Liste des indicateurs avec la synthèse de complétion
    """
    tenant = tenant_from_request(request)
    catalog = IndicatorCatalog()
    result = catalog.list(
        tenant,
        status=request.query_params.get('status'),
        category=request.query_params.get('category'),
        has_documents=_parse_bool(request.query_params.get('has_documents')),
    )
    return Response({
        'success': True,
        'data': {
            'indicators': IndicatorSerializer(result['indicators'], many=True).data,
            'summary': result['summary'],
            'categories': catalog.categories(tenant),
        }
    })


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsOrganizationMember, CanEditQuality])
def indicator_detail(request, indicator_id):
    tenant = tenant_from_request(request)
    catalog = IndicatorCatalog()

    if request.method == 'GET':
        return Response({'success': True, 'data': IndicatorSerializer(catalog.get(tenant, indicator_id)).data})

    indicator = catalog.update(tenant, indicator_id, request.data)
    log_request_activity(request, tenant, 'update', 'indicator', indicator)
    return Response({
        'success': True,
        'message': 'Indicateur mis à jour avec succès',
        'data': IndicatorSerializer(indicator).data
    })


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsOrganizationMember, CanEditQuality])
def indicator_batch_update(request):
    """
    Mise à jour groupée : {"indicators": [{"id": ..., "status": ...}, ...]}
    """
    tenant = tenant_from_request(request)
    result = IndicatorCatalog().batch_update(tenant, request.data.get('indicators'))
    for indicator in result['updated']:
        log_request_activity(request, tenant, 'update', 'indicator', indicator)
    return Response({
        'success': not result['errors'],
        'data': {
            'updated': len(result['updated']),
            'failed': len(result['errors']),
            'indicators': IndicatorSerializer(result['updated'], many=True).data,
            'errors': result['errors'],
        }
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganizationMember])
def indicator_documents(request, indicator_id):
    tenant = tenant_from_request(request)
    documents = IndicatorCatalog().list_documents(tenant, indicator_id, request.query_params.get('type'))
    return Response({'success': True, 'data': DocumentSerializer(documents, many=True).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsOrganizationMember, IsInternalMember])
def initialize(request):
    """
    Initialise les 32 indicateurs et les catégories d'actions de l'organisme
    """
    tenant = tenant_from_request(request)
    result = InitializationBootstrap().initialize(tenant)
    log_request_activity(request, tenant, 'initialize', 'indicator',
                         description="Initialisation du système qualité")
    return Response({
        'success': True,
        'message': 'Système qualité initialisé avec succès',
        'data': result
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganizationMember])
def initialize_status(request):
    tenant = tenant_from_request(request)
    return Response({'success': True, 'data': InitializationBootstrap().status(tenant)})
