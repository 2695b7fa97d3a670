from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import json
import logging

from parametre.activity import log_request_activity
from shared.exceptions import ValidationError
from shared.permissions import CanEditQuality, IsOrganizationMember
from shared.tenancy import tenant_from_request
from .serializers import DocumentSerializer
from .services import DocumentAssociationStore

logger = logging.getLogger(__name__)


def _indicator_ids(data, required=True):
    """
    Lit indicator_ids depuis un corps JSON ou multipart (liste répétée ou chaîne JSON)
    """
    if hasattr(data, 'getlist'):
        values = data.getlist('indicator_ids') or data.getlist('indicator_ids[]')
        if len(values) == 1 and values[0].strip().startswith('['):
            try:
                values = json.loads(values[0])
            except ValueError:
                raise ValidationError(details={'indicator_ids': ["Liste d'identifiants invalide"]})
        if values or required:
            return values
        return None
    if 'indicator_ids' not in data:
        return [] if required else None
    return data.get('indicator_ids')


def _metadata(data):
    excluded = ('indicator_ids', 'indicator_ids[]', 'file')
    if hasattr(data, 'getlist'):
        return {key: data.get(key) for key in data.keys() if key not in excluded}
    return {key: value for key, value in data.items() if key not in excluded}


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsOrganizationMember, CanEditQuality])
def document_list(request):
    """
    Liste paginée des documents (GET) ou création d'un document par lien (POST)
    """
    tenant = tenant_from_request(request)
    store = DocumentAssociationStore()

    if request.method == 'GET':
        params = request.query_params
        page = store.list(
            tenant,
            document_type=params.get('type'),
            indicator_id=params.get('indicator_id'),
            status=params.get('status'),
            search=params.get('search'),
            page=params.get('page'),
            limit=params.get('limit'),
        )
        return Response({
            'success': True,
            'data': DocumentSerializer(page.pop('items'), many=True, context={'file_store': store.file_store}).data,
            'pagination': page,
        })

    document = store.create(tenant, _metadata(request.data), _indicator_ids(request.data))
    log_request_activity(request, tenant, 'create', 'document', document)
    return Response({
        'success': True,
        'message': 'Document créé avec succès',
        'data': DocumentSerializer(document, context={'file_store': store.file_store}).data
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@parser_classes([MultiPartParser, FormParser])
@permission_classes([IsAuthenticated, IsOrganizationMember, CanEditQuality])
def document_upload(request):
    """
    Téléversement d'un fichier (multipart : file, name, type, indicator_ids, ...)
    """
    tenant = tenant_from_request(request)
    store = DocumentAssociationStore()
    document = store.upload(
        tenant,
        request.FILES.get('file'),
        _metadata(request.data),
        _indicator_ids(request.data)
    )
    log_request_activity(request, tenant, 'create', 'document', document,
                         description=f"Téléversement du document {document.name}")
    return Response({
        'success': True,
        'message': 'Document téléversé avec succès',
        'data': DocumentSerializer(document, context={'file_store': store.file_store}).data
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@parser_classes([JSONParser, MultiPartParser, FormParser])
@permission_classes([IsAuthenticated, IsOrganizationMember, CanEditQuality])
def document_detail(request, document_id):
    tenant = tenant_from_request(request)
    store = DocumentAssociationStore()
    context = {'file_store': store.file_store}

    if request.method == 'GET':
        return Response({'success': True, 'data': DocumentSerializer(store.get(tenant, document_id), context=context).data})

    if request.method == 'DELETE':
        document = store.get(tenant, document_id)
        store.delete(tenant, document_id)
        log_request_activity(request, tenant, 'delete', 'document', entity_name=document.name)
        return Response({'success': True, 'message': 'Document supprimé avec succès'})

    document = store.update(
        tenant,
        document_id,
        _metadata(request.data),
        indicator_ids=_indicator_ids(request.data, required=False),
        uploaded_file=request.FILES.get('file')
    )
    log_request_activity(request, tenant, 'update', 'document', document)
    return Response({
        'success': True,
        'message': 'Document mis à jour avec succès',
        'data': DocumentSerializer(document, context=context).data
    })


@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated, IsOrganizationMember, CanEditQuality])
def document_associate(request, document_id):
    """
    Remplace les indicateurs associés au document
    """
    tenant = tenant_from_request(request)
    store = DocumentAssociationStore()
    document = store.associate(tenant, document_id, _indicator_ids(request.data))
    log_request_activity(request, tenant, 'update', 'document', document,
                         description=f"Associations du document {document.name} mises à jour")
    return Response({
        'success': True,
        'message': 'Associations mises à jour avec succès',
        'data': DocumentSerializer(document, context={'file_store': store.file_store}).data
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganizationMember])
def document_download(request, document_id):
    tenant = tenant_from_request(request)
    return Response({'success': True, 'data': DocumentAssociationStore().download(tenant, document_id)})
