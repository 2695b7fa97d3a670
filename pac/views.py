from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from parametre.activity import log_request_activity
from shared.permissions import IsInternalMember, IsOrganizationMember
from shared.tenancy import tenant_from_request
from .serializers import ActionCategorySerializer, ActionSerializer
from .services import ActionBoard

logger = logging.getLogger(__name__)


def _serialize_actions(board, actions, many=False):
    return ActionSerializer(actions, many=many, context={'today': board.clock.today()}).data


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsOrganizationMember, IsInternalMember])
def action_list(request):
    """
    Liste paginée des actions (GET) ou création d'une action (POST)
    """
    tenant = tenant_from_request(request)
    board = ActionBoard()

    if request.method == 'GET':
        params = request.query_params
        page = board.list(
            tenant,
            category=params.get('category'),
            priority=params.get('priority'),
            status=params.get('status'),
            assigned_to=params.get('assigned_to'),
            overdue=params.get('overdue', '').lower() == 'true',
            search=params.get('search'),
            page=params.get('page'),
            limit=params.get('limit'),
        )
        return Response({
            'success': True,
            'data': _serialize_actions(board, page.pop('items'), many=True),
            'pagination': page,
        })

    action = board.create(tenant, request.data)
    log_request_activity(request, tenant, 'create', 'action', action)
    return Response({
        'success': True,
        'message': 'Action créée avec succès',
        'data': _serialize_actions(board, action)
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsOrganizationMember, IsInternalMember])
def action_detail(request, action_id):
    tenant = tenant_from_request(request)
    board = ActionBoard()

    if request.method == 'GET':
        return Response({'success': True, 'data': _serialize_actions(board, board.get(tenant, action_id))})

    if request.method == 'DELETE':
        action = board.get(tenant, action_id)
        board.delete(tenant, action_id)
        log_request_activity(request, tenant, 'delete', 'action', entity_name=action.title)
        return Response({'success': True, 'message': 'Action supprimée avec succès'})

    action = board.update(tenant, action_id, request.data)
    log_request_activity(request, tenant, 'update', 'action', action)
    return Response({
        'success': True,
        'message': 'Action mise à jour avec succès',
        'data': _serialize_actions(board, action)
    })


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsOrganizationMember, IsInternalMember])
def category_list(request):
    tenant = tenant_from_request(request)
    board = ActionBoard()

    if request.method == 'GET':
        data = ActionCategorySerializer(board.list_categories(tenant), many=True).data
        return Response({'success': True, 'data': data})

    category = board.create_category(tenant, request.data)
    log_request_activity(request, tenant, 'create', 'action_category', category)
    return Response({
        'success': True,
        'message': 'Catégorie créée avec succès',
        'data': ActionCategorySerializer(category).data
    }, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsOrganizationMember, IsInternalMember])
def category_detail(request, category_id):
    tenant = tenant_from_request(request)
    board = ActionBoard()

    if request.method == 'DELETE':
        category = board.get_category(tenant, category_id)
        board.delete_category(tenant, category_id)
        log_request_activity(request, tenant, 'delete', 'action_category', entity_name=category.label)
        return Response({'success': True, 'message': 'Catégorie supprimée avec succès'})

    category = board.update_category(tenant, category_id, request.data)
    log_request_activity(request, tenant, 'update', 'action_category', category)
    return Response({
        'success': True,
        'message': 'Catégorie mise à jour avec succès',
        'data': ActionCategorySerializer(category).data
    })
