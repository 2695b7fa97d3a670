from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from parametre.activity import log_request_activity
from shared.permissions import IsInternalMember, IsOrganizationMember
from shared.tenancy import tenant_from_request
from .serializers import TaskCategorySerializer, TaskSerializer
from .services import TaskBoard

logger = logging.getLogger(__name__)

PERMISSIONS = [IsAuthenticated, IsOrganizationMember, IsInternalMember]


def _serialize_tasks(board, tasks, many=False):
    return TaskSerializer(tasks, many=many, context={'today': board.clock.today()}).data


@api_view(['GET', 'POST'])
@permission_classes(PERMISSIONS)
def task_list(request):
    """
    Liste des tâches du tableau (GET) ou création d'une tâche (POST)
    """
    tenant = tenant_from_request(request)
    board = TaskBoard()

    if request.method == 'GET':
        params = request.query_params
        tasks = board.list(
            tenant,
            category=params.get('category'),
            status=params.get('status'),
            priority=params.get('priority'),
            assigned_to=params.get('assigned_to'),
            include_archived=params.get('include_archived', '').lower() == 'true',
        )
        return Response({'success': True, 'data': _serialize_tasks(board, tasks, many=True)})

    task = board.create(tenant, request.data)
    log_request_activity(request, tenant, 'create', 'task', task)
    return Response({
        'success': True,
        'message': 'Tâche créée avec succès',
        'data': _serialize_tasks(board, task)
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes(PERMISSIONS)
def task_statistics(request):
    tenant = tenant_from_request(request)
    return Response({'success': True, 'data': TaskBoard().statistics(tenant)})


@api_view(['PUT', 'POST'])
@permission_classes(PERMISSIONS)
def task_positions(request):
    """
    Réordonnancement : {"tasks": [{"id": ..., "position": 0}, ...]}
    """
    tenant = tenant_from_request(request)
    board = TaskBoard()
    tasks = board.reorder(tenant, request.data.get('tasks'))
    return Response({
        'success': True,
        'message': 'Positions mises à jour avec succès',
        'data': {'updated': len(tasks)}
    })


@api_view(['GET'])
@permission_classes(PERMISSIONS)
def task_by_category(request, slug):
    tenant = tenant_from_request(request)
    board = TaskBoard()
    category, tasks = board.by_category(
        tenant, slug, include_archived=request.query_params.get('include_archived', '').lower() == 'true'
    )
    return Response({
        'success': True,
        'data': {
            'category': TaskCategorySerializer(category).data,
            'tasks': _serialize_tasks(board, tasks, many=True),
        }
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes(PERMISSIONS)
def task_detail(request, task_id):
    tenant = tenant_from_request(request)
    board = TaskBoard()

    if request.method == 'GET':
        return Response({'success': True, 'data': _serialize_tasks(board, board.get(tenant, task_id))})

    if request.method == 'DELETE':
        task = board.get(tenant, task_id)
        board.delete(tenant, task_id)
        log_request_activity(request, tenant, 'delete', 'task', entity_name=task.title)
        return Response({'success': True, 'message': 'Tâche supprimée avec succès'})

    task = board.update(tenant, task_id, request.data)
    log_request_activity(request, tenant, 'update', 'task', task)
    return Response({
        'success': True,
        'message': 'Tâche mise à jour avec succès',
        'data': _serialize_tasks(board, task)
    })


@api_view(['GET', 'POST'])
@permission_classes(PERMISSIONS)
def category_list(request):
    tenant = tenant_from_request(request)
    board = TaskBoard()

    if request.method == 'GET':
        data = TaskCategorySerializer(board.list_categories(tenant), many=True).data
        return Response({'success': True, 'data': data})

    category = board.create_category(tenant, request.data)
    log_request_activity(request, tenant, 'create', 'task_category', category)
    return Response({
        'success': True,
        'message': 'Catégorie créée avec succès',
        'data': TaskCategorySerializer(category).data
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(PERMISSIONS)
def category_initialize(request):
    tenant = tenant_from_request(request)
    created = TaskBoard().initialize_system_categories(tenant)
    if created:
        log_request_activity(request, tenant, 'initialize', 'task_category',
                             description=f"{len(created)} catégorie(s) système créée(s)")
    return Response({
        'success': True,
        'message': 'Catégories système initialisées',
        'data': {'created': len(created)}
    })


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes(PERMISSIONS)
def category_detail(request, category_id):
    tenant = tenant_from_request(request)
    board = TaskBoard()

    if request.method == 'DELETE':
        category = board.get_category(tenant, category_id)
        board.delete_category(tenant, category_id)
        log_request_activity(request, tenant, 'delete', 'task_category', entity_name=category.name)
        return Response({'success': True, 'message': 'Catégorie supprimée avec succès'})

    category = board.update_category(tenant, category_id, request.data)
    log_request_activity(request, tenant, 'update', 'task_category', category)
    return Response({
        'success': True,
        'message': 'Catégorie mise à jour avec succès',
        'data': TaskCategorySerializer(category).data
    })
