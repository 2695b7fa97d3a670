from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from audits.serializers import AuditSerializer
from documentation.serializers import DocumentSerializer
from parametre.activity import log_request_activity
from shared.permissions import IsInternalMember, IsOrganizationMember
from shared.storage import get_file_store
from shared.tenancy import tenant_from_request
from taches.serializers import TaskCategorySerializer
from .serializers import StatisticSerializer
from .services import StatisticsAggregator

logger = logging.getLogger(__name__)

PERMISSIONS = [IsAuthenticated, IsOrganizationMember, IsInternalMember]


@api_view(['GET'])
@permission_classes(PERMISSIONS)
def statistics_current(request):
    tenant = tenant_from_request(request)
    statistic = StatisticsAggregator().current(tenant)
    return Response({'success': True, 'data': StatisticSerializer(statistic).data})


@api_view(['GET'])
@permission_classes(PERMISSIONS)
def statistics_period(request):
    """
    Instantanés entre ?start_date=AAAA-MM-JJ et ?end_date=AAAA-MM-JJ
    """
    tenant = tenant_from_request(request)
    statistics = StatisticsAggregator().period(
        tenant,
        request.query_params.get('start_date'),
        request.query_params.get('end_date'),
    )
    return Response({'success': True, 'data': StatisticSerializer(statistics, many=True).data})


@api_view(['GET'])
@permission_classes(PERMISSIONS)
def statistics_progress(request):
    tenant = tenant_from_request(request)
    progress = StatisticsAggregator().progress(tenant, request.query_params.get('days', 30))
    return Response({
        'success': True,
        'data': {
            'days': progress['days'],
            'evolution': progress['evolution'],
            'series': StatisticSerializer(progress['series'], many=True).data,
        }
    })


@api_view(['POST'])
@permission_classes(PERMISSIONS)
def statistics_regenerate(request):
    tenant = tenant_from_request(request)
    statistic = StatisticsAggregator().generate(tenant, request.data.get('date'))
    log_request_activity(request, tenant, 'create', 'statistic', statistic,
                         description=f"Régénération des statistiques du {statistic.date:%d/%m/%Y}")
    return Response({
        'success': True,
        'message': 'Statistiques régénérées avec succès',
        'data': StatisticSerializer(statistic).data
    })


@api_view(['GET'])
@permission_classes(PERMISSIONS)
def dashboard_overview(request):
    """
    Tableau de bord qualité : indicateurs, documents, actions, tâches,
    prochain audit et instantané du jour
    """
    tenant = tenant_from_request(request)
    aggregator = StatisticsAggregator()
    overview = aggregator.dashboard(tenant)

    documents = overview['documents']
    documents['recent'] = DocumentSerializer(
        documents['recent'], many=True, context={'file_store': get_file_store()}
    ).data

    countdown = overview['next_audit']
    if countdown is not None:
        countdown['audit'] = AuditSerializer(countdown['audit'], context={'today': aggregator.clock.today()}).data

    return Response({
        'success': True,
        'data': {
            'indicators': overview['indicators'],
            'documents': documents,
            'actions': overview['actions'],
            'tasks': overview['tasks'],
            'task_categories': TaskCategorySerializer(overview['task_categories'], many=True).data,
            'next_audit': countdown,
            'statistics': StatisticSerializer(overview['statistics']).data,
        }
    })
