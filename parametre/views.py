from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from shared.exceptions import ValidationError
from shared.permissions import IsOrganizationMember, CanEditQuality
from shared.tenancy import tenant_from_request
from .activity import log_request_activity
from .models import ActivityLog, QualitySettings
from .serializers import ActivityLogSerializer, QualitySettingsSerializer

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsOrganizationMember])
def recent_activities(request):
    """
    API pour récupérer les activités récentes de l'organisme
    """
    tenant = tenant_from_request(request)
    try:
        limit = min(int(request.GET.get('limit', 10)), 100)
    except ValueError:
        raise ValidationError(details={'limit': ['Doit être un entier']})

    queryset = ActivityLog.objects.filter(organization_id=tenant.organization_id).select_related('user')
    if request.GET.get('user_only', 'false').lower() == 'true':
        queryset = queryset.filter(user=request.user)

    data = ActivityLogSerializer(queryset[:limit], many=True).data
    return Response({'success': True, 'data': data, 'count': len(data)}, status=status.HTTP_200_OK)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated, IsOrganizationMember, CanEditQuality])
def quality_settings(request):
    """
    Consulter ou modifier les paramètres qualité de l'organisme
    """
    tenant = tenant_from_request(request)
    instance = QualitySettings.get_for_organization(tenant.organization_id)

    if request.method == 'GET':
        return Response({'success': True, 'data': QualitySettingsSerializer(instance).data})

    serializer = QualitySettingsSerializer(instance, data=request.data, partial=True)
    if not serializer.is_valid():
        raise ValidationError(details=serializer.errors)
    serializer.save()
    logger.info(f"Paramètres qualité mis à jour pour l'organisme {tenant.organization_id}")
    log_request_activity(request, tenant, 'update', 'settings', instance,
                         description="Mise à jour des paramètres qualité")
    return Response({
        'success': True,
        'message': 'Paramètres mis à jour avec succès',
        'data': serializer.data
    })
