from django.contrib.auth.models import User
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
import logging

from parametre.activity import get_client_ip, log_activity, log_request_activity
from shared.authentication import AuthService
from shared.permissions import IsInternalMember, IsOrganizationMember
from shared.tenancy import ROLE_EXTERNAL, TenantContext, tenant_from_request
from .serializers import InvitationSerializer
from .services import InvitationLifecycle

logger = logging.getLogger(__name__)

PERMISSIONS = [IsAuthenticated, IsOrganizationMember, IsInternalMember]


def _serialize_invitations(lifecycle, invitations, many=False):
    return InvitationSerializer(invitations, many=many, context={'now': lifecycle.clock.now()}).data


@api_view(['GET', 'POST'])
@permission_classes(PERMISSIONS)
def invitation_list(request):
    """
    Liste des invitations (GET, ?status=pending|accepted|revoked|expired)
    ou invitation d'un collaborateur externe (POST)
    """
    tenant = tenant_from_request(request)
    lifecycle = InvitationLifecycle()

    if request.method == 'GET':
        invitations = lifecycle.list(tenant, status=request.query_params.get('status'))
        return Response({'success': True, 'data': _serialize_invitations(lifecycle, invitations, many=True)})

    invitation = lifecycle.invite(
        tenant,
        request.data.get('email'),
        request.data.get('name'),
        request.data.get('indicator_access'),
        permissions=request.data.get('permissions'),
    )
    log_request_activity(request, tenant, 'invite', 'invitation', invitation, entity_name=invitation.email)
    return Response({
        'success': True,
        'message': 'Invitation envoyée avec succès',
        'data': _serialize_invitations(lifecycle, invitation)
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes(PERMISSIONS)
def invitation_revoke(request, invitation_id):
    tenant = tenant_from_request(request)
    lifecycle = InvitationLifecycle()
    invitation = lifecycle.revoke(tenant, invitation_id)
    log_request_activity(request, tenant, 'revoke', 'invitation', invitation, entity_name=invitation.email)
    return Response({
        'success': True,
        'message': 'Invitation révoquée avec succès',
        'data': _serialize_invitations(lifecycle, invitation)
    })


@api_view(['POST'])
@permission_classes(PERMISSIONS)
def invitation_resend(request, invitation_id):
    tenant = tenant_from_request(request)
    lifecycle = InvitationLifecycle()
    invitation = lifecycle.resend(tenant, invitation_id)
    log_request_activity(request, tenant, 'invite', 'invitation', invitation, entity_name=invitation.email,
                         description=f"Invitation renvoyée à {invitation.email}")
    return Response({
        'success': True,
        'message': 'Invitation renvoyée avec succès',
        'data': _serialize_invitations(lifecycle, invitation)
    })


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def invitation_accept(request):
    """
    Acceptation publique d'une invitation : crée le compte du collaborateur
    et ouvre sa session (cookies JWT)
    """
    lifecycle = InvitationLifecycle()
    invitation = lifecycle.accept(
        request.data.get('token'),
        request.data.get('password'),
        name=request.data.get('name'),
    )
    user = User.objects.get(pk=invitation.accepted_user_id)

    tenant = TenantContext(
        organization_id=invitation.organization_id,
        actor_id=user.id,
        role=ROLE_EXTERNAL,
        indicator_access=tuple(invitation.indicator_access),
    )
    log_activity(
        tenant, user, 'accept', 'invitation',
        entity_id=invitation.pk,
        entity_name=invitation.email,
        description=f"Invitation acceptée par {invitation.email}",
        ip_address=get_client_ip(request),
        user_agent=request.META.get('HTTP_USER_AGENT', '')
    )

    access_token, refresh_token = AuthService.create_tokens(user)
    response = Response({
        'success': True,
        'message': 'Invitation acceptée avec succès',
        'data': {
            'user': {
                'id': user.id,
                'email': user.email,
                'name': user.get_full_name() or user.username,
            },
            'indicator_access': invitation.indicator_access,
        }
    })
    AuthService.set_auth_cookies(response, access_token, refresh_token)
    return response
