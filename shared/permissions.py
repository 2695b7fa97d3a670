"""
Permissions DRF liées à l'organisation de l'utilisateur
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .tenancy import tenant_from_request


class IsOrganizationMember(BasePermission):
    """L'utilisateur doit appartenir à une organisation active"""
    message = "Aucune organisation associée à cet utilisateur"

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        tenant_from_request(request)
        return True


class CanEditQuality(BasePermission):
    """
    Les collaborateurs externes ont un accès en lecture seule
    """
    message = "Accès en lecture seule pour les collaborateurs externes"

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return not tenant_from_request(request).is_external


class IsInternalMember(BasePermission):
    """
    Réservé aux membres de l'organisme (hors collaborateurs externes)
    """
    message = "Ressource réservée aux membres de l'organisme"

    def has_permission(self, request, view):
        return not tenant_from_request(request).is_external
