from django.utils.deprecation import MiddlewareMixin
import logging

from .authentication import ACCESS_COOKIE

logger = logging.getLogger(__name__)


class JWTCookieMiddleware(MiddlewareMixin):
    """
    Réécrit le cookie d'accès lorsque CookieJWTAuthentication a rafraîchi le token
    """

    def process_response(self, request, response):
        new_access_token = getattr(request, '_new_access_token', None)
        if new_access_token:
            response.set_cookie(
                ACCESS_COOKIE,
                new_access_token,
                max_age=3600,
                httponly=True,
                samesite='Lax',
                secure=False  # True en production avec HTTPS
            )
            logger.debug("Nouveau access token ajouté au cookie")
        return response
