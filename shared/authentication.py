"""
Authentification JWT par cookies
"""
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework.exceptions import AuthenticationFailed
import logging

logger = logging.getLogger(__name__)

ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'


class CookieJWTAuthentication(JWTAuthentication):
    """
    Lit le token d'accès dans le cookie, tente un rafraîchissement avec le
    refresh token s'il est expiré, puis se rabat sur l'en-tête Authorization.
    """

    def authenticate(self, request):
        access_token = request.COOKIES.get(ACCESS_COOKIE)

        if access_token:
            try:
                validated_token = self.get_validated_token(access_token)
                return (self.get_user(validated_token), validated_token)
            except AuthenticationFailed as e:
                logger.warning(f"Utilisateur du token introuvable: {e}")
            except (InvalidToken, TokenError) as e:
                logger.debug(f"Token d'accès invalide depuis le cookie: {e}")
                refreshed = self._authenticate_with_refresh(request)
                if refreshed:
                    return refreshed

        return super().authenticate(request)

    def _authenticate_with_refresh(self, request):
        refresh_token = request.COOKIES.get(REFRESH_COOKIE)
        if not refresh_token:
            return None
        try:
            new_access_token = str(RefreshToken(refresh_token).access_token)
            validated_token = self.get_validated_token(new_access_token)
            user = self.get_user(validated_token)
        except AuthenticationFailed as e:
            logger.warning(f"Utilisateur introuvable après rafraîchissement: {e}")
            return None
        except (InvalidToken, TokenError) as e:
            logger.warning(f"Refresh token invalide: {e}")
            return None
        # Repris par JWTCookieMiddleware pour mettre à jour le cookie
        getattr(request, '_request', request)._new_access_token = new_access_token
        logger.debug(f"Token rafraîchi pour {user.username}")
        return (user, validated_token)


class AuthService:
    """Service d'authentification partagé"""

    @staticmethod
    def create_tokens(user):
        """
        Créer les tokens JWT pour un utilisateur

        Returns:
            tuple: (access_token, refresh_token)
        """
        refresh = RefreshToken.for_user(user)
        return str(refresh.access_token), str(refresh)

    @staticmethod
    def set_auth_cookies(response, access_token, refresh_token):
        """Définir les cookies d'authentification sur la réponse"""
        response.set_cookie(
            ACCESS_COOKIE,
            access_token,
            max_age=60 * 60,
            httponly=True,
            secure=False,  # True en production avec HTTPS
            samesite='Lax',
            path='/'
        )
        response.set_cookie(
            REFRESH_COOKIE,
            refresh_token,
            max_age=7 * 24 * 60 * 60,
            httponly=True,
            secure=False,
            samesite='Lax',
            path='/'
        )
        return response
