"""
Envoi de l'email d'invitation
"""
from django.conf import settings
from django.core.mail import send_mail
from django.dispatch import receiver
import logging

from .signals import invitation_sent

logger = logging.getLogger(__name__)


def build_accept_url(invitation):
    base = getattr(settings, 'QUALITE', {}).get('INVITATION_ACCEPT_URL', '')
    return f"{base}?token={invitation.token}"


@receiver(invitation_sent)
def send_invitation_email(sender, invitation, resent=False, **kwargs):
    """
    Envoie le lien d'acceptation au collaborateur. Un échec d'envoi est
    journalisé ; l'invitation reste valide et peut être renvoyée.
    """
    subject = f"Invitation à collaborer - {invitation.organization.name}"
    text_body = (
        f"Bonjour {invitation.name},\n\n"
        f"{invitation.organization.name} vous invite à consulter son espace qualité Qualiopi.\n"
        f"Pour accepter l'invitation, suivez ce lien : {build_accept_url(invitation)}\n\n"
        f"Cette invitation expire le {invitation.expires_at:%d/%m/%Y à %H:%M}."
    )
    try:
        send_mail(
            subject=subject,
            message=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[invitation.email],
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f"Erreur lors de l'envoi de l'invitation à {invitation.email}: {e}")
        return False

    logger.info(f"Invitation {'renvoyée' if resent else 'envoyée'} à {invitation.email}")
    return True
