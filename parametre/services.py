"""
Annuaire des utilisateurs : création des comptes à droits restreints
"""
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
import logging

from shared.exceptions import Conflict, ValidationError
from .models import MembershipRole, OrganizationMembership

logger = logging.getLogger(__name__)


class UserDirectory:
    """Création et rattachement des utilisateurs aux organismes"""

    @staticmethod
    def _unique_username(email):
        base = email.split('@')[0][:140] or 'collaborateur'
        username = base
        suffix = 1
        while User.objects.filter(username=username).exists():
            suffix += 1
            username = f"{base}{suffix}"
        return username

    @classmethod
    def create_restricted_user(cls, name, email, password, organization_id,
                               role=MembershipRole.EXTERNAL_COLLABORATOR, indicator_access=None):
        """
        Crée (ou rattache) un utilisateur à droits restreints dans l'organisme.

        Un compte existant portant le même email est rattaché s'il n'appartient
        à aucun autre organisme, n'est pas déjà membre interne de celui-ci et
        si le mot de passe fourni est le sien.

        Returns:
            int: identifiant de l'utilisateur
        """
        email = email.strip().lower()
        indicator_access = [str(i) for i in (indicator_access or [])]

        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()
            if user is not None:
                other = OrganizationMembership.objects.filter(user=user).exclude(
                    organization_id=organization_id
                )
                if other.exists():
                    raise Conflict("Un compte existe déjà avec cet email dans un autre organisme")
                if cls.has_internal_membership(email, organization_id):
                    raise Conflict("Cet email appartient déjà à un membre de l'organisme")
                if not user.check_password(password):
                    raise ValidationError(details={'password': ["Mot de passe du compte existant incorrect"]})
            else:
                try:
                    validate_password(password)
                except DjangoValidationError as e:
                    raise ValidationError(details={'password': list(e.messages)})

                first_name, _, last_name = (name or '').strip().partition(' ')
                user = User.objects.create_user(
                    username=cls._unique_username(email),
                    email=email,
                    password=password,
                    first_name=first_name[:150],
                    last_name=last_name[:150],
                )
                logger.info(f"Utilisateur restreint créé: {user.username}")

            OrganizationMembership.objects.update_or_create(
                user=user,
                organization_id=organization_id,
                defaults={
                    'role': role,
                    'indicator_access': indicator_access,
                    'is_active': True,
                }
            )
        return user.id

    @staticmethod
    def deactivate_membership(user_id, organization_id):
        """Retire l'accès d'un utilisateur à l'organisme"""
        updated = OrganizationMembership.objects.filter(
            user_id=user_id,
            organization_id=organization_id
        ).update(is_active=False)
        if updated:
            logger.info(f"Accès désactivé pour l'utilisateur {user_id}")
        return bool(updated)

    @staticmethod
    def is_member(user_id, organization_id):
        return OrganizationMembership.objects.filter(
            user_id=user_id,
            organization_id=organization_id,
            is_active=True
        ).exists()

    @staticmethod
    def has_internal_membership(email, organization_id):
        """Vrai si l'email correspond à un membre actif non externe de l'organisme"""
        return OrganizationMembership.objects.filter(
            user__email__iexact=email.strip(),
            organization_id=organization_id,
            is_active=True
        ).exclude(role=MembershipRole.EXTERNAL_COLLABORATOR).exists()
