"""
Outils communs aux tests : organismes, utilisateurs, horloge figée et stockage en mémoire
"""
from datetime import datetime

from django.contrib.auth.models import User
from django.core.files.storage import InMemoryStorage

from parametre.models import MembershipRole, Organization, OrganizationMembership
from shared.clock import FixedClock
from shared.storage import FileStore
from shared.tenancy import TenantContext

DEFAULT_NOW = datetime(2025, 1, 15, 10, 0)


def make_clock(now=DEFAULT_NOW):
    return FixedClock(now)


def make_org(slug='organisme-a', name=None):
    return Organization.objects.create(slug=slug, name=name or slug.replace('-', ' ').title())


def make_user(organization, username='alice', role=MembershipRole.ADMIN, indicator_access=None,
              password='MotDePasse!2025'):
    user = User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password=password,
        first_name=username.title(),
    )
    OrganizationMembership.objects.create(
        user=user,
        organization=organization,
        role=role,
        indicator_access=[str(i) for i in (indicator_access or [])],
    )
    return user


def tenant_for(organization, user=None, role=MembershipRole.ADMIN, indicator_access=()):
    return TenantContext(
        organization_id=organization.pk,
        actor_id=user.id if user else None,
        role=role,
        indicator_access=tuple(str(i) for i in indicator_access),
    )


def memory_file_store():
    return FileStore(storage=InMemoryStorage(base_url='/medias/'))


class FailingDeleteStorage(InMemoryStorage):
    """Stockage dont la suppression échoue"""

    def delete(self, name):
        raise OSError("stockage indisponible")


class FailingSaveStorage(InMemoryStorage):
    """Stockage dont l'écriture échoue"""

    def _save(self, name, content):
        raise OSError("disque plein")
