from django.core.management.base import BaseCommand, CommandError

from parametre.models import Organization
from shared.exceptions import Conflict
from shared.tenancy import TenantContext
from indicateurs.bootstrap import InitializationBootstrap


class Command(BaseCommand):
    help = "Initialise les 32 indicateurs Qualiopi et les catégories d'actions d'un ou plusieurs organismes"

    def add_arguments(self, parser):
        parser.add_argument('--organization', help="Slug de l'organisme à initialiser")
        parser.add_argument('--all', action='store_true', help='Initialiser tous les organismes actifs')

    def handle(self, *args, **options):
        if options['all']:
            organizations = Organization.objects.filter(is_active=True)
        elif options['organization']:
            organizations = Organization.objects.filter(slug=options['organization'])
            if not organizations.exists():
                raise CommandError(f"Organisme introuvable: {options['organization']}")
        else:
            raise CommandError("Préciser --organization <slug> ou --all")

        bootstrap = InitializationBootstrap()
        total_created = 0
        total_skipped = 0

        for organization in organizations:
            tenant = TenantContext(organization_id=organization.pk)
            try:
                result = bootstrap.initialize(tenant)
            except Conflict:
                total_skipped += 1
                self.stdout.write(self.style.WARNING(f'- Déjà initialisé: {organization.name}'))
                continue
            total_created += 1
            self.stdout.write(self.style.SUCCESS(
                f"✓ {organization.name}: {result['indicators']} indicateurs, {result['categories']} catégories"
            ))

        self.stdout.write(self.style.SUCCESS(
            f'\nTerminé: {total_created} organisme(s) initialisé(s), {total_skipped} ignoré(s)'
        ))
