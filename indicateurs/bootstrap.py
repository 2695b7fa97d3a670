"""
Initialisation du module qualité d'un nouvel organisme
"""
from django.db import IntegrityError, transaction
import logging

from shared.clock import get_clock
from shared.exceptions import Conflict
from shared.tenancy import scoped
from .catalogue import INDICATEURS
from .models import INDICATOR_COUNT, Indicator, IndicatorStatus

logger = logging.getLogger(__name__)

ALREADY_INITIALIZED = 'ALREADY_INITIALIZED'


class InitializationBootstrap:
    """
    Crée les 32 indicateurs et les catégories d'actions par défaut.
    Une seconde initialisation est refusée.
    """

    def __init__(self, action_board=None, clock=None):
        from pac.services import ActionBoard

        self.clock = clock or get_clock()
        self.action_board = action_board or ActionBoard(clock=self.clock)

    def initialize(self, tenant):
        with transaction.atomic():
            if scoped(Indicator.objects.all(), tenant).exists():
                raise Conflict("Le système qualité est déjà initialisé", code=ALREADY_INITIALIZED)

            now = self.clock.now()
            try:
                with transaction.atomic():
                    indicators = Indicator.objects.bulk_create([
                        Indicator(
                            organization_id=tenant.organization_id,
                            number=number,
                            title=title,
                            description=description,
                            category=category,
                            status=IndicatorStatus.NOT_STARTED,
                            completion_rate=0,
                            last_updated=now,
                        )
                        for number, title, description, category in INDICATEURS
                    ])
            except IntegrityError:
                logger.warning(f"Initialisation concurrente détectée pour l'organisme {tenant.organization_id}")
                raise Conflict("Le système qualité est déjà initialisé", code=ALREADY_INITIALIZED)

            categories = self.action_board.seed_default_categories(tenant)

        logger.info(
            f"Système qualité initialisé pour l'organisme {tenant.organization_id}: "
            f"{len(indicators)} indicateurs, {len(categories)} catégories"
        )
        return {'indicators': len(indicators), 'categories': len(categories)}

    def status(self, tenant):
        from pac.models import ActionCategory
        from pac.services import DEFAULT_ACTION_CATEGORIES

        indicators = scoped(Indicator.objects.all(), tenant).count()
        categories = scoped(ActionCategory.objects.all(), tenant).count()
        return {
            'initialized': indicators >= INDICATOR_COUNT and categories >= len(DEFAULT_ACTION_CATEGORIES),
            'indicators': indicators,
            'categories': categories,
        }
