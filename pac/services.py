"""
Tableau des actions qualité (actions correctives et d'amélioration)
"""
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
import logging

from parametre.services import UserDirectory
from shared.clock import get_clock
from shared.exceptions import Conflict, InvalidOperation, ValidationError, validate_payload
from shared.pagination import paginate
from shared.tenancy import get_scoped, scoped
from .models import (
    DEFAULT_CATEGORY_COLOR, OPEN_ACTION_STATUSES, Action, ActionCategory,
    ActionPriority, ActionStatus
)
from .serializers import ActionCategoryInputSerializer, ActionInputSerializer

logger = logging.getLogger(__name__)

# Catégories créées à l'initialisation d'un organisme (libellé, couleur)
DEFAULT_ACTION_CATEGORIES = [
    ('Veille', '#3f5ea9'),
    ('Amélioration Continue', '#3f5ea9'),
    ('Plan développement de compétences', '#3f5ea9'),
    ('Questions Handicap', '#6a90b9'),
    ('Gestion Des Disfonctionnements', '#3f5ea9'),
]


class ActionBoard:
    """Gestion des actions et de leurs catégories, toujours filtrées par organisme"""

    def __init__(self, clock=None):
        self.clock = clock or get_clock()

    def queryset(self, tenant):
        return scoped(Action.objects.select_related('category', 'assigned_to'), tenant)

    # ----- Actions -----

    def list(self, tenant, category=None, priority=None, status=None, assigned_to=None,
             overdue=None, search=None, page=None, limit=None):
        queryset = self.queryset(tenant)

        if category:
            queryset = queryset.filter(category__label=category)
        if priority:
            if priority not in ActionPriority.values:
                raise ValidationError(details={'priority': [f"Priorité inconnue: {priority}"]})
            queryset = queryset.filter(priority=priority)
        if status:
            if status not in ActionStatus.values:
                raise ValidationError(details={'status': [f"Statut inconnu: {status}"]})
            queryset = queryset.filter(status=status)
        if assigned_to:
            queryset = queryset.filter(assigned_to_id=assigned_to)
        if overdue:
            queryset = queryset.filter(status__in=OPEN_ACTION_STATUSES, due_date__lt=self.clock.today())
        if search:
            queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))

        return paginate(queryset.order_by('-created_at'), page, limit)

    def overdue(self, tenant):
        return self.queryset(tenant).filter(
            status__in=OPEN_ACTION_STATUSES,
            due_date__lt=self.clock.today()
        )

    def get(self, tenant, action_id):
        return get_scoped(self.queryset(tenant), tenant, "Action introuvable", uuid=action_id)

    def create(self, tenant, payload):
        data = dict(validate_payload(ActionInputSerializer, payload))

        with transaction.atomic():
            category, _ = self.find_or_create_category(
                tenant, data.pop('category'), data.pop('category_color', None)
            )
            assignee_id = self._resolve_assignee(tenant, data.pop('assigned_to', None))
            action = Action.objects.create(
                organization_id=tenant.organization_id,
                category=category,
                assigned_to_id=assignee_id,
                created_by_id=tenant.actor_id,
                **data
            )

        logger.info(f"Action créée: {action.title} (catégorie {category.label})")
        return action

    def update(self, tenant, action_id, patch):
        data = dict(validate_payload(ActionInputSerializer, patch, partial=True))
        action = self.get(tenant, action_id)

        with transaction.atomic():
            if 'category' in data:
                action.category, _ = self.find_or_create_category(
                    tenant, data.pop('category'), data.pop('category_color', None)
                )
            data.pop('category_color', None)
            if 'assigned_to' in data:
                action.assigned_to_id = self._resolve_assignee(tenant, data.pop('assigned_to'))
            for field, value in data.items():
                setattr(action, field, value)
            action.save()

        logger.info(f"Action mise à jour: {action.title} (statut {action.status})")
        return action

    def delete(self, tenant, action_id):
        action = self.get(tenant, action_id)
        title = action.title
        action.delete()
        logger.info(f"Action supprimée: {title}")

    def _resolve_assignee(self, tenant, user_id):
        if user_id is None:
            return None
        if not UserDirectory.is_member(user_id, tenant.organization_id):
            raise ValidationError(details={'assigned_to': ["Utilisateur inconnu dans cet organisme"]})
        return user_id

    # ----- Catégories -----

    def find_or_create_category(self, tenant, label, color=None):
        """
        Retourne (catégorie, créée). Une insertion concurrente du même libellé
        est résolue en relisant la ligne existante.
        """
        label = (label or '').strip()
        if not label:
            raise ValidationError(details={'category': ["La catégorie est requise"]})

        lookup = {'organization_id': tenant.organization_id, 'label': label}
        try:
            with transaction.atomic():
                category, created = ActionCategory.objects.get_or_create(
                    **lookup,
                    defaults={'color': color or DEFAULT_CATEGORY_COLOR}
                )
        except IntegrityError:
            category, created = ActionCategory.objects.get(**lookup), False

        if created:
            logger.info(f"Catégorie d'action créée: {label}")
        return category, created

    def list_categories(self, tenant):
        return (
            scoped(ActionCategory.objects.all(), tenant)
            .annotate(action_count=Count('actions'))
            .order_by('created_at', 'label')
        )

    def get_category(self, tenant, category_id):
        return get_scoped(ActionCategory.objects.all(), tenant, "Catégorie introuvable", uuid=category_id)

    def create_category(self, tenant, payload):
        data = validate_payload(ActionCategoryInputSerializer, payload)
        try:
            with transaction.atomic():
                category = ActionCategory.objects.create(
                    organization_id=tenant.organization_id,
                    label=data['label'],
                    color=data.get('color', DEFAULT_CATEGORY_COLOR)
                )
        except IntegrityError:
            raise Conflict(f"La catégorie « {data['label']} » existe déjà")
        logger.info(f"Catégorie d'action créée: {category.label}")
        return category

    def update_category(self, tenant, category_id, payload):
        data = validate_payload(ActionCategoryInputSerializer, payload, partial=True)
        category = self.get_category(tenant, category_id)
        for field, value in data.items():
            setattr(category, field, value)
        try:
            with transaction.atomic():
                category.save()
        except IntegrityError:
            raise Conflict(f"La catégorie « {data.get('label')} » existe déjà")
        return category

    def delete_category(self, tenant, category_id):
        category = self.get_category(tenant, category_id)
        count = category.actions.count()
        if count > 0:
            raise InvalidOperation(
                f"Impossible de supprimer la catégorie « {category.label} » : {count} action(s) associée(s)"
            )
        category.delete()
        logger.info(f"Catégorie d'action supprimée: {category.label}")

    def seed_default_categories(self, tenant):
        return [
            self.find_or_create_category(tenant, label, color)[0]
            for label, color in DEFAULT_ACTION_CATEGORIES
        ]

    def counts(self, tenant):
        """Compteurs utilisés par le tableau de bord et les statistiques"""
        queryset = scoped(Action.objects.all(), tenant)
        today = self.clock.today()
        return queryset.aggregate(
            total=Count('uuid'),
            pending=Count('uuid', filter=Q(status=ActionStatus.PENDING)),
            in_progress=Count('uuid', filter=Q(status=ActionStatus.IN_PROGRESS)),
            completed=Count('uuid', filter=Q(status=ActionStatus.COMPLETED)),
            cancelled=Count('uuid', filter=Q(status=ActionStatus.CANCELLED)),
            overdue=Count('uuid', filter=Q(status__in=OPEN_ACTION_STATUSES, due_date__lt=today)),
        )
