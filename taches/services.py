"""
Tableau Kanban des tâches qualité et de leurs catégories
"""
from django.db import IntegrityError, transaction
from django.db.models import Count, Max, Q
from django.utils.text import slugify
import logging
import uuid

from parametre.services import UserDirectory
from shared.clock import get_clock
from shared.exceptions import Conflict, InvalidOperation, NotFound, ValidationError, validate_payload
from shared.tenancy import get_scoped, scoped
from .models import (
    OPEN_TASK_STATUSES, Task, TaskCategory, TaskCategoryType, TaskPriority, TaskStatus
)
from .serializers import ReorderSerializer, TaskCategoryInputSerializer, TaskInputSerializer

logger = logging.getLogger(__name__)

# Catégories système : (type, nom, couleur, icône)
SYSTEM_TASK_CATEGORIES = [
    (TaskCategoryType.VEILLE, 'Veille', '#3f5ea9', 'eye'),
    (TaskCategoryType.COMPETENCE, 'Plan de développement des compétences', '#3f5ea9', 'graduation-cap'),
    (TaskCategoryType.DYSFONCTIONNEMENT, 'Gestion des dysfonctionnements', '#3f5ea9', 'alert-triangle'),
    (TaskCategoryType.AMELIORATION, 'Amélioration continue', '#3f5ea9', 'trending-up'),
    (TaskCategoryType.HANDICAP, 'Questions handicap', '#6a90b9', 'accessibility'),
]

BOARD_ORDERING = ('category__created_at', 'category_id', 'position', 'position_order', 'uuid')


class TaskBoard:
    """Gestion des tâches et des catégories de tâches d'un organisme"""

    def __init__(self, clock=None):
        self.clock = clock or get_clock()

    def queryset(self, tenant):
        return scoped(Task.objects.select_related('category', 'assigned_to'), tenant)

    # ----- Tâches -----

    def list(self, tenant, category=None, status=None, priority=None, assigned_to=None,
             include_archived=False):
        queryset = self.queryset(tenant)

        if category:
            queryset = queryset.filter(Q(category__slug=category) | Q(category__uuid__in=_uuids(category)))
        if status:
            if status not in TaskStatus.values:
                raise ValidationError(details={'status': [f"Statut inconnu: {status}"]})
            queryset = queryset.filter(status=status)
        elif not include_archived:
            queryset = queryset.exclude(status=TaskStatus.ARCHIVED)
        if priority:
            if priority not in TaskPriority.values:
                raise ValidationError(details={'priority': [f"Priorité inconnue: {priority}"]})
            queryset = queryset.filter(priority=priority)
        if assigned_to:
            queryset = queryset.filter(assigned_to_id=assigned_to)

        return queryset.order_by(*BOARD_ORDERING)

    def by_category(self, tenant, slug, include_archived=False):
        category = get_scoped(TaskCategory.objects.all(), tenant, "Catégorie introuvable", slug=slug)
        queryset = self.queryset(tenant).filter(category=category)
        if not include_archived:
            queryset = queryset.exclude(status=TaskStatus.ARCHIVED)
        return category, queryset.order_by(*BOARD_ORDERING)

    def get(self, tenant, task_id):
        return get_scoped(self.queryset(tenant), tenant, "Tâche introuvable", uuid=task_id)

    def create(self, tenant, payload):
        data = dict(validate_payload(TaskInputSerializer, payload))
        category = self.get_category(tenant, data.pop('category_id'))
        data['assigned_to_id'] = self._resolve_assignee(tenant, data.pop('assigned_to', None))

        with transaction.atomic():
            if 'position' not in data:
                last = scoped(Task.objects.filter(category=category), tenant).aggregate(Max('position'))
                data['position'] = (last['position__max'] if last['position__max'] is not None else -1) + 1
            task = Task.objects.create(
                organization_id=tenant.organization_id,
                category=category,
                created_by_id=tenant.actor_id,
                **data
            )

        logger.info(f"Tâche créée: {task.title} ({category.slug}, position {task.position})")
        return task

    def update(self, tenant, task_id, patch):
        data = dict(validate_payload(TaskInputSerializer, patch, partial=True))
        task = self.get(tenant, task_id)

        if 'category_id' in data:
            task.category = self.get_category(tenant, data.pop('category_id'))
        if 'assigned_to' in data:
            task.assigned_to_id = self._resolve_assignee(tenant, data.pop('assigned_to'))
        for field, value in data.items():
            setattr(task, field, value)

        start, due = task.start_date, task.due_date
        if start and due and due < start:
            raise ValidationError(details={'due_date': ["L'échéance doit suivre la date de début"]})

        task.save()
        logger.info(f"Tâche mise à jour: {task.title} (statut {task.status})")
        return task

    def reorder(self, tenant, positions):
        """
        Applique un lot de positions [{id, position, category_id?}] en une transaction.
        À position égale, l'ordre de soumission est conservé ; un identifiant
        répété prend la valeur de sa dernière occurrence.
        """
        items = validate_payload(ReorderSerializer, {'tasks': positions})['tasks']

        latest = {}
        for index, item in enumerate(items):
            latest[item['id']] = (index, item)

        with transaction.atomic():
            tasks = {
                task.uuid: task
                for task in scoped(Task.objects.select_for_update(), tenant).filter(uuid__in=latest.keys())
            }
            missing = [str(task_id) for task_id in latest if task_id not in tasks]
            if missing:
                raise NotFound(f"Tâche introuvable: {', '.join(missing)}")
            previous_categories = {task.category_id for task in tasks.values()}

            categories = {}
            for task_id, (index, item) in latest.items():
                task = tasks[task_id]
                task.position = item['position']
                task.position_order = index
                category_id = item.get('category_id')
                if category_id and category_id != task.category_id:
                    if category_id not in categories:
                        categories[category_id] = self.get_category(tenant, category_id)
                    task.category = categories[category_id]
            Task.objects.bulk_update(tasks.values(), ['position', 'position_order', 'category'])
            # Hors lot, les tâches passent après celles soumises à position égale
            affected = {task.category_id for task in tasks.values()} | previous_categories
            scoped(Task.objects.filter(category_id__in=affected), tenant).exclude(
                uuid__in=tasks.keys()
            ).update(position_order=len(items))

        logger.info(f"Réordonnancement de {len(tasks)} tâche(s)")
        return list(tasks.values())

    def delete(self, tenant, task_id):
        task = self.get(tenant, task_id)
        title = task.title
        task.delete()
        logger.info(f"Tâche supprimée: {title}")

    def statistics(self, tenant):
        queryset = scoped(Task.objects.all(), tenant)
        today = self.clock.today()
        stats = queryset.aggregate(
            total=Count('uuid'),
            todo=Count('uuid', filter=Q(status=TaskStatus.TODO)),
            in_progress=Count('uuid', filter=Q(status=TaskStatus.IN_PROGRESS)),
            done=Count('uuid', filter=Q(status=TaskStatus.DONE)),
            archived=Count('uuid', filter=Q(status=TaskStatus.ARCHIVED)),
            overdue=Count('uuid', filter=Q(status__in=OPEN_TASK_STATUSES, due_date__lt=today)),
        )
        by_priority = dict.fromkeys(TaskPriority.values, 0)
        for row in queryset.values('priority').annotate(count=Count('uuid')):
            by_priority[row['priority']] = row['count']
        stats['by_priority'] = by_priority
        stats['by_category'] = [
            {'slug': row['category__slug'], 'name': row['category__name'], 'count': row['count']}
            for row in queryset.values('category__slug', 'category__name')
            .annotate(count=Count('uuid')).order_by('category__name')
        ]
        return stats

    def counts(self, tenant):
        """Compteurs utilisés par les statistiques quotidiennes"""
        stats = self.statistics(tenant)
        return {
            'total': stats['total'],
            'completed': stats['done'],
            'pending': stats['todo'] + stats['in_progress'],
            'overdue': stats['overdue'],
        }

    def _resolve_assignee(self, tenant, user_id):
        if user_id is None:
            return None
        if not UserDirectory.is_member(user_id, tenant.organization_id):
            raise ValidationError(details={'assigned_to': ["Utilisateur inconnu dans cet organisme"]})
        return user_id

    # ----- Catégories -----

    def list_categories(self, tenant):
        return (
            scoped(TaskCategory.objects.all(), tenant)
            .annotate(tasks_count=Count('tasks'))
            .order_by('-is_system', 'created_at')
        )

    def get_category(self, tenant, category_id):
        return get_scoped(TaskCategory.objects.all(), tenant, "Catégorie introuvable", uuid=category_id)

    def create_category(self, tenant, payload):
        data = dict(validate_payload(TaskCategoryInputSerializer, payload))
        slug = slugify(data['name'])
        if not slug:
            raise ValidationError(details={'name': ["Le nom doit contenir au moins un caractère alphanumérique"]})
        data['indicator'] = self._resolve_indicator(tenant, data.pop('indicator_id', None))

        try:
            with transaction.atomic():
                category = TaskCategory.objects.create(
                    organization_id=tenant.organization_id,
                    slug=slug,
                    type=TaskCategoryType.CUSTOM,
                    is_system=False,
                    **data
                )
        except IntegrityError:
            raise Conflict(f"La catégorie « {data['name']} » existe déjà")

        logger.info(f"Catégorie de tâches créée: {category.name} ({category.slug})")
        return category

    def update_category(self, tenant, category_id, payload):
        data = dict(validate_payload(TaskCategoryInputSerializer, payload, partial=True))
        category = self.get_category(tenant, category_id)
        self._ensure_not_system(category, "modifiée")

        if 'indicator_id' in data:
            category.indicator = self._resolve_indicator(tenant, data.pop('indicator_id'))
        if 'name' in data:
            category.slug = slugify(data['name'])
            if not category.slug:
                raise ValidationError(details={'name': ["Le nom doit contenir au moins un caractère alphanumérique"]})
        for field, value in data.items():
            setattr(category, field, value)

        try:
            with transaction.atomic():
                category.save()
        except IntegrityError:
            raise Conflict(f"La catégorie « {category.name} » existe déjà")
        return category

    def delete_category(self, tenant, category_id):
        category = self.get_category(tenant, category_id)
        self._ensure_not_system(category, "supprimée")
        count = category.tasks.count()
        if count > 0:
            raise InvalidOperation(
                f"Impossible de supprimer la catégorie « {category.name} » : {count} tâche(s) associée(s)"
            )
        category.delete()
        logger.info(f"Catégorie de tâches supprimée: {category.name}")

    def initialize_system_categories(self, tenant):
        """Crée les catégories système manquantes ; sans effet si elles existent"""
        created = []
        for category_type, name, color, icon in SYSTEM_TASK_CATEGORIES:
            existing = scoped(TaskCategory.objects.filter(type=category_type, is_system=True), tenant)
            if existing.exists():
                continue
            # Une catégorie personnalisée peut déjà occuper le slug
            slug = slugify(name)
            if scoped(TaskCategory.objects.filter(slug=slug), tenant).exists():
                slug = f"{slug}-systeme"
            try:
                with transaction.atomic():
                    category = TaskCategory.objects.create(
                        organization_id=tenant.organization_id,
                        type=category_type,
                        is_system=True,
                        name=name,
                        slug=slug,
                        color=color,
                        icon=icon
                    )
            except IntegrityError:
                if existing.exists():
                    continue
                raise Conflict(f"Le slug « {slug} » est déjà utilisé par une autre catégorie")
            created.append(category)
        if created:
            logger.info(f"{len(created)} catégorie(s) système de tâches créée(s)")
        return created

    def _ensure_not_system(self, category, verb):
        if category.is_system:
            raise InvalidOperation(
                f"La catégorie système « {category.name} » ne peut pas être {verb}",
                code='SYSTEM_CATEGORY_PROTECTED',
                status_code=403
            )

    def _resolve_indicator(self, tenant, indicator_id):
        if indicator_id is None:
            return None
        from indicateurs.models import Indicator
        try:
            return scoped(Indicator.objects.all(), tenant).get(uuid=indicator_id)
        except Indicator.DoesNotExist:
            raise ValidationError(details={'indicator_id': ["Indicateur inconnu dans cet organisme"]})


def _uuids(value):
    try:
        return [uuid.UUID(str(value))]
    except ValueError:
        return []
