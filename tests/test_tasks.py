from datetime import date
import uuid

from django.test import TestCase

from shared.exceptions import Conflict, InvalidOperation, NotFound, ValidationError
from taches.models import Task, TaskCategory, TaskCategoryType, TaskStatus
from taches.services import SYSTEM_TASK_CATEGORIES, TaskBoard
from .helpers import make_clock, make_org, make_user, tenant_for


class TaskBoardTests(TestCase):

    def setUp(self):
        self.organization = make_org()
        self.user = make_user(self.organization)
        self.tenant = tenant_for(self.organization, self.user)
        self.board = TaskBoard(clock=make_clock())
        self.category = self.board.create_category(self.tenant, {'name': 'Suivi des formateurs'})

    def _create(self, title, **overrides):
        payload = {'category_id': str(self.category.uuid), 'title': title}
        payload.update(overrides)
        return self.board.create(self.tenant, payload)

    def test_create_appends_to_category(self):
        first = self._create('Première')
        second = self._create('Seconde')

        self.assertEqual(first.position, 0)
        self.assertEqual(second.position, 1)
        self.assertEqual(second.created_by_id, self.user.id)

    def test_reorder_changes_list_order(self):
        task_5 = self._create('Tâche 5')
        task_7 = self._create('Tâche 7')

        self.board.reorder(self.tenant, [
            {'id': str(task_5.uuid), 'position': 1},
            {'id': str(task_7.uuid), 'position': 0},
        ])

        titles = [t.title for t in self.board.list(self.tenant)]
        self.assertEqual(titles, ['Tâche 7', 'Tâche 5'])

    def test_equal_positions_keep_submission_order(self):
        a = self._create('A')
        b = self._create('B')
        c = self._create('C')

        self.board.reorder(self.tenant, [
            {'id': str(c.uuid), 'position': 0},
            {'id': str(a.uuid), 'position': 0},
            {'id': str(b.uuid), 'position': 0},
        ])

        self.assertEqual([t.title for t in self.board.list(self.tenant)], ['C', 'A', 'B'])

    def test_tasks_outside_batch_follow_submitted_ones(self):
        a = self._create('A')
        b = self._create('B')
        c = self._create('C')
        self.board.reorder(self.tenant, [
            {'id': str(b.uuid), 'position': 1},
            {'id': str(a.uuid), 'position': 0},
            {'id': str(c.uuid), 'position': 2},
        ])

        self.board.reorder(self.tenant, [
            {'id': str(a.uuid), 'position': 2},
            {'id': str(c.uuid), 'position': 1},
        ])

        self.assertEqual([t.title for t in self.board.list(self.tenant)], ['C', 'B', 'A'])

    def test_duplicate_entry_later_wins(self):
        a = self._create('A')
        b = self._create('B')

        self.board.reorder(self.tenant, [
            {'id': str(a.uuid), 'position': 0},
            {'id': str(b.uuid), 'position': 1},
            {'id': str(a.uuid), 'position': 2},
        ])

        a.refresh_from_db()
        self.assertEqual(a.position, 2)
        self.assertEqual([t.title for t in self.board.list(self.tenant)], ['B', 'A'])

    def test_reorder_with_unknown_id_changes_nothing(self):
        a = self._create('A')
        b = self._create('B')

        with self.assertRaises(NotFound):
            self.board.reorder(self.tenant, [
                {'id': str(b.uuid), 'position': 0},
                {'id': str(uuid.uuid4()), 'position': 1},
            ])

        self.assertEqual([t.title for t in self.board.list(self.tenant)], ['A', 'B'])
        self.assertEqual(Task.objects.get(pk=a.pk).position, 0)

    def test_reorder_cannot_touch_another_organization(self):
        task = self._create('A')
        other_tenant = tenant_for(make_org('organisme-b'))

        with self.assertRaises(NotFound):
            self.board.reorder(other_tenant, [{'id': str(task.uuid), 'position': 3}])

    def test_archived_tasks_hidden_by_default(self):
        self._create('Active')
        self._create('Archivée', status='archived')

        self.assertEqual([t.title for t in self.board.list(self.tenant)], ['Active'])
        self.assertEqual(len(self.board.list(self.tenant, include_archived=True)), 2)

    def test_by_category(self):
        self._create('A')
        category, tasks = self.board.by_category(self.tenant, self.category.slug)

        self.assertEqual(category.pk, self.category.pk)
        self.assertEqual([t.title for t in tasks], ['A'])

    def test_checklist_is_validated(self):
        task = self._create('Checklist', checklist=[{'text': 'Vérifier', 'completed': True}, {'text': 'Signer'}])

        self.assertEqual(task.checklist_progress, {'total': 2, 'completed': 1})
        with self.assertRaises(ValidationError):
            self._create('Invalide', checklist=[{'completed': True}])

    def test_due_date_before_start_date_is_rejected(self):
        with self.assertRaises(ValidationError):
            self._create('Dates', start_date='2025-02-01', due_date='2025-01-01')

    def test_statistics(self):
        self._create('À faire', due_date=date(2025, 1, 1), priority='high')
        self._create('En cours', status='in_progress')
        self._create('Fait', status='done', due_date=date(2025, 1, 1))

        stats = self.board.statistics(self.tenant)

        self.assertEqual(stats['total'], 3)
        self.assertEqual(stats['todo'], 1)
        self.assertEqual(stats['in_progress'], 1)
        self.assertEqual(stats['done'], 1)
        self.assertEqual(stats['overdue'], 1)
        self.assertEqual(stats['by_priority']['high'], 1)
        self.assertEqual(stats['by_priority']['medium'], 2)
        self.assertEqual(stats['by_category'], [{'slug': 'suivi-des-formateurs', 'name': 'Suivi des formateurs', 'count': 3}])


class TaskCategoryTests(TestCase):

    def setUp(self):
        self.organization = make_org()
        self.tenant = tenant_for(self.organization)
        self.board = TaskBoard(clock=make_clock())

    def test_initialize_system_categories_is_idempotent(self):
        created = self.board.initialize_system_categories(self.tenant)
        again = self.board.initialize_system_categories(self.tenant)

        self.assertEqual(len(created), len(SYSTEM_TASK_CATEGORIES))
        self.assertEqual(again, [])
        self.assertEqual(
            TaskCategory.objects.filter(organization=self.organization, is_system=True).count(),
            len(SYSTEM_TASK_CATEGORIES)
        )

    def test_system_category_cannot_be_updated_or_deleted(self):
        self.board.initialize_system_categories(self.tenant)
        veille = TaskCategory.objects.get(organization=self.organization, type=TaskCategoryType.VEILLE)

        with self.assertRaises(InvalidOperation) as ctx:
            self.board.update_category(self.tenant, veille.uuid, {'name': 'Veille renommée'})
        self.assertEqual(ctx.exception.code, 'SYSTEM_CATEGORY_PROTECTED')
        self.assertEqual(ctx.exception.status_code, 403)

        with self.assertRaises(InvalidOperation):
            self.board.delete_category(self.tenant, veille.uuid)
        self.assertTrue(TaskCategory.objects.filter(pk=veille.pk).exists())

    def test_custom_category_slug_and_conflict(self):
        category = self.board.create_category(self.tenant, {'name': 'Qualité des formations'})

        self.assertEqual(category.slug, 'qualite-des-formations')
        self.assertEqual(category.type, TaskCategoryType.CUSTOM)
        self.assertFalse(category.is_system)
        with self.assertRaises(Conflict):
            self.board.create_category(self.tenant, {'name': 'Qualité des Formations'})

    def test_category_with_tasks_cannot_be_deleted(self):
        category = self.board.create_category(self.tenant, {'name': 'Divers'})
        self.board.create(self.tenant, {'category_id': str(category.uuid), 'title': 'Tâche'})

        with self.assertRaises(InvalidOperation):
            self.board.delete_category(self.tenant, category.uuid)

    def test_list_categories_counts_tasks(self):
        category = self.board.create_category(self.tenant, {'name': 'Divers'})
        self.board.create(self.tenant, {'category_id': str(category.uuid), 'title': 'Tâche'})
        self.board.create(self.tenant, {
            'category_id': str(category.uuid), 'title': 'Archivée', 'status': TaskStatus.ARCHIVED
        })

        listed = self.board.list_categories(self.tenant).get(pk=category.pk)
        self.assertEqual(listed.tasks_count, 2)

    def test_system_categories_seeded_next_to_custom_category_with_same_name(self):
        custom = self.board.create_category(self.tenant, {'name': 'Veille'})

        created = self.board.initialize_system_categories(self.tenant)

        self.assertEqual(len(created), len(SYSTEM_TASK_CATEGORIES))
        veille = TaskCategory.objects.get(
            organization=self.organization, type=TaskCategoryType.VEILLE, is_system=True
        )
        self.assertEqual(veille.slug, 'veille-systeme')
        custom.refresh_from_db()
        self.assertEqual(custom.slug, 'veille')
        self.assertFalse(custom.is_system)
        self.assertEqual(self.board.initialize_system_categories(self.tenant), [])

    def test_rename_to_name_without_alphanumeric_is_rejected(self):
        category = self.board.create_category(self.tenant, {'name': 'Divers'})

        with self.assertRaises(ValidationError):
            self.board.update_category(self.tenant, category.uuid, {'name': '!!!'})

        category.refresh_from_db()
        self.assertEqual(category.slug, 'divers')
