from datetime import date

from django.test import TestCase

from pac.models import Action, ActionCategory, ActionStatus
from pac.services import ActionBoard
from shared.exceptions import Conflict, InvalidOperation, NotFound, ValidationError
from .helpers import make_clock, make_org, make_user, tenant_for


class ActionBoardTests(TestCase):

    def setUp(self):
        self.organization = make_org()
        self.user = make_user(self.organization)
        self.tenant = tenant_for(self.organization, self.user)
        self.board = ActionBoard(clock=make_clock())

    def _create(self, **overrides):
        payload = {'category': 'Veille', 'title': 'Mettre à jour la veille réglementaire', 'priority': 'High'}
        payload.update(overrides)
        return self.board.create(self.tenant, payload)

    def test_find_or_create_category_reuses_existing_label(self):
        first, created = self.board.find_or_create_category(self.tenant, 'Veille')
        second, created_again = self.board.find_or_create_category(self.tenant, ' Veille ')

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(ActionCategory.objects.filter(organization=self.organization).count(), 1)

    def test_create_uses_category_label(self):
        self._create()
        self._create(title='Former les formateurs')

        self.assertEqual(ActionCategory.objects.count(), 1)
        self.assertEqual(Action.objects.filter(category__label='Veille').count(), 2)

    def test_update_with_new_category_label_creates_it(self):
        action = self._create()

        updated = self.board.update(self.tenant, action.uuid, {'category': 'Handicap', 'status': 'in_progress'})

        self.assertEqual(updated.category.label, 'Handicap')
        self.assertEqual(updated.status, ActionStatus.IN_PROGRESS)

    def test_assignee_must_belong_to_organization(self):
        outsider = make_user(make_org('organisme-b'), username='bob')

        with self.assertRaises(ValidationError):
            self._create(assigned_to=outsider.id)

    def test_category_with_actions_cannot_be_deleted(self):
        action = self._create()

        with self.assertRaises(InvalidOperation):
            self.board.delete_category(self.tenant, action.category.uuid)

        self.board.delete(self.tenant, action.uuid)
        self.board.delete_category(self.tenant, action.category.uuid)
        self.assertFalse(ActionCategory.objects.exists())

    def test_duplicate_category_label_conflicts(self):
        self.board.create_category(self.tenant, {'label': 'Veille'})
        with self.assertRaises(Conflict):
            self.board.create_category(self.tenant, {'label': 'Veille'})

    def test_same_label_in_two_organizations(self):
        other_tenant = tenant_for(make_org('organisme-b'))
        self.board.create_category(self.tenant, {'label': 'Veille'})
        self.board.create_category(other_tenant, {'label': 'Veille'})
        self.assertEqual(ActionCategory.objects.filter(label='Veille').count(), 2)

    def test_list_filters_and_paginates(self):
        for index in range(5):
            self._create(title=f'Action {index}', priority='Low' if index % 2 else 'High')

        page = self.board.list(self.tenant, priority='High', page=1, limit=2)

        self.assertEqual(page['totalItems'], 3)
        self.assertEqual(page['totalPages'], 2)
        self.assertEqual(page['currentPage'], 1)
        self.assertEqual(page['itemsPerPage'], 2)
        self.assertEqual(len(page['items']), 2)

    def test_pagination_rejects_invalid_limit(self):
        with self.assertRaises(ValidationError):
            self.board.list(self.tenant, limit=500)

    def test_overdue_actions(self):
        self._create(title='En retard', due_date=date(2025, 1, 10))
        self._create(title='À venir', due_date=date(2025, 2, 10))
        self._create(title='Terminée', due_date=date(2025, 1, 1), status='completed')

        overdue = self.board.overdue(self.tenant)

        self.assertEqual([a.title for a in overdue], ['En retard'])
        self.assertEqual(self.board.counts(self.tenant)['overdue'], 1)

    def test_get_from_another_organization_is_not_found(self):
        action = self._create()
        with self.assertRaises(NotFound):
            self.board.get(tenant_for(make_org('organisme-b')), action.uuid)
