from datetime import timedelta

from django.contrib.auth.models import User
from django.core import mail
from django.test import TestCase

from indicateurs.bootstrap import InitializationBootstrap
from indicateurs.models import Indicator
from invitations.models import Invitation, InvitationStatus
from invitations.serializers import InvitationSerializer
from invitations.services import InvitationLifecycle
from parametre.models import MembershipRole, OrganizationMembership, QualitySettings
from shared.exceptions import Conflict, Expired, InvalidOperation, NotFound, ValidationError
from .helpers import make_clock, make_org, make_user, tenant_for

PASSWORD = 'Collaborat3ur!2025'


class InvitationLifecycleTests(TestCase):

    def setUp(self):
        self.clock = make_clock()
        self.organization = make_org()
        self.admin = make_user(self.organization)
        self.tenant = tenant_for(self.organization, self.admin)
        InitializationBootstrap(clock=self.clock).initialize(self.tenant)
        self.indicators = list(
            Indicator.objects.filter(organization=self.organization, number__in=[1, 2]).order_by('number')
        )
        self.lifecycle = InvitationLifecycle(clock=self.clock)

    def _invite(self, email='consultant@example.com'):
        return self.lifecycle.invite(
            self.tenant, email, 'Claire Martin', [str(i.uuid) for i in self.indicators]
        )

    def test_invite_creates_pending_invitation_and_sends_email(self):
        invitation = self._invite()

        self.assertEqual(invitation.status, InvitationStatus.PENDING)
        self.assertEqual(invitation.expires_at, self.clock.now() + timedelta(days=7))
        self.assertEqual(invitation.indicator_access, [str(i.uuid) for i in self.indicators])
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['consultant@example.com'])
        self.assertIn(invitation.token, mail.outbox[0].body)

    def test_invitation_validity_follows_organization_settings(self):
        QualitySettings.objects.update_or_create(
            organization=self.organization, defaults={'invitation_validity_days': 3}
        )

        invitation = self._invite()

        self.assertEqual(invitation.expires_at, self.clock.now() + timedelta(days=3))

    def test_duplicate_pending_invitation_is_a_conflict(self):
        self._invite()

        with self.assertRaises(Conflict):
            self._invite(email='Consultant@Example.com')

    def test_expired_pending_invitation_is_replaced(self):
        first = self._invite()
        self.clock.advance(timedelta(days=8))

        second = self._invite()

        first.refresh_from_db()
        self.assertEqual(first.status, InvitationStatus.REVOKED)
        self.assertEqual(second.status, InvitationStatus.PENDING)
        self.assertNotEqual(first.token, second.token)

    def test_unknown_indicator_is_rejected(self):
        foreign = InitializationBootstrap(clock=self.clock)
        other = tenant_for(make_org('organisme-b'))
        foreign.initialize(other)
        foreign_indicator = Indicator.objects.get(organization_id=other.organization_id, number=1)

        with self.assertRaises(ValidationError):
            self.lifecycle.invite(self.tenant, 'consultant@example.com', 'Claire', [str(foreign_indicator.uuid)])

    def test_accept_creates_restricted_account(self):
        invitation = self._invite()

        accepted = self.lifecycle.accept(invitation.token, PASSWORD)

        self.assertEqual(accepted.status, InvitationStatus.ACCEPTED)
        self.assertEqual(accepted.accepted_at, self.clock.now())
        user = User.objects.get(pk=accepted.accepted_user_id)
        self.assertEqual(user.email, 'consultant@example.com')
        self.assertTrue(user.check_password(PASSWORD))
        membership = OrganizationMembership.objects.get(user=user, organization=self.organization)
        self.assertEqual(membership.role, MembershipRole.EXTERNAL_COLLABORATOR)
        self.assertEqual(membership.indicator_access, invitation.indicator_access)

    def test_accept_twice_is_a_conflict(self):
        invitation = self._invite()
        self.lifecycle.accept(invitation.token, PASSWORD)

        with self.assertRaises(Conflict):
            self.lifecycle.accept(invitation.token, PASSWORD)

    def test_accept_after_expiry(self):
        invitation = self._invite()
        self.clock.advance(timedelta(days=7, seconds=1))

        with self.assertRaises(Expired):
            self.lifecycle.accept(invitation.token, PASSWORD)
        self.assertFalse(User.objects.filter(email='consultant@example.com').exists())

    def test_accept_unknown_token(self):
        with self.assertRaises(NotFound):
            self.lifecycle.accept('jeton-inconnu', PASSWORD)

    def test_accept_rejects_weak_password(self):
        invitation = self._invite()

        with self.assertRaises(ValidationError):
            self.lifecycle.accept(invitation.token, '123')

        invitation.refresh_from_db()
        self.assertEqual(invitation.status, InvitationStatus.PENDING)

    def test_member_of_organization_cannot_be_invited(self):
        with self.assertRaises(Conflict):
            self._invite(email='Alice@Example.com')

        self.assertFalse(Invitation.objects.filter(email='alice@example.com').exists())

    def test_accept_never_demotes_a_member_who_joined_after_the_invitation(self):
        invitation = self._invite()
        make_user(self.organization, username='consultant', role=MembershipRole.ADMIN)

        with self.assertRaises(Conflict):
            self.lifecycle.accept(invitation.token, PASSWORD)

        membership = OrganizationMembership.objects.get(
            user__username='consultant', organization=self.organization
        )
        self.assertEqual(membership.role, MembershipRole.ADMIN)
        self.assertEqual(membership.indicator_access, [])
        invitation.refresh_from_db()
        self.assertEqual(invitation.status, InvitationStatus.PENDING)

    def test_accept_binds_existing_account_without_membership(self):
        existing = User.objects.create_user(
            username='claire', email='consultant@example.com', password=PASSWORD
        )
        invitation = self._invite()

        accepted = self.lifecycle.accept(invitation.token, PASSWORD)

        self.assertEqual(accepted.accepted_user_id, existing.id)
        self.assertEqual(User.objects.filter(email__iexact='consultant@example.com').count(), 1)
        membership = OrganizationMembership.objects.get(user=existing, organization=self.organization)
        self.assertEqual(membership.role, MembershipRole.EXTERNAL_COLLABORATOR)

    def test_accept_for_existing_account_requires_its_password(self):
        existing = User.objects.create_user(
            username='claire', email='consultant@example.com', password=PASSWORD
        )
        invitation = self._invite()

        with self.assertRaises(ValidationError):
            self.lifecycle.accept(invitation.token, 'Autre-Mot2Passe!')

        self.assertFalse(OrganizationMembership.objects.filter(user=existing).exists())
        invitation.refresh_from_db()
        self.assertEqual(invitation.status, InvitationStatus.PENDING)

    def test_accept_for_account_of_another_organization_is_a_conflict(self):
        make_user(make_org('organisme-b'), username='consultant')
        invitation = self._invite()

        with self.assertRaises(Conflict):
            self.lifecycle.accept(invitation.token, PASSWORD)

    def test_revoke_pending_invitation_blocks_acceptance(self):
        invitation = self._invite()

        self.lifecycle.revoke(self.tenant, invitation.uuid)

        with self.assertRaises(Conflict):
            self.lifecycle.accept(invitation.token, PASSWORD)

    def test_revoke_accepted_invitation_deactivates_membership(self):
        invitation = self._invite()
        accepted = self.lifecycle.accept(invitation.token, PASSWORD)

        self.lifecycle.revoke(self.tenant, invitation.uuid)

        membership = OrganizationMembership.objects.get(user_id=accepted.accepted_user_id)
        self.assertFalse(membership.is_active)
        with self.assertRaises(InvalidOperation):
            self.lifecycle.revoke(self.tenant, invitation.uuid)

    def test_resend_extends_expiry_and_sends_again(self):
        invitation = self._invite()
        self.clock.advance(timedelta(days=5))

        resent = self.lifecycle.resend(self.tenant, invitation.uuid)

        self.assertEqual(resent.expires_at, self.clock.now() + timedelta(days=7))
        self.assertEqual(len(mail.outbox), 2)

    def test_resend_only_pending(self):
        invitation = self._invite()
        self.lifecycle.revoke(self.tenant, invitation.uuid)

        with self.assertRaises(InvalidOperation):
            self.lifecycle.resend(self.tenant, invitation.uuid)

    def test_list_filters_expired(self):
        self._invite()
        self.clock.advance(timedelta(days=8))
        self._invite(email='auditeur@example.com')

        self.assertEqual(
            [i.email for i in self.lifecycle.list(self.tenant, status='expired')],
            ['consultant@example.com'],
        )
        self.assertEqual(
            [i.email for i in self.lifecycle.list(self.tenant, status='pending')],
            ['auditeur@example.com'],
        )

    def test_other_organization_cannot_revoke(self):
        invitation = self._invite()
        other = tenant_for(make_org('organisme-b'))

        with self.assertRaises(NotFound):
            self.lifecycle.revoke(other, invitation.uuid)


class InvitationSerializerTests(TestCase):

    def test_status_is_expired_once_deadline_passed_and_token_hidden(self):
        clock = make_clock()
        organization = make_org()
        invitation = Invitation.objects.create(
            organization=organization,
            email='consultant@example.com',
            name='Claire',
            token='jeton',
            expires_at=clock.now() + timedelta(days=1),
        )

        data = InvitationSerializer(invitation, context={'now': clock.advance(timedelta(days=2))}).data

        self.assertEqual(data['status'], 'expired')
        self.assertNotIn('token', data)
