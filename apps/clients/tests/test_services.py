from django.test import TestCase
from django.urls import reverse

from apps.clients.services import get_client_summary, renew_membership, resolve_client_for_user, set_allowance
from apps.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from apps.core.tests.fixtures import add_member, make_client, make_organization, make_user
from apps.organizations.models import MembershipRole


class MembershipServiceTests(TestCase):
    def setUp(self):
        self.org = make_organization()
        self.owner = make_user('owner')
        add_member(self.owner, self.org, MembershipRole.OWNER)
        self.client_record = make_client(self.org, 'alice@example.com', session_allowance=2)

    def test_renew_adds_sessions(self):
        client = renew_membership(self.owner, self.client_record.id, 5)
        self.assertEqual(client.session_allowance, 7)

    def test_renew_keeps_unlimited(self):
        set_allowance(self.owner, self.client_record.id, None)
        client = renew_membership(self.owner, self.client_record.id, 5)
        self.assertIsNone(client.session_allowance)

    def test_renew_requires_positive_whole_number(self):
        for bad in (0, -2, '3', 1.5, None):
            with self.assertRaises(ValidationError):
                renew_membership(self.owner, self.client_record.id, bad)

    def test_renew_is_staff_only(self):
        member = make_user('member')
        add_member(member, self.org, MembershipRole.CLIENT)
        with self.assertRaises(ForbiddenError):
            renew_membership(member, self.client_record.id, 1)
        with self.assertRaises(NotFoundError):
            renew_membership(make_user('stranger'), self.client_record.id, 1)

    def test_summary(self):
        summary = get_client_summary(self.owner, self.client_record.id)
        self.assertEqual(summary['active_bookings'], 0)
        self.assertEqual(summary['remaining_sessions'], 2)

    def test_email_is_normalized(self):
        client = make_client(self.org, '  Bob@Example.COM ')
        self.assertEqual(client.email, 'bob@example.com')


class ResolveClientTests(TestCase):
    def setUp(self):
        self.org = make_organization()

    def test_links_existing_client_by_email(self):
        existing = make_client(self.org, 'carol@example.com')
        user = make_user('carol', 'Carol@example.com')
        self.assertEqual(resolve_client_for_user(user, self.org), existing)
        existing.refresh_from_db()
        self.assertEqual(existing.user, user)

    def test_creates_client_when_missing(self):
        user = make_user('dan', 'dan@example.com')
        client = resolve_client_for_user(user, self.org)
        self.assertEqual((client.email, client.name, client.user), ('dan@example.com', 'dan', user))
        self.assertEqual(resolve_client_for_user(user, self.org), client)

    def test_email_owned_by_another_login(self):
        make_client(self.org, 'eve@example.com', user=make_user('eve'))
        with self.assertRaises(ValidationError):
            resolve_client_for_user(make_user('eve2', 'eve@example.com'), self.org)

    def test_user_without_email(self):
        with self.assertRaises(ValidationError):
            resolve_client_for_user(make_user('noemail', ''), self.org)


class ClientApiTests(TestCase):
    def setUp(self):
        self.org = make_organization()
        self.owner = make_user('owner')
        add_member(self.owner, self.org, MembershipRole.OWNER)
        self.record = make_client(self.org, 'alice@example.com', session_allowance=1)
        self.client.force_login(self.owner)

    def test_detail_and_renew(self):
        response = self.client.get(reverse('clients:api_detail', args=[self.record.id]))
        self.assertEqual(response.json()['remaining_sessions'], 1)

        response = self.client.post(
            reverse('clients:api_renew', args=[self.record.id]),
            data={'sessions_to_add': 4},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['session_allowance'], 5)

    def test_renew_bad_amount_is_400(self):
        response = self.client.post(
            reverse('clients:api_renew', args=[self.record.id]),
            data={'sessions_to_add': 0},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 400)
