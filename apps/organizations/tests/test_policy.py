from django.test import TestCase
from django.urls import reverse

from apps.core.exceptions import ForbiddenError, ValidationError
from apps.core.tests.fixtures import add_member, make_organization, make_user
from apps.organizations.models import MembershipRole
from apps.organizations.services import get_policy, update_policy


class PolicyServiceTests(TestCase):
    def setUp(self):
        self.org = make_organization()
        self.admin = make_user('admin')
        add_member(self.admin, self.org, MembershipRole.ADMIN)

    def test_defaults(self):
        self.assertEqual(get_policy(self.admin, self.org.id), {
            'booking_change_hours': None,
            'require_membership_for_booking': False,
        })

    def test_partial_update_keeps_other_fields(self):
        update_policy(self.admin, self.org.id, {'booking_change_hours': 24})
        policy = update_policy(self.admin, self.org.id, {'require_membership_for_booking': True})
        self.assertEqual(policy, {'booking_change_hours': 24, 'require_membership_for_booking': True})

    def test_change_hours_can_be_cleared(self):
        update_policy(self.admin, self.org.id, {'booking_change_hours': 24})
        self.assertIsNone(update_policy(self.admin, self.org.id, {'booking_change_hours': None})['booking_change_hours'])

    def test_rejects_bad_values(self):
        for data in ({'booking_change_hours': -1}, {'booking_change_hours': '24'},
                     {'booking_change_hours': True}, {'require_membership_for_booking': 'yes'}):
            with self.assertRaises(ValidationError):
                update_policy(self.admin, self.org.id, data)

    def test_clients_cannot_read_or_write(self):
        member = make_user('member')
        add_member(member, self.org, MembershipRole.CLIENT)
        with self.assertRaises(ForbiddenError):
            get_policy(member, self.org.id)
        with self.assertRaises(ForbiddenError):
            update_policy(member, self.org.id, {'booking_change_hours': 1})


class PolicyApiTests(TestCase):
    def setUp(self):
        self.org = make_organization()
        self.owner = make_user('owner')
        add_member(self.owner, self.org, MembershipRole.OWNER)
        self.client.force_login(self.owner)

    def test_get_and_post(self):
        url = reverse('organizations:api_policy')
        self.assertEqual(self.client.get(url).json()['booking_change_hours'], None)
        response = self.client.post(url, data={'booking_change_hours': 6}, content_type='application/json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['booking_change_hours'], 6)

    def test_validation_errors_carry_details(self):
        response = self.client.post(
            reverse('organizations:api_policy'),
            data={'booking_change_hours': -3},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('booking_change_hours', response.json()['details'])
