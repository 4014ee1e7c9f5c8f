from datetime import datetime, time, timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from apps.bookings.models import Booking, BookingStatus
from apps.bookings.projection import sunday_based_weekday
from apps.core.tests.fixtures import add_member, make_client, make_organization, make_session, make_user
from apps.organizations.models import MembershipRole


class BookingApiTests(TestCase):
    def setUp(self):
        self.org = make_organization()
        self.owner = make_user('owner')
        add_member(self.owner, self.org, MembershipRole.OWNER)
        # Always a future occurrence: tomorrow 09:00-10:00 local
        self.day = timezone.localdate() + timedelta(days=1)
        self.session = make_session(self.org, slots=1, timetable=[(sunday_based_weekday(self.day), '09:00', '10:00')])
        self.alice = make_client(self.org, 'alice@example.com')
        self.bob = make_client(self.org, 'bob@example.com')
        self.start = timezone.make_aware(datetime.combine(self.day, time(9, 0)))
        self.end = self.start + timedelta(hours=1)
        self.client.force_login(self.owner)

    def post_booking(self, client):
        return self.client.post(
            reverse('bookings:api_create'),
            data={
                'session_id': str(self.session.id),
                'client_id': str(client.id),
                'start_time': self.start.isoformat(),
                'end_time': self.end.isoformat(),
            },
            content_type='application/json',
        )

    def test_create_returns_201(self):
        response = self.post_booking(self.alice)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['status'], BookingStatus.CONFIRMED)
        self.assertEqual(Booking.objects.count(), 1)

    def test_capacity_error_maps_to_409(self):
        self.post_booking(self.alice)
        response = self.post_booking(self.bob)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'capacity_exceeded')

    def test_invalid_json_is_400(self):
        response = self.client.post(reverse('bookings:api_create'), data='{', content_type='application/json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'validation_error')

    def test_anonymous_gets_401(self):
        self.client.logout()
        self.assertEqual(self.post_booking(self.alice).status_code, 401)

    def test_status_change_and_check_in(self):
        booking_id = self.post_booking(self.alice).json()['id']
        response = self.client.post(
            reverse('bookings:api_status', args=[booking_id]),
            data={'status': 'CANCELLED', 'reason': 'moved'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'CANCELLED')

        response = self.client.post(reverse('bookings:api_check_in', args=[booking_id]))
        self.assertEqual(response.status_code, 404)

    def test_check_in_before_the_day_is_400(self):
        booking_id = self.post_booking(self.alice).json()['id']
        response = self.client.post(reverse('bookings:api_check_in', args=[booking_id]))
        self.assertEqual(response.status_code, 400)

    def test_session_availability(self):
        self.post_booking(self.alice)
        response = self.client.get(
            reverse('bookings:api_session_availability', args=[self.session.id]),
            {'date': self.day.isoformat()},
        )
        self.assertEqual(response.status_code, 200)
        slot = response.json()['slots'][0]
        self.assertEqual((slot['booked'], slot['remaining']), (1, 0))

    def test_bad_date_parameter(self):
        response = self.client.get(
            reverse('bookings:api_session_availability', args=[self.session.id]), {'date': '07/01/2030'},
        )
        self.assertEqual(response.status_code, 400)

    def test_space_availability_defaults_to_callers_organization(self):
        response = self.client.get(reverse('bookings:api_availability'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['spaces'], [])

    def test_todays_booking_not_found(self):
        response = self.client.get(reverse('bookings:api_todays_booking', args=[self.alice.id]))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['code'], 'not_found')

    def test_my_bookings(self):
        member = make_user('alice', 'alice@example.com')
        add_member(member, self.org, MembershipRole.CLIENT)
        self.alice.user = member
        self.alice.save()
        self.post_booking(self.alice)

        self.client.force_login(member)
        response = self.client.get(reverse('bookings:api_my'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()['bookings']), 1)
