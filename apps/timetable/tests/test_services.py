from django.test import TestCase
from django.urls import reverse

from apps.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from apps.core.tests.fixtures import add_member, make_organization, make_session, make_user
from apps.organizations.models import MembershipRole
from apps.timetable.models import ServiceSession, TimeSlotTemplate, Weekday
from apps.timetable.services import (
    add_time_slot,
    create_session,
    delete_session,
    list_sessions,
    remove_time_slot,
    update_session,
)


class SessionServiceTests(TestCase):
    def setUp(self):
        self.org = make_organization()
        self.owner = make_user('owner')
        add_member(self.owner, self.org, MembershipRole.OWNER)

    def test_create_with_defaults(self):
        session = create_session(self.owner, self.org.id, {'name': ' Pilates '})
        self.assertEqual(session.name, 'Pilates')
        self.assertEqual(session.slots, 1)
        self.assertEqual(session.theme_color, '#3B82F6')
        self.assertTrue(session.is_active)

    def test_create_rejects_bad_input(self):
        for data in ({'name': ''}, {'name': 'x', 'slots': 0}, {'name': 'x', 'theme_color': 'blue'}):
            with self.assertRaises(ValidationError):
                create_session(self.owner, self.org.id, data)

    def test_update_is_partial(self):
        session = make_session(self.org, name='Yoga', slots=4)
        session = update_session(self.owner, session.id, {'slots': 6})
        self.assertEqual((session.name, session.slots), ('Yoga', 6))
        session = update_session(self.owner, session.id, {'is_active': False})
        self.assertFalse(session.is_active)
        self.assertEqual(session.slots, 6)

    def test_delete_cascades_timetable(self):
        session = make_session(self.org)
        delete_session(self.owner, session.id)
        self.assertFalse(ServiceSession.objects.exists())
        self.assertFalse(TimeSlotTemplate.objects.exists())

    def test_members_list_but_cannot_manage(self):
        make_session(self.org, name='Yoga')
        member = make_user('member')
        add_member(member, self.org, MembershipRole.CLIENT)
        self.assertEqual([s.name for s in list_sessions(member, self.org.id)], ['Yoga'])
        with self.assertRaises(ForbiddenError):
            create_session(member, self.org.id, {'name': 'Spin'})

    def test_other_tenant_cannot_see_session(self):
        session = make_session(self.org)
        outsider = make_user('outsider')
        add_member(outsider, make_organization('other'), MembershipRole.OWNER)
        with self.assertRaises(NotFoundError):
            update_session(outsider, session.id, {'slots': 3})


class TimeSlotServiceTests(TestCase):
    def setUp(self):
        self.org = make_organization()
        self.owner = make_user('owner')
        add_member(self.owner, self.org, MembershipRole.OWNER)
        self.session = make_session(self.org, timetable=[])

    def test_add_and_remove(self):
        slot = add_time_slot(self.owner, self.session.id, {
            'day_of_week': Weekday.SUNDAY, 'start_time': '07:30', 'end_time': '08:15',
        })
        self.assertEqual(self.session.timetable.count(), 1)
        remove_time_slot(self.owner, self.session.id, slot.id)
        self.assertEqual(self.session.timetable.count(), 0)

    def test_rejects_invalid_slots(self):
        invalid = [
            {'day_of_week': 7, 'start_time': '09:00', 'end_time': '10:00'},
            {'day_of_week': 1, 'start_time': '9:00', 'end_time': '10:00'},
            {'day_of_week': 1, 'start_time': '24:00', 'end_time': '10:00'},
            {'day_of_week': 1, 'start_time': '10:00', 'end_time': '10:00'},
            {'day_of_week': 1, 'start_time': '11:00', 'end_time': '10:00'},
        ]
        for data in invalid:
            with self.assertRaises(ValidationError, msg=data):
                add_time_slot(self.owner, self.session.id, data)
        self.assertEqual(self.session.timetable.count(), 0)

    def test_duplicate_slot_rejected(self):
        data = {'day_of_week': 1, 'start_time': '09:00', 'end_time': '10:00'}
        add_time_slot(self.owner, self.session.id, data)
        with self.assertRaises(ValidationError):
            add_time_slot(self.owner, self.session.id, data)

    def test_remove_slot_of_other_session_is_not_found(self):
        other = make_session(self.org, name='Other')
        slot = other.timetable.get()
        with self.assertRaises(NotFoundError):
            remove_time_slot(self.owner, self.session.id, slot.id)


class TimetableApiTests(TestCase):
    def setUp(self):
        self.org = make_organization()
        self.owner = make_user('owner')
        add_member(self.owner, self.org, MembershipRole.OWNER)
        self.client.force_login(self.owner)

    def test_create_session_and_slot(self):
        response = self.client.post(
            reverse('timetable:api_sessions'), data={'name': 'Spin', 'slots': 10},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 201)
        session_id = response.json()['id']

        response = self.client.post(
            reverse('timetable:api_add_slot', args=[session_id]),
            data={'day_of_week': 3, 'start_time': '18:00', 'end_time': '19:00'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 201)

        listing = self.client.get(reverse('timetable:api_sessions')).json()['sessions']
        self.assertEqual(listing[0]['timetable'][0]['start_time'], '18:00')

        response = self.client.delete(reverse('timetable:api_session_detail', args=[session_id]))
        self.assertEqual(response.status_code, 204)
