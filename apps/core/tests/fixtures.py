"""Shared builders for app tests. Not collected by pytest (no test_ prefix)."""
from datetime import date, datetime

from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.clients.models import Client
from apps.organizations.models import MembershipRole, Organization, OrganizationMembership
from apps.spaces.models import Space
from apps.timetable.models import ServiceSession, TimeSlotTemplate, Weekday

# 2030-01-06 is a Sunday; the Monday after it is the usual booking day.
SUNDAY = date(2030, 1, 6)
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)


def at(day, hhmm):
    """Aware datetime for a local 'HH:MM' on day."""
    hour, minute = map(int, hhmm.split(':'))
    return timezone.make_aware(datetime(day.year, day.month, day.day, hour, minute))


def make_user(username, email=None):
    return get_user_model().objects.create_user(
        username=username,
        email=email if email is not None else f'{username}@example.com',
        password='pw',
    )


def make_organization(slug='studio', **fields):
    fields.setdefault('name', slug.title())
    return Organization.objects.create(slug=slug, **fields)


def add_member(user, organization, role=MembershipRole.OWNER):
    return OrganizationMembership.objects.create(user=user, organization=organization, role=role)


def make_client(organization, email, user=None, session_allowance=None, name=None):
    return Client.objects.create(
        organization=organization,
        email=email,
        name=name or email.split('@')[0].title(),
        user=user,
        session_allowance=session_allowance,
    )


def make_session(organization, name='Yoga', slots=2, timetable=((Weekday.MONDAY, '09:00', '10:00'),)):
    session = ServiceSession.objects.create(organization=organization, name=name, slots=slots)
    for day, start, end in timetable:
        TimeSlotTemplate.objects.create(session=session, day_of_week=day, start_time=start, end_time=end)
    return session


def make_space(organization, name='Room', capacity=1):
    return Space.objects.create(organization=organization, name=name, capacity=capacity)
