"""
Read-side availability queries.

Public API:
  get_session_day_availability(principal, session_id, target_date)
  get_space_availability(principal, organization_id, start_date, end_date=None, space_id=None)
  list_client_bookings(principal, organization_id=None, now=None)
"""
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from apps.core.exceptions import ValidationError
from apps.core.shortcuts import get_object_or_not_found
from apps.organizations.access import ANY_ROLE, authorize
from apps.spaces.models import Space
from apps.timetable.models import ServiceSession

from .intervals import as_interval, intervals_overlap
from .ledger import has_capacity, occupancy_by_slot_key, remaining_capacity, slot_key
from .models import Booking
from .projection import generate_operating_hour_slots, occurrences_for_date


def get_session_day_availability(principal, session_id, target_date) -> list:
    """
    Each projected occurrence of the session on target_date with its
    capacity, active booking count and remaining seats. Staff also get the
    list of bookings held on each occurrence.
    """
    session = get_object_or_not_found(ServiceSession, 'Session not found.', id=session_id)
    auth = authorize(principal, session.organization_id, ANY_ROLE).enforce('Session')

    occurrences = occurrences_for_date(session.timetable.all(), target_date)
    bookings = list(
        Booking.objects
        .active()
        .filter(session=session)
        .starting_on(target_date)
        .select_related('client')
        .order_by('start_time', 'created_at')
    )
    counts = occupancy_by_slot_key(bookings)

    slots = []
    for occ in occurrences:
        key = slot_key(occ.start, occ.end)
        booked = counts[key]
        remaining = remaining_capacity(session.slots, booked)
        slot = {
            'start_time': occ.start_time,
            'end_time': occ.end_time,
            'start': occ.start.isoformat(),
            'end': occ.end.isoformat(),
            'capacity': session.slots,
            'booked': booked,
            'remaining': remaining,
            'available': remaining > 0,
        }
        if auth.is_staff:
            slot['bookings'] = [
                {
                    'id': str(b.id),
                    'client_id': str(b.client_id),
                    'client_name': b.client.name,
                    'status': b.status,
                    'checked_in': b.checked_in,
                }
                for b in bookings
                if slot_key(b.start_time, b.end_time) == key
            ]
        slots.append(slot)
    return slots


def get_space_availability(principal, organization_id, start_date, end_date=None, space_id=None) -> list:
    """
    For every active space in the organization (or just space_id), the
    operating-hours slots between start_date and end_date (inclusive) that
    still have capacity left.
    """
    authorize(principal, organization_id, ANY_ROLE).enforce('Organization')

    if end_date is None:
        end_date = start_date + timedelta(days=settings.AVAILABILITY_DEFAULT_DAYS - 1)
    if end_date < start_date:
        raise ValidationError('End date must be on or after start date.')
    if (end_date - start_date).days >= settings.AVAILABILITY_MAX_DAYS:
        raise ValidationError(f'Date range cannot exceed {settings.AVAILABILITY_MAX_DAYS} days.')

    spaces = Space.objects.for_organization(organization_id).active().order_by('name')
    if space_id is not None:
        spaces = [get_object_or_not_found(spaces, 'Space not found.', id=space_id)]

    grid = generate_operating_hour_slots(start_date, end_date)
    if not grid:
        return [{'space_id': str(s.id), 'name': s.name, 'capacity': s.capacity, 'slots': []} for s in spaces]

    window_start, window_end = grid[0].start, grid[-1].end
    bookings = list(
        Booking.objects
        .active()
        .filter(space__in=spaces, start_time__lt=window_end, end_time__gt=window_start)
        .only('space_id', 'start_time', 'end_time', 'status')
    )

    result = []
    for space in spaces:
        occupied = [as_interval(b) for b in bookings if b.space_id == space.id]
        free = []
        for slot in grid:
            booked = sum(1 for o in occupied if intervals_overlap(slot, o))
            if has_capacity(space.capacity, booked):
                free.append({
                    'start': slot.start.isoformat(),
                    'end': slot.end.isoformat(),
                    'remaining': remaining_capacity(space.capacity, booked),
                })
        result.append({
            'space_id': str(space.id),
            'name': space.name,
            'capacity': space.capacity,
            'slots': free,
        })
    return result


def list_client_bookings(principal, organization_id=None, now=None):
    """Upcoming active bookings held by the principal's own client records, soonest first."""
    now = now or timezone.now()
    qs = (
        Booking.objects
        .active()
        .filter(client__user=principal, end_time__gt=now)
        .select_related('session', 'space', 'client')
        .order_by('start_time')
    )
    if organization_id is not None:
        authorize(principal, organization_id, ANY_ROLE).enforce('Organization')
        qs = qs.for_organization(organization_id)
    return qs
