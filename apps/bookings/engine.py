"""
Booking engine: pure business logic, no HTTP/request awareness.

Public API:
  create_booking(principal, *, start_time, end_time, session_id=None, space_id=None, client_id=None, notes='', now=None)
  change_booking_status(principal, booking_id, new_status, reason='', now=None)
  check_in(principal, booking_id, now=None)
  find_todays_booking(principal, client_id, now=None)

Every operation authorizes the principal against the organization that owns
the target, exactly once, before reading or writing anything else.
"""
import logging
from datetime import datetime

from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.clients.models import Client
from apps.clients.services import resolve_client_for_user
from apps.core.shortcuts import get_object_or_not_found
from apps.organizations.access import ANY_ROLE, STAFF_ROLES, authorize
from apps.organizations.models import MembershipRole, Organization
from apps.spaces.models import Space
from apps.timetable.models import ServiceSession

from .exceptions import (
    AlreadyCheckedInError,
    AlreadyInStatusError,
    CapacityError,
    DuplicateBookingError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from .ledger import (
    active_bookings,
    count_active_bookings,
    has_capacity,
    resource_for_session,
    resource_for_space,
)
from .models import ALLOWED_TRANSITIONS, Booking, BookingStatus, BookingStatusLog
from .policies import check_allowance, check_change_window
from .projection import occurrences_for_date

logger = logging.getLogger(__name__)


# ── Input helpers ─────────────────────────────────────────────────────────────

def _parse_instant(value, field: str, errors: dict):
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = parse_datetime(value)
        except ValueError:
            parsed = None
    else:
        parsed = None

    if parsed is None:
        errors[field] = ['Enter a valid ISO 8601 date/time.']
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _validate_window(start_time, end_time, now):
    errors = {}
    start = _parse_instant(start_time, 'start_time', errors)
    end = _parse_instant(end_time, 'end_time', errors)
    if errors:
        raise ValidationError('Validation error', errors=errors)
    if end <= start:
        raise ValidationError('End time must be after start time.')
    if start < now:
        raise ValidationError('Cannot book a time in the past.')
    return start, end


def _actor(principal) -> str:
    return principal.get_username() if principal is not None else 'system'


def _owns_client(principal, client) -> bool:
    return client.user_id is not None and client.user_id == principal.pk


def _matches_timetable(session, start, end) -> bool:
    day = timezone.localtime(start).date()
    return any(
        occ.start == start and occ.end == end
        for occ in occurrences_for_date(session.timetable.all(), day)
    )


# ── Create ────────────────────────────────────────────────────────────────────

def create_booking(principal, *, start_time, end_time, session_id=None, space_id=None,
                   client_id=None, notes='', now=None) -> Booking:
    """
    Book a session occurrence and/or a space for a client.

    Steps:
      1. Validate the window (end after start, not in the past)
      2. Resolve resource(s) and authorize
      3. Inside one transaction, with resource and client rows locked:
         resolve the client, allowance gate, capacity gate, insert, audit log

    Without client_id the caller books for themselves; their client record
    is looked up (or created) from their login identity. Staff always pass
    client_id.
    """
    now = now or timezone.now()
    if session_id is None and space_id is None:
        raise ValidationError('A session or a space is required.')
    start, end = _validate_window(start_time, end_time, now)

    session = space = None
    if session_id is not None:
        session = get_object_or_not_found(ServiceSession, 'Session not found.', id=session_id)
    if space_id is not None:
        space = get_object_or_not_found(Space, 'Space not found.', id=space_id)
    if session and space and session.organization_id != space.organization_id:
        raise NotFoundError('Space not found.')

    organization_id = session.organization_id if session else space.organization_id
    auth = authorize(principal, organization_id, ANY_ROLE).enforce('Session' if session else 'Space')

    if session and not session.is_active:
        raise ValidationError('This session is not open for booking.')
    if space and not space.is_active:
        raise ValidationError('This space is not open for booking.')
    if session and not _matches_timetable(session, start, end):
        raise ValidationError('The requested time does not match the session timetable.')

    if client_id is None and auth.is_staff:
        raise ValidationError(
            'Validation error', errors={'client_id': ['Staff must choose the client to book for.']},
        )

    with transaction.atomic():
        # Lock order: session, space, client. Every writer follows it.
        resources = []
        if session:
            session = ServiceSession.objects.select_for_update().get(pk=session.pk)
            resources.append(resource_for_session(session))
        if space:
            space = Space.objects.select_for_update().get(pk=space.pk)
            resources.append(resource_for_space(space))
        organization = Organization.objects.get(pk=organization_id)

        # Resolved inside the transaction so a rejected booking links or creates no client
        if client_id is None:
            client = resolve_client_for_user(principal, organization)
        else:
            client = get_object_or_not_found(
                Client.objects.for_organization(organization_id), 'Client not found.', id=client_id,
            )
            if auth.role == MembershipRole.CLIENT and not _owns_client(principal, client):
                raise ForbiddenError('Clients can only book for themselves.')
        client = Client.objects.select_for_update().get(pk=client.pk)

        check_allowance(organization, client)

        for resource in resources:
            if active_bookings(resource, start, end).filter(
                client=client, start_time=start, end_time=end,
            ).exists():
                raise DuplicateBookingError()

            active = count_active_bookings(resource, start, end)
            if not has_capacity(resource.capacity, active):
                logger.info(
                    'Capacity reached on %s %s for %s-%s (%s/%s)',
                    resource.kind, resource.pk, start, end, active, resource.capacity,
                )
                raise CapacityError()

        try:
            with transaction.atomic():
                booking = Booking.objects.create(
                    organization_id=organization_id,
                    session=session,
                    space=space,
                    client=client,
                    created_by=principal,
                    start_time=start,
                    end_time=end,
                    status=BookingStatus.CONFIRMED,
                    notes=notes or '',
                )
        except IntegrityError:
            raise DuplicateBookingError()

        BookingStatusLog.objects.create(
            booking=booking,
            from_status='',
            to_status=booking.status,
            changed_by=_actor(principal),
            reason='Booking created',
        )

    logger.info(
        'Booking %s created: client=%s session=%s space=%s %s-%s',
        booking.id, client.pk, session.pk if session else None,
        space.pk if space else None, start, end,
    )
    return booking


# ── Status changes ────────────────────────────────────────────────────────────

@transaction.atomic
def change_booking_status(principal, booking_id, new_status, reason='', now=None) -> Booking:
    """
    Move a booking to new_status.

    Staff may change any booking in their organization; a client may only
    change their own. Non-cancel changes respect the organization's change
    window. Cancelling frees capacity and allowance immediately.
    """
    if new_status not in BookingStatus.values:
        raise ValidationError(
            'Validation error',
            errors={'status': [f'Must be one of {", ".join(BookingStatus.values)}.']},
        )

    booking = get_object_or_not_found(
        Booking.objects.select_for_update(), 'Booking not found.', id=booking_id,
    )
    auth = authorize(principal, booking.organization_id, ANY_ROLE).enforce('Booking')
    if not auth.is_staff and not _owns_client(principal, booking.client):
        raise ForbiddenError('You can only change your own bookings.')

    if new_status == booking.status:
        raise AlreadyInStatusError(f'Booking is already {BookingStatus(new_status).label.lower()}.')
    if new_status not in ALLOWED_TRANSITIONS[booking.status]:
        raise InvalidTransitionError(
            f'Cannot change a {BookingStatus(booking.status).label.lower()} booking '
            f'to {BookingStatus(new_status).label.lower()}.'
        )

    check_change_window(booking.organization, booking, new_status, now)

    old_status = booking.status
    booking.transition_to(new_status, changed_by=_actor(principal), reason=reason)
    logger.info('Booking %s: %s -> %s by %s', booking.id, old_status, new_status, _actor(principal))
    return booking


# ── Check-in ──────────────────────────────────────────────────────────────────

@transaction.atomic
def check_in(principal, booking_id, now=None) -> Booking:
    """Staff-only, once per booking, on the booking's local calendar day."""
    now = now or timezone.now()
    booking = get_object_or_not_found(
        Booking.objects.select_for_update(), 'Booking not found.', id=booking_id,
    )
    authorize(principal, booking.organization_id, STAFF_ROLES).enforce('Booking')

    if booking.status == BookingStatus.CANCELLED:
        raise NotFoundError('Booking not found.')
    if booking.checked_in:
        raise AlreadyCheckedInError()
    if timezone.localtime(booking.start_time).date() != timezone.localtime(now).date():
        raise ValidationError('Check-in is only available on the day of the booking.')

    booking.mark_checked_in(changed_by=_actor(principal), at=now)
    logger.info('Booking %s checked in by %s', booking.id, _actor(principal))
    return booking


def find_todays_booking(principal, client_id, now=None) -> Booking:
    """The client's earliest active booking starting today (staff only)."""
    now = now or timezone.now()
    client = get_object_or_not_found(Client, 'Client not found.', id=client_id)
    authorize(principal, client.organization_id, STAFF_ROLES).enforce('Client')

    booking = (
        Booking.objects
        .active()
        .filter(client=client)
        .starting_on(timezone.localtime(now).date())
        .select_related('session', 'space', 'client')
        .order_by('start_time')
        .first()
    )
    if booking is None:
        raise NotFoundError('No booking found for today.')
    return booking
