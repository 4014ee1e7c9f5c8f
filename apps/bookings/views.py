"""
Booking JSON endpoints: thin adapters over engine.py / availability.py.

All business rules live in the engine; views only parse parameters and
serialize results. Domain errors become JSON responses via json_api.
"""
from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_GET, require_POST

from apps.core.decorators import api_login_required, json_api, read_json_body
from apps.core.exceptions import ValidationError
from apps.organizations.access import ANY_ROLE, default_organization_id

from .availability import get_session_day_availability, get_space_availability, list_client_bookings
from .engine import change_booking_status, check_in, create_booking, find_todays_booking


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _parse_date_param(request, name, default=None):
    raw = request.GET.get(name)
    if not raw:
        return default
    try:
        value = parse_date(raw)
    except ValueError:
        value = None
    if value is None:
        raise ValidationError('Validation error', errors={name: ['Enter a date as YYYY-MM-DD.']})
    return value


def serialize_booking(booking) -> dict:
    return {
        'id': str(booking.id),
        'organization_id': str(booking.organization_id),
        'session_id': str(booking.session_id) if booking.session_id else None,
        'space_id': str(booking.space_id) if booking.space_id else None,
        'client_id': str(booking.client_id),
        'start_time': booking.start_time.isoformat(),
        'end_time': booking.end_time.isoformat(),
        'status': booking.status,
        'checked_in': booking.checked_in,
        'checked_in_at': booking.checked_in_at.isoformat() if booking.checked_in_at else None,
        'notes': booking.notes,
    }


# ─────────────────────────────────────────────────────────────────────────────
# Availability
# ─────────────────────────────────────────────────────────────────────────────

@require_GET
@api_login_required
@json_api
def api_space_availability(request):
    """?organization_id=&start_date=&end_date=&space_id=  (all optional)"""
    organization_id = (
        request.GET.get('organization_id')
        or default_organization_id(request.user, ANY_ROLE)
    )
    start_date = _parse_date_param(request, 'start_date', timezone.localdate())
    end_date = _parse_date_param(request, 'end_date')
    spaces = get_space_availability(
        request.user, organization_id, start_date, end_date,
        space_id=request.GET.get('space_id') or None,
    )
    return JsonResponse({'spaces': spaces})


@require_GET
@api_login_required
@json_api
def api_session_availability(request, session_id):
    target_date = _parse_date_param(request, 'date', timezone.localdate())
    slots = get_session_day_availability(request.user, session_id, target_date)
    return JsonResponse({'date': target_date.isoformat(), 'slots': slots})


# ─────────────────────────────────────────────────────────────────────────────
# Bookings
# ─────────────────────────────────────────────────────────────────────────────

@require_POST
@api_login_required
@json_api
def api_create_booking(request):
    payload = read_json_body(request)
    booking = create_booking(
        request.user,
        session_id=payload.get('session_id'),
        space_id=payload.get('space_id'),
        client_id=payload.get('client_id'),
        start_time=payload.get('start_time'),
        end_time=payload.get('end_time'),
        notes=payload.get('notes', ''),
    )
    return JsonResponse(serialize_booking(booking), status=201)


@require_GET
@api_login_required
@json_api
def api_my_bookings(request):
    bookings = list_client_bookings(request.user, request.GET.get('organization_id') or None)
    return JsonResponse({'bookings': [serialize_booking(b) for b in bookings]})


@require_POST
@api_login_required
@json_api
def api_change_status(request, booking_id):
    payload = read_json_body(request)
    booking = change_booking_status(
        request.user, booking_id, payload.get('status'), reason=payload.get('reason', ''),
    )
    return JsonResponse(serialize_booking(booking))


# ─────────────────────────────────────────────────────────────────────────────
# Check-in (front desk)
# ─────────────────────────────────────────────────────────────────────────────

@require_POST
@api_login_required
@json_api
def api_check_in(request, booking_id):
    booking = check_in(request.user, booking_id)
    return JsonResponse(serialize_booking(booking))


@require_GET
@api_login_required
@json_api
def api_todays_booking(request, client_id):
    booking = find_todays_booking(request.user, client_id)
    data = serialize_booking(booking)
    data['client_name'] = booking.client.name
    data['resource_name'] = booking.session.name if booking.session_id else booking.space.name
    return JsonResponse(data)
