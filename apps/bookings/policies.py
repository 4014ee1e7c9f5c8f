"""
Organization booking policies, applied by the engine before any write.

  check_allowance      - membership gate on new bookings
  check_change_window  - minimum notice for non-cancel status changes
"""
import logging

from django.utils import timezone

from .exceptions import AllowanceError, ChangeWindowError
from .ledger import count_client_active_bookings
from .models import BookingStatus

logger = logging.getLogger(__name__)


def check_allowance(organization, client, active_count=None) -> None:
    """
    Raise AllowanceError when the organization requires membership and the
    client's active bookings already use up their allowance.
    """
    if not organization.require_membership_for_booking:
        return

    allowance = client.allowance
    if active_count is None:
        active_count = count_client_active_bookings(client.pk)

    if not allowance.permits(active_count):
        logger.warning(
            'Allowance exhausted for client %s: %s active, allowance %s',
            client.pk, active_count, allowance,
        )
        raise AllowanceError()


def hours_until(start_time, now=None) -> float:
    now = now or timezone.now()
    return (start_time - now).total_seconds() / 3600


def check_change_window(organization, booking, new_status, now=None) -> None:
    """
    Non-cancel changes must happen at least booking_change_hours before the
    booking starts. Cancellation is always allowed. Unset threshold = no window.
    """
    threshold = organization.booking_change_hours
    if threshold is None or new_status == BookingStatus.CANCELLED or new_status == booking.status:
        return

    if hours_until(booking.start_time, now) < threshold:
        raise ChangeWindowError(threshold)
