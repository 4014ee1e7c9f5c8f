"""
Occupancy ledger: counts active bookings against resource capacity.

A bookable resource is either a ServiceSession (capacity = slots, conflicts
only when start and end match exactly) or a Space (capacity = capacity,
conflicts on any interval overlap). CANCELLED bookings never count.
"""
import enum
from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from .models import Booking


class ConflictStrategy(enum.Enum):
    EXACT = 'exact'
    OVERLAP = 'overlap'


@dataclass(frozen=True)
class BookableResource:
    kind: str
    pk: object
    organization_id: object
    name: str
    capacity: int
    strategy: ConflictStrategy

    @property
    def lookup(self) -> dict:
        return {f'{self.kind}_id': self.pk}


def resource_for_session(session) -> BookableResource:
    return BookableResource(
        kind='session',
        pk=session.pk,
        organization_id=session.organization_id,
        name=session.name,
        capacity=session.slots,
        strategy=ConflictStrategy.EXACT,
    )


def resource_for_space(space) -> BookableResource:
    return BookableResource(
        kind='space',
        pk=space.pk,
        organization_id=space.organization_id,
        name=space.name,
        capacity=space.capacity,
        strategy=ConflictStrategy.OVERLAP,
    )


def active_bookings(resource: BookableResource, start_time, end_time):
    """Active bookings on resource that conflict with [start_time, end_time)."""
    qs = Booking.objects.active().filter(**resource.lookup)
    if resource.strategy is ConflictStrategy.EXACT:
        return qs.filter(start_time=start_time, end_time=end_time)
    return qs.filter(start_time__lt=end_time, end_time__gt=start_time)


def count_active_bookings(resource: BookableResource, start_time, end_time) -> int:
    return active_bookings(resource, start_time, end_time).count()


def remaining_capacity(capacity: int, active_count: int) -> int:
    return max(0, capacity - active_count)


def has_capacity(capacity: int, active_count: int) -> bool:
    return active_count < capacity


def count_client_active_bookings(client_id) -> int:
    """Active bookings held by a client across all resources (allowance usage)."""
    return Booking.objects.active().filter(client_id=client_id).count()


def _clock(value) -> str:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.strftime('%H:%M')
    return value


def slot_key(start, end) -> str:
    """'HH:MM-HH:MM' in local time; accepts datetimes or 'HH:MM' strings."""
    return f'{_clock(start)}-{_clock(end)}'


def occupancy_by_slot_key(bookings) -> Counter:
    """Active booking count keyed by slot_key of each booking's start/end."""
    return Counter(
        slot_key(b.start_time, b.end_time)
        for b in bookings
        if b.is_active
    )
