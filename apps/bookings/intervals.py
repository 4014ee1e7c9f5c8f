"""
Half-open time interval arithmetic.

All comparisons use exclusive boundaries: an interval ending at 10:00 does
not overlap one starting at 10:00. Works for datetimes (aware or naive, as
long as both sides agree) and for any other ordered values.
"""
from typing import NamedTuple


class Interval(NamedTuple):
    start: object
    end: object


def as_interval(value) -> Interval:
    """Coerce a tuple, Interval, or object with start_time/end_time into an Interval."""
    if isinstance(value, Interval):
        return value
    if isinstance(value, tuple):
        return Interval(*value)
    if isinstance(value, dict):
        return Interval(value['start'], value['end'])
    return Interval(value.start_time, value.end_time)


def is_empty(interval) -> bool:
    interval = as_interval(interval)
    return not interval.start < interval.end


def intervals_overlap(a, b) -> bool:
    """True when [a.start, a.end) and [b.start, b.end) share any instant."""
    a, b = as_interval(a), as_interval(b)
    # Zero-length or inverted intervals never conflict with anything
    if is_empty(a) or is_empty(b):
        return False
    return a.start < b.end and b.start < a.end


def has_conflict(candidate, existing) -> bool:
    return any(intervals_overlap(candidate, other) for other in existing)


def filter_available_slots(slots, occupied) -> list:
    """Slots, in input order, that overlap none of the occupied intervals."""
    occupied = [as_interval(o) for o in occupied]
    return [slot for slot in slots if not has_conflict(slot, occupied)]


def duration_minutes(interval) -> int:
    interval = as_interval(interval)
    return round((interval.end - interval.start).total_seconds() / 60)
