"""
Projection of recurring weekly templates and operating hours onto concrete,
timezone-aware instants.

Weekdays are Sunday-based (0 = Sunday .. 6 = Saturday) to match
apps.timetable.models.Weekday. Template times are local 'HH:MM' strings and
are interpreted in the active Django timezone unless tz is given.

Public API:
  sunday_based_weekday(day)
  parse_hhmm(value)
  project_weekly_template(templates, target_date)
  occurrences_for_date(templates, target_date, tz=None)
  generate_time_slots(start_date, end_date, slot_duration_minutes, day_start_hour, day_end_hour, tz=None)
  generate_operating_hour_slots(start_date, end_date, ...)
"""
from datetime import date as date_type, datetime, time as time_type, timedelta
from typing import NamedTuple

from django.conf import settings
from django.utils import timezone

from apps.core.exceptions import ValidationError

from .intervals import Interval


class Occurrence(NamedTuple):
    """One projected template instance on a concrete date."""
    start: datetime
    end: datetime
    start_time: str
    end_time: str

    @property
    def key(self) -> str:
        return f'{self.start_time}-{self.end_time}'

    @property
    def interval(self) -> Interval:
        return Interval(self.start, self.end)


def sunday_based_weekday(day: date_type) -> int:
    return day.isoweekday() % 7


def parse_hhmm(value: str) -> time_type:
    """'09:30' -> time(9, 30). Raises ValueError on anything else."""
    return datetime.strptime(value, '%H:%M').time()


def _as_date(value) -> date_type:
    if isinstance(value, datetime):
        return timezone.localtime(value).date() if timezone.is_aware(value) else value.date()
    return value


def _field(template, name):
    if isinstance(template, dict):
        return template[name]
    return getattr(template, name)


def _at(day: date_type, clock: time_type, tz) -> datetime:
    return timezone.make_aware(datetime.combine(day, clock), tz)


def project_weekly_template(templates, target_date) -> list:
    """
    Templates matching the weekday of target_date, as
    [{'start_time': 'HH:MM', 'end_time': 'HH:MM'}, ...] sorted by start time.
    """
    weekday = sunday_based_weekday(_as_date(target_date))
    matches = [
        {'start_time': _field(t, 'start_time'), 'end_time': _field(t, 'end_time')}
        for t in templates
        if _field(t, 'day_of_week') == weekday
    ]
    # zero-padded HH:MM sorts correctly as text
    return sorted(matches, key=lambda s: (s['start_time'], s['end_time']))


def occurrences_for_date(templates, target_date, tz=None) -> list:
    """Project templates onto target_date as aware Occurrence values."""
    day = _as_date(target_date)
    tz = tz or timezone.get_current_timezone()
    return [
        Occurrence(
            start=_at(day, parse_hhmm(slot['start_time']), tz),
            end=_at(day, parse_hhmm(slot['end_time']), tz),
            start_time=slot['start_time'],
            end_time=slot['end_time'],
        )
        for slot in project_weekly_template(templates, day)
    ]


def day_bounds(day, tz=None) -> Interval:
    """[local midnight of day, local midnight of the next day)."""
    day = _as_date(day)
    tz = tz or timezone.get_current_timezone()
    return Interval(
        _at(day, time_type.min, tz),
        _at(day + timedelta(days=1), time_type.min, tz),
    )


def generate_time_slots(start_date, end_date, slot_duration_minutes=30,
                        day_start_hour=9, day_end_hour=17, tz=None) -> list:
    """
    Fixed-length Interval slots inside the daily [day_start_hour, day_end_hour)
    window for every calendar day from start_date to end_date inclusive.
    A slot that would overrun the window is dropped.
    """
    if slot_duration_minutes is None or slot_duration_minutes <= 0:
        raise ValidationError('Slot duration must be a positive number of minutes.')
    if not 0 <= day_start_hour <= day_end_hour <= 24:
        raise ValidationError('Operating hours must satisfy 0 <= start <= end <= 24.')

    tz = tz or timezone.get_current_timezone()
    step = timedelta(minutes=slot_duration_minutes)
    first, last = _as_date(start_date), _as_date(end_date)

    slots = []
    day = first
    while day <= last:
        midnight = datetime.combine(day, time_type.min)
        current = midnight + timedelta(hours=day_start_hour)
        window_end = midnight + timedelta(hours=day_end_hour)
        while current + step <= window_end:
            slots.append(Interval(
                timezone.make_aware(current, tz),
                timezone.make_aware(current + step, tz),
            ))
            current += step
        day += timedelta(days=1)
    return slots


def generate_operating_hour_slots(start_date, end_date, slot_duration_minutes=None,
                                  day_start_hour=None, day_end_hour=None, tz=None) -> list:
    """generate_time_slots with defaults taken from the OPERATING_* settings."""
    return generate_time_slots(
        start_date,
        end_date,
        slot_duration_minutes if slot_duration_minutes is not None else settings.OPERATING_SLOT_MINUTES,
        day_start_hour if day_start_hour is not None else settings.OPERATING_HOURS_START,
        day_end_hour if day_end_hour is not None else settings.OPERATING_HOURS_END,
        tz=tz,
    )
